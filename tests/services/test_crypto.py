import base64

import pytest

from matchgate.core.errors import ConfigurationError
from matchgate.services.crypto import (
    ConversationKeyDeriver,
    MessageCipher,
    decrypt_for_conversation,
    encrypt_for_conversation,
    generate_salt,
    looks_encrypted,
)

ALICE = "alice@example.com"
BOB = "bob@example.com"


@pytest.fixture
def deriver():
    return ConversationKeyDeriver("unit-test-encryption-secret")


def test_salt_is_128_bit_hex():
    salt = generate_salt()
    assert len(salt) == 32
    int(salt, 16)
    assert generate_salt() != salt


def test_key_derivation_is_symmetric(deriver):
    salt = generate_salt()
    assert deriver.derive_key(ALICE, BOB, salt) == deriver.derive_key(BOB, ALICE, salt)
    assert len(deriver.derive_key(ALICE, BOB, salt)) == 32


def test_key_depends_on_salt_and_secret(deriver):
    key = deriver.derive_key(ALICE, BOB, "a" * 32)
    assert key != deriver.derive_key(ALICE, BOB, "b" * 32)
    assert key != ConversationKeyDeriver("other").derive_key(ALICE, BOB, "a" * 32)


def test_key_derivation_requires_salt(deriver):
    with pytest.raises(ValueError):
        deriver.derive_key(ALICE, BOB, "")


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_encryption_secret_is_fatal(secret):
    with pytest.raises(ConfigurationError):
        ConversationKeyDeriver(secret)


@pytest.mark.parametrize("plaintext", ["", "hi", "ünïcødé 🙂", "x" * 5000])
def test_cipher_round_trip(deriver, plaintext):
    key = deriver.derive_key(ALICE, BOB, generate_salt())
    ciphertext = MessageCipher.encrypt(plaintext, key)
    assert ciphertext != plaintext or plaintext == ""
    assert MessageCipher.decrypt(ciphertext, key) == plaintext


def test_encryption_is_randomized(deriver):
    key = deriver.derive_key(ALICE, BOB, generate_salt())
    assert MessageCipher.encrypt("hello", key) != MessageCipher.encrypt("hello", key)


def test_salt_isolation(deriver):
    ciphertext = encrypt_for_conversation("meet at noon", ALICE, BOB, "1" * 32, deriver)
    assert decrypt_for_conversation(ciphertext, ALICE, BOB, "2" * 32, deriver) != "meet at noon"


def test_conversation_round_trip_either_direction(deriver):
    salt = generate_salt()
    ciphertext = encrypt_for_conversation("hello bob", ALICE, BOB, salt, deriver)
    assert decrypt_for_conversation(ciphertext, BOB, ALICE, salt, deriver) == "hello bob"


@pytest.mark.parametrize("salt", [None, "", "f" * 32])
def test_decrypt_with_bad_salt_returns_ciphertext(deriver, salt):
    ciphertext = encrypt_for_conversation("secret", ALICE, BOB, generate_salt(), deriver)
    assert decrypt_for_conversation(ciphertext, ALICE, BOB, salt, deriver) == ciphertext


@pytest.mark.parametrize(
    "body",
    ["hey there", "not base64 !!", base64.b64encode(b"short").decode(), "=" * 60],
)
def test_decrypt_tolerates_legacy_plaintext(deriver, body):
    key = deriver.derive_key(ALICE, BOB, generate_salt())
    assert MessageCipher.decrypt(body, key) == body


def test_encrypt_for_conversation_requires_salt(deriver):
    with pytest.raises(ValueError):
        encrypt_for_conversation("hello", ALICE, BOB, "", deriver)


def test_looks_encrypted(deriver):
    key = deriver.derive_key(ALICE, BOB, generate_salt())
    assert looks_encrypted(MessageCipher.encrypt("a reasonably long message body", key))
    assert not looks_encrypted("hello")
    assert not looks_encrypted("this is a long plaintext message with spaces in it, clearly")
    assert not looks_encrypted("A" * 50)
