# src/matchgate/services/crypto.py
"""Conversation key derivation and message encryption."""

from __future__ import annotations

import base64
import binascii
import logging
import re
import secrets
from functools import lru_cache
from typing import Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from matchgate.core.errors import ConfigurationError
from matchgate.core.settings import settings
from matchgate.models.match import canonical_pair

logger = logging.getLogger(__name__)

SALT_BYTES: Final[int] = 16
NONCE_BYTES: Final[int] = 12
TAG_BYTES: Final[int] = 16
LOOKS_ENCRYPTED_MIN_LENGTH: Final[int] = 50
_BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/]+=*$")


def generate_salt() -> str:
    """Return a fresh 128-bit conversation salt, hex encoded."""
    return secrets.token_hex(SALT_BYTES)


def looks_encrypted(text: str) -> bool:
    """Guess whether an unflagged message body is ciphertext.

    Only consulted for messages without an ``is_encrypted`` flag; the flag,
    when present, is authoritative.
    """
    return len(text) > LOOKS_ENCRYPTED_MIN_LENGTH and bool(_BASE64_PATTERN.fullmatch(text))


class ConversationKeyDeriver:
    """Derives the symmetric key shared by the two members of a match."""

    def __init__(self, secret: str | None) -> None:
        if not secret:
            raise ConfigurationError("ENCRYPTION_SECRET is not configured")
        self._secret = secret.encode("utf-8")

    def derive_key(self, a: str, b: str, salt: str) -> bytes:
        """Return HMAC-SHA256 over the sorted pair and the conversation salt.

        Raises:
            ValueError: If ``salt`` is empty.
        """
        if not salt:
            raise ValueError("Conversation salt is missing")
        lo, hi = canonical_pair(a, b)
        mac = hmac.HMAC(self._secret, hashes.SHA256())
        mac.update("\n".join((lo, hi, salt)).encode("utf-8"))
        return mac.finalize()


class MessageCipher:
    """AES-256-GCM with base64 armor and a tolerant decrypt."""

    @staticmethod
    def encrypt(plaintext: str, key: bytes) -> str:
        """Encrypt ``plaintext`` and return base64(nonce || ciphertext || tag)."""
        nonce = secrets.token_bytes(NONCE_BYTES)
        sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(nonce + sealed).decode("ascii")

    @staticmethod
    def decrypt(ciphertext: str, key: bytes) -> str:
        """Decrypt ``ciphertext``; on any failure return it unchanged.

        Conversations mix encrypted rows with legacy plaintext, so a miss is
        an expected outcome rather than an error.
        """
        try:
            raw = base64.b64decode(ciphertext, validate=True)
        except (binascii.Error, ValueError):
            logger.debug("Decryption miss: body is not base64")
            return ciphertext

        if len(raw) < NONCE_BYTES + TAG_BYTES:
            logger.debug("Decryption miss: body too short (%d bytes)", len(raw))
            return ciphertext

        try:
            plain = AESGCM(key).decrypt(raw[:NONCE_BYTES], raw[NONCE_BYTES:], None)
            return plain.decode("utf-8")
        except InvalidTag:
            logger.debug("Decryption miss: authentication failed")
        except UnicodeDecodeError:
            logger.debug("Decryption miss: plaintext is not UTF-8")
        return ciphertext


@lru_cache(maxsize=1)
def get_key_deriver() -> ConversationKeyDeriver:
    """Return the process-wide key deriver.

    Raises:
        ConfigurationError: If ENCRYPTION_SECRET is not configured.
    """
    return ConversationKeyDeriver(settings.encryption_secret)


def encrypt_for_conversation(
    plaintext: str,
    a: str,
    b: str,
    salt: str,
    deriver: ConversationKeyDeriver | None = None,
) -> str:
    """Encrypt a message for the conversation between ``a`` and ``b``.

    Raises:
        ValueError: If ``salt`` is empty.
    """
    deriver = deriver or get_key_deriver()
    return MessageCipher.encrypt(plaintext, deriver.derive_key(a, b, salt))


def decrypt_for_conversation(
    ciphertext: str,
    a: str,
    b: str,
    salt: str | None,
    deriver: ConversationKeyDeriver | None = None,
) -> str:
    """Decrypt a conversation message, returning the input on any miss."""
    if not salt:
        logger.debug("Decryption miss: conversation salt is missing")
        return ciphertext
    deriver = deriver or get_key_deriver()
    return MessageCipher.decrypt(ciphertext, deriver.derive_key(a, b, salt))
