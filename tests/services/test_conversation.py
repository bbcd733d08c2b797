import pytest

from matchgate.models import SWIPE_RIGHT, ConversationMessage
from matchgate.services.conversation import ConversationService
from matchgate.services.crypto import ConversationKeyDeriver, encrypt_for_conversation
from matchgate.services.match_service import MatchService

ALICE = "alice@example.com"
BOB = "bob@example.com"


@pytest.fixture
def deriver():
    return ConversationKeyDeriver("conversation-test-secret")


@pytest.fixture
def match(db_session):
    service = MatchService(db_session)
    service.record_swipe(ALICE, BOB, SWIPE_RIGHT)
    return service.record_swipe(BOB, ALICE, SWIPE_RIGHT).match


@pytest.fixture
def conversation(db_session, deriver):
    return ConversationService(db_session, deriver)


def _store(db_session, match, sender, body, is_encrypted):
    message = ConversationMessage(
        pair_key=match.pair_key,
        sender=sender,
        body=body,
        is_encrypted=is_encrypted,
    )
    db_session.add(message)
    db_session.commit()
    return message


def test_sent_messages_are_stored_encrypted(conversation, match):
    message = conversation.send(match, ALICE, "see you at eight")
    assert message.is_encrypted is True
    assert "eight" not in message.body
    assert conversation.render(match, message) == "see you at eight"


def test_history_is_oldest_first_and_limited(conversation, match):
    for index in range(5):
        conversation.send(match, ALICE if index % 2 else BOB, f"message {index}")

    history = conversation.history(match, limit=3)
    assert [conversation.render(match, message) for message in history] == [
        "message 2",
        "message 3",
        "message 4",
    ]


def test_legacy_plaintext_is_rendered_verbatim(db_session, conversation, match):
    message = _store(db_session, match, BOB, "hey, from before encryption", None)
    assert conversation.render(match, message) == "hey, from before encryption"


def test_legacy_unflagged_ciphertext_is_decrypted(db_session, conversation, deriver, match):
    body = encrypt_for_conversation("legacy secret", BOB, ALICE, match.salt, deriver)
    message = _store(db_session, match, BOB, body, None)
    assert conversation.render(match, message) == "legacy secret"


def test_explicit_plaintext_flag_skips_decryption(db_session, conversation, deriver, match):
    body = encrypt_for_conversation("stays armored", BOB, ALICE, match.salt, deriver)
    message = _store(db_session, match, BOB, body, False)
    assert conversation.render(match, message) == body


def test_message_under_other_salt_renders_ciphertext(db_session, conversation, deriver, match):
    body = encrypt_for_conversation("wrong conversation", BOB, ALICE, "0" * 32, deriver)
    message = _store(db_session, match, BOB, body, True)
    assert conversation.render(match, message) == body
