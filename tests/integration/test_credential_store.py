import pytest
from datetime import datetime, timezone
from core.exceptions import ConflictError
from models.users import User
from models.chats import Chat
from models.messages import Message, MessageRole


def test_insert_and_lookup_user(store):
    user_id = store.insert_user("new@example.com", "$2b$12$hash", profile_picture_url="https://example.com/p.png")

    user = store.get_user_by_email("new@example.com")
    assert user.id == user_id
    assert user.hash == "$2b$12$hash"
    assert user.profile_picture_url == "https://example.com/p.png"
    assert store.get_user_by_id(user_id).email == "new@example.com"


def test_unknown_user_is_none(store):
    assert store.get_user_by_email("ghost@example.com") is None
    assert store.get_user_by_id(999) is None


def test_duplicate_email_raises_conflict(store):
    store.insert_user("dup@example.com", "hash-1")

    with pytest.raises(ConflictError) as exc_info:
        store.insert_user("dup@example.com", "hash-2")

    assert exc_info.value.table == "users"
    # session is usable after the rollback
    assert store.db.query(User).filter(User.email == "dup@example.com").count() == 1


def test_duplicate_refresh_token_raises_conflict(store, verified_user):
    now = datetime(2025, 6, 1, tzinfo=timezone.utc)
    expires = datetime(2025, 7, 1, tzinfo=timezone.utc)
    store.insert_refresh_token("T" * 32, "access-1", verified_user.id, now, expires)

    with pytest.raises(ConflictError):
        store.insert_refresh_token("T" * 32, "access-2", verified_user.id, now, expires)

    with pytest.raises(ConflictError):
        store.insert_refresh_token("U" * 32, "access-1", verified_user.id, now, expires)


def test_chat_and_message_shape(session, verified_user):
    chat = Chat(title="First chat", user_id=verified_user.id)
    session.add(chat)
    session.commit()

    message = Message(
        id="msg-1",
        chat_id=chat.id,
        role=MessageRole.ASSISTANT.value,
        content=[{"type": "text", "text": "hello"}],
    )
    session.add(message)
    session.commit()
    session.refresh(chat)

    assert chat.is_public is False
    assert chat.deleted_at is None
    assert chat.user.email == verified_user.email
    assert chat.messages[0].content == [{"type": "text", "text": "hello"}]


def test_email_lookup_ignores_case(store):
    user_id = store.insert_user("Mixed@Example.com", "hash")

    assert store.get_user_by_email("mixed@example.com").id == user_id
    assert store.get_user_by_email("MIXED@EXAMPLE.COM").id == user_id
