"""Chat and Message SQLModel definitions.

Models:
- Chat: Conversation owned by exactly one user, messages in chronological order
- Message: One turn in a chat, sent by the user or generated by the bot

These are plain (non-table) SQLModel classes; chats live in memory for the
process lifetime.
"""
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlmodel import Field, SQLModel

DEFAULT_CHAT_TITLE = "New Chat"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    """Who a message is attributed to."""

    USER = "user"
    BOT = "bot"


class Message(SQLModel):
    """
    Message in a chat.

    Nothing modifies a message once it is appended. For bot replies
    `user_id` is the requesting user, not a bot identity; `sender` is what
    distinguishes the roles.
    """

    id: str = Field(default_factory=new_id)
    text: str
    created_at: datetime = Field(default_factory=utc_now)
    user_id: str
    sender: Sender

    @classmethod
    def now(cls, text: str, user_id: str, sender: Sender) -> "Message":
        """Create a message stamped with the current UTC time."""
        return cls(text=text, user_id=user_id, sender=sender)


class Chat(SQLModel):
    """
    Chat owned by a single user.

    Ownership: every lookup MUST match both `id` and `user_id`.
    `messages` is append-only; insertion order is display order.
    """

    id: str = Field(default_factory=new_id)
    title: str = Field(default=DEFAULT_CHAT_TITLE)
    user_id: str
    messages: list[Message] = Field(default_factory=list)

    @classmethod
    def empty(cls, user_id: str) -> "Chat":
        """Create a chat with no messages and the placeholder title."""
        return cls(user_id=user_id)
