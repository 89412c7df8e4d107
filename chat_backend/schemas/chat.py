"""Request and response schemas for the chat API.

The wire format uses camelCase keys (`userId`, `createdAt`) so existing
mobile clients can decode it unchanged.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from chat_backend.models.chat import Chat, Message, Sender


class MessageCreate(BaseModel):
    """Request body for appending a user message."""
    text: str


class MessageRead(BaseModel):
    """Serialized Message."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    created_at: datetime = Field(alias="createdAt")
    user_id: str = Field(alias="userId")
    sender: Sender

    @classmethod
    def from_message(cls, message: Message) -> "MessageRead":
        return cls(
            id=message.id,
            text=message.text,
            created_at=message.created_at,
            user_id=message.user_id,
            sender=message.sender,
        )

    def to_message(self) -> Message:
        return Message(
            id=self.id,
            text=self.text,
            created_at=self.created_at,
            user_id=self.user_id,
            sender=self.sender,
        )


class ChatRead(BaseModel):
    """Serialized Chat with its full message history."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    user_id: str = Field(alias="userId")
    messages: list[MessageRead]

    @classmethod
    def from_chat(cls, chat: Chat) -> "ChatRead":
        return cls(
            id=chat.id,
            title=chat.title,
            user_id=chat.user_id,
            messages=[MessageRead.from_message(m) for m in chat.messages],
        )

    def to_chat(self) -> Chat:
        return Chat(
            id=self.id,
            title=self.title,
            user_id=self.user_id,
            messages=[m.to_message() for m in self.messages],
        )
