"""Chat storage.

`ChatStore` is the only interface callers see, so a durable keyed store can
replace `InMemoryChatStore` without touching the service or routes.
"""
import threading
from abc import ABC, abstractmethod
from typing import Optional

from chat_backend.models.chat import Chat


class ChatStore(ABC):
    """Create, look up and list chats."""

    @abstractmethod
    def create(self, user_id: str) -> Chat:
        """Create an empty chat owned by `user_id` and store it."""

    @abstractmethod
    def find(self, chat_id: str, user_id: str) -> Optional[Chat]:
        """
        Return the chat only if both `chat_id` and `user_id` match.

        A chat owned by someone else is reported exactly like a missing one.
        """

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Chat]:
        """Return all chats owned by `user_id` in creation order."""


class InMemoryChatStore(ChatStore):
    """Process-lifetime store backed by an insertion-ordered list."""

    def __init__(self) -> None:
        self._chats: list[Chat] = []
        self._lock = threading.Lock()

    def create(self, user_id: str) -> Chat:
        chat = Chat.empty(user_id)
        with self._lock:
            self._chats.append(chat)
        return chat

    def find(self, chat_id: str, user_id: str) -> Optional[Chat]:
        with self._lock:
            for chat in self._chats:
                if chat.id == chat_id and chat.user_id == user_id:
                    return chat
        return None

    def list_by_user(self, user_id: str) -> list[Chat]:
        with self._lock:
            return [chat for chat in self._chats if chat.user_id == user_id]

    def __len__(self) -> int:
        return len(self._chats)
