"""Chat service layer.

Handles:
- Chat creation and owner-scoped lookup
- Appending user messages
- Generating bot replies through the completion bridge
"""
import logging
import threading
from typing import Dict

from chat_backend.core.exceptions import ChatNotFoundError
from chat_backend.models.chat import Chat, Message, Sender
from chat_backend.services.chat_store import ChatStore
from chat_backend.services.completion import CompletionBridge, build_completion_messages

logger = logging.getLogger(__name__)


class ChatService:
    """Service layer for chat operations."""

    def __init__(self, store: ChatStore, completion: CompletionBridge):
        """Initialize chat service."""
        self.store = store
        self.completion = completion
        # One exclusive section per chat id around appends
        self._chat_locks: Dict[str, threading.Lock] = {}
        self._chat_locks_guard = threading.Lock()

    def _lock_for(self, chat_id: str) -> threading.Lock:
        with self._chat_locks_guard:
            lock = self._chat_locks.get(chat_id)
            if lock is None:
                lock = self._chat_locks[chat_id] = threading.Lock()
            return lock

    def create_chat(self, user_id: str) -> Chat:
        """Create a new empty chat owned by `user_id`."""
        logger.info("User %s is creating a chat", user_id)
        chat = self.store.create(user_id)
        logger.info("User %s created chat %s", user_id, chat.id)
        return chat

    def list_chats(self, user_id: str) -> list[Chat]:
        """Return the caller's chats in creation order."""
        logger.info("User %s is getting chats", user_id)
        return self.store.list_by_user(user_id)

    def get_chat(self, chat_id: str, user_id: str) -> Chat:
        """
        Get a chat owned by the caller.

        Args:
            chat_id: Chat ID
            user_id: Authenticated user ID

        Returns:
            Chat instance

        Raises:
            ChatNotFoundError: If the chat does not exist or is not owned by user
        """
        chat = self.store.find(chat_id, user_id)
        if chat is None:
            logger.info("User %s requested unknown chat %s", user_id, chat_id)
            raise ChatNotFoundError(chat_id)
        return chat

    def append_user_message(self, chat_id: str, user_id: str, text: str) -> Message:
        """
        Append a user message to a chat.

        `text` is stored as-is; no length or content validation is applied.

        Raises:
            ChatNotFoundError: If the chat does not exist or is not owned by user
        """
        logger.info("User %s is creating a message in chat %s", user_id, chat_id)
        chat = self.get_chat(chat_id, user_id)

        message = Message.now(text, user_id, Sender.USER)
        with self._lock_for(chat.id):
            chat.messages.append(message)

        logger.info("User %s created message %s", user_id, message.id)
        return message

    def append_bot_reply(self, chat_id: str, user_id: str) -> Message:
        """
        Generate a bot reply for the chat's full history and append it.

        Flow:
        1. Resolve chat (ownership enforced)
        2. Map history to completion format
        3. Call the completion bridge
        4. Append bot message attributed to the requesting user

        Holding the chat's lock across the completion call means two
        concurrent reply requests on one chat see serialized histories.

        Raises:
            ChatNotFoundError: If the chat does not exist or is not owned by user
            CompletionError: If the completion API returned no usable reply
        """
        logger.info("User %s is getting a response in chat %s", user_id, chat_id)
        chat = self.get_chat(chat_id, user_id)

        with self._lock_for(chat.id):
            history = build_completion_messages(chat.messages)
            reply = self.completion.complete(history)
            message = Message.now(reply, user_id, Sender.BOT)
            chat.messages.append(message)

        logger.info(
            "User %s got a response: chat=%s message_id=%s", user_id, chat.id, message.id
        )
        logger.debug("Response text: %s", message.text)
        return message
