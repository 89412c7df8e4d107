"""Domain errors raised by the chat backend.

HTTP translation happens at the route layer; services only raise these.
"""


class ChatBackendError(Exception):
    """Base class for chat backend errors."""


class AuthenticationError(ChatBackendError):
    """Bearer credential missing, malformed or rejected by the identity provider."""


class ChatNotFoundError(ChatBackendError):
    """Chat does not exist or is not owned by the caller."""

    def __init__(self, chat_id: str):
        super().__init__(f"Chat {chat_id} not found or not owned by user")
        self.chat_id = chat_id


class CompletionError(ChatBackendError):
    """Completion API returned no usable reply."""
