"""Bridge between chat history and the OpenAI chat-completion API.

Pure data mapping around a single API call: no retries, no tools, no
system prompt.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence

from openai import OpenAI

from chat_backend.config import Settings
from chat_backend.core.exceptions import CompletionError
from chat_backend.models.chat import Message, Sender

logger = logging.getLogger(__name__)

ROLE_BY_SENDER = {
    Sender.USER: "user",
    Sender.BOT: "assistant",
}


def build_completion_messages(messages: Sequence[Message]) -> list[Dict[str, str]]:
    """
    Convert chat messages to OpenAI format.

    Args:
        messages: Chat history in chronological order

    Returns:
        List of messages in OpenAI format: [{"role": "...", "content": "..."}]
    """
    return [
        {"role": ROLE_BY_SENDER[message.sender], "content": message.text}
        for message in messages
    ]


class CompletionBridge(ABC):
    """Produces the bot's reply text for a conversation."""

    @abstractmethod
    def complete(self, messages: list[Dict[str, str]]) -> str:
        """
        Generate a reply for the given history.

        Raises:
            CompletionError: If the API returned no usable reply
        """


class OpenAICompletionBridge(CompletionBridge):
    """Completion bridge backed by `openai.OpenAI().chat.completions`."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.timeout = timeout
        self._api_key = api_key
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAICompletionBridge":
        return cls(
            model=settings.OPENAI_MODEL,
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT,
        )

    @property
    def client(self) -> OpenAI:
        # Created on first use so the app can start without an API key.
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key, timeout=self.timeout)
        return self._client

    def complete(self, messages: list[Dict[str, str]]) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            timeout=self.timeout,
        )
        if not response.choices:
            raise CompletionError("Completion API returned no choices")

        content = response.choices[0].message.content
        if not content:
            raise CompletionError("Completion API returned an empty reply")

        logger.debug("Completion received: model=%s chars=%s", self.model, len(content))
        return content
