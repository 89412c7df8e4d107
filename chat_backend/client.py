"""HTTP client for the chat API.

Mirrors the calls a mobile client makes: start or resume a chat, send a
message, then request the bot's reply. Persisting the current chat ID
between runs is left to the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from chat_backend.core.exceptions import ChatBackendError
from chat_backend.schemas.chat import ChatRead, MessageRead

logger = logging.getLogger(__name__)


class ChatClientError(ChatBackendError):
    """Non-2xx response from the chat API."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Chat API returned {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ChatClient:
    """
    Synchronous client for the `/chat` endpoints.

    Any non-2xx response raises `ChatClientError`; no partial state is
    returned.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "http://localhost:3000",
        *,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self._token = token
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"}
        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            raise ChatClientError(response.status_code, str(detail))
        return response.json()

    def start_new_chat(self) -> ChatRead:
        return ChatRead.model_validate(self._request("POST", "/chat/"))

    def list_chats(self) -> list[ChatRead]:
        return [ChatRead.model_validate(item) for item in self._request("GET", "/chat/")]

    def load_chat(self, chat_id: str) -> ChatRead:
        return ChatRead.model_validate(self._request("GET", f"/chat/{chat_id}/"))

    def load_current_or_create_chat(self, chat_id: Optional[str]) -> ChatRead:
        """
        Resume the cached chat, or start a new one.

        Falls back to a new chat when there is no cached ID or the cached
        chat can no longer be loaded (server restarted, other account).
        """
        if chat_id is None:
            return self.start_new_chat()
        try:
            return self.load_chat(chat_id)
        except (ChatClientError, httpx.HTTPError) as e:
            logger.info("Could not resume chat %s (%s); starting a new one", chat_id, e)
            return self.start_new_chat()

    def send_message(self, chat_id: str, text: str) -> MessageRead:
        data = self._request("POST", f"/chat/{chat_id}/messages/", json={"text": text})
        return MessageRead.model_validate(data)

    def request_response(self, chat_id: str) -> MessageRead:
        return MessageRead.model_validate(self._request("GET", f"/chat/{chat_id}/response/"))
