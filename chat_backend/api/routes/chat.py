"""Chat endpoint routes.

Provides:
- POST /chat/ - Create an empty chat
- GET /chat/ - List caller's chats
- GET /chat/{chat_id}/ - Get chat with messages
- POST /chat/{chat_id}/messages/ - Append a user message
- GET /chat/{chat_id}/response/ - Generate and append a bot reply
"""
from fastapi import APIRouter, Depends, HTTPException, status

from chat_backend.core.deps import enforce_rate_limit, get_chat_service, get_current_user
from chat_backend.core.exceptions import ChatNotFoundError
from chat_backend.schemas.chat import ChatRead, MessageCreate, MessageRead
from chat_backend.services.chat_service import ChatService

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
    dependencies=[Depends(enforce_rate_limit)],
)


def _not_found() -> HTTPException:
    # Foreign chats get the same 404 as missing ones
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Chat not found",
    )


@router.post("/", response_model=ChatRead)
def create_chat(
    current_user_id: str = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatRead:
    """Create a new empty chat owned by the caller."""
    chat = chat_service.create_chat(current_user_id)
    return ChatRead.from_chat(chat)


@router.get("/", response_model=list[ChatRead])
def list_chats(
    current_user_id: str = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> list[ChatRead]:
    """List all chats owned by the caller, oldest first."""
    return [ChatRead.from_chat(chat) for chat in chat_service.list_chats(current_user_id)]


@router.get("/{chat_id}/", response_model=ChatRead)
def get_chat(
    chat_id: str,
    current_user_id: str = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatRead:
    """
    Get chat with all messages.

    Raises:
        HTTPException: 404 if chat not found or not owned
    """
    try:
        chat = chat_service.get_chat(chat_id, current_user_id)
    except ChatNotFoundError as e:
        raise _not_found() from e
    return ChatRead.from_chat(chat)


@router.post("/{chat_id}/messages/", response_model=MessageRead)
def create_message(
    chat_id: str,
    request: MessageCreate,
    current_user_id: str = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> MessageRead:
    """
    Append a user message to the chat.

    Raises:
        HTTPException: 404 if chat not found or not owned
    """
    try:
        message = chat_service.append_user_message(chat_id, current_user_id, request.text)
    except ChatNotFoundError as e:
        raise _not_found() from e
    return MessageRead.from_message(message)


@router.get("/{chat_id}/response/", response_model=MessageRead)
def create_response(
    chat_id: str,
    current_user_id: str = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> MessageRead:
    """
    Ask the completion API for a reply and append it as a bot message.

    Completion failures are not caught here; the application-level handler
    turns them into a generic 500.

    Raises:
        HTTPException: 404 if chat not found or not owned
    """
    try:
        message = chat_service.append_bot_reply(chat_id, current_user_id)
    except ChatNotFoundError as e:
        raise _not_found() from e
    return MessageRead.from_message(message)
