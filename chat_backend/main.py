"""FastAPI application entry point for the chat backend."""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_backend import __version__
from chat_backend.api.routes.chat import router as chat_router
from chat_backend.config import Settings, get_settings
from chat_backend.core.logging_config import configure_logging, install_access_log
from chat_backend.core.security import IdentityVerifier, build_identity_verifier
from chat_backend.services.chat_service import ChatService
from chat_backend.services.chat_store import ChatStore, InMemoryChatStore
from chat_backend.services.completion import CompletionBridge, OpenAICompletionBridge
from chat_backend.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Handle unhandled exceptions with generic error response.

    Internal details (including completion API errors) are logged, never
    returned to the client.
    """
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    chat_store: Optional[ChatStore] = None,
    completion_bridge: Optional[CompletionBridge] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators default to the ones described by `settings`; tests pass
    their own to avoid network calls.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Chat API",
        description="Chat CRUD with OpenAI-generated replies",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_access_log(app)

    app.state.settings = settings
    if identity_verifier is None:
        identity_verifier = build_identity_verifier(settings)
    if chat_store is None:
        chat_store = InMemoryChatStore()
    if completion_bridge is None:
        completion_bridge = OpenAICompletionBridge.from_settings(settings)

    app.state.identity_verifier = identity_verifier
    app.state.rate_limiter = RateLimiter(settings.RATE_LIMIT_PER_MINUTE)
    app.state.chat_service = ChatService(store=chat_store, completion=completion_bridge)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(chat_router)
    app.add_exception_handler(Exception, generic_exception_handler)

    return app


app = create_app()
