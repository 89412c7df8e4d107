"""FastAPI dependencies: authentication, rate limiting and service access."""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chat_backend.core.exceptions import AuthenticationError
from chat_backend.services.chat_service import ChatService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the authenticated user ID from the bearer token.

    Missing header, wrong scheme and verifier failures all collapse to the
    same 401 response.

    Returns:
        Verified user ID

    Raises:
        HTTPException: 401 if the credential cannot be verified
    """
    if credentials is None:
        raise _unauthorized()

    verifier = request.app.state.identity_verifier
    try:
        return verifier.verify(credentials.credentials)
    except AuthenticationError as e:
        logger.info("Rejected bearer token: %s", e)
        raise _unauthorized() from e


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def enforce_rate_limit(request: Request) -> None:
    """Reject the request with 429 once the client exceeds its per-minute budget."""
    client_key = request.client.host if request.client else "unknown"
    if not request.app.state.rate_limiter.check_and_increment(client_key):
        logger.warning("Rate limit exceeded for client %s", client_key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again in 1 minute",
        )
