"""Bearer credential verification.

An `IdentityVerifier` turns an opaque bearer token into a stable user ID.
Every failure surfaces as `AuthenticationError`; callers never learn whether
the token was expired, malformed or revoked.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import firebase_admin
import jwt
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin.exceptions import FirebaseError

from chat_backend.config import Settings
from chat_backend.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class IdentityVerifier(ABC):
    """Validates a bearer token and yields the caller's user ID."""

    @abstractmethod
    def verify(self, token: str) -> str:
        """
        Verify a bearer token.

        Raises:
            AuthenticationError: If the token cannot be verified
        """


class JWTIdentityVerifier(IdentityVerifier):
    """Verifies shared-secret JWTs and reads the user ID from a claim."""

    def __init__(self, secret: str, algorithm: str = "HS256", user_claim: str = "sub"):
        self.secret = secret
        self.algorithm = algorithm
        self.user_claim = user_claim

    def verify(self, token: str) -> str:
        if not self.secret:
            raise AuthenticationError("JWT secret is not configured")
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError(str(e)) from e

        user_id = payload.get(self.user_claim)
        if not user_id:
            raise AuthenticationError(f"Token has no '{self.user_claim}' claim")
        return str(user_id)


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens using application default credentials."""

    def __init__(self, project_id: Optional[str] = None):
        self.project_id = project_id
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                options = {"projectId": self.project_id} if self.project_id else None
                self._app = firebase_admin.initialize_app(
                    credentials.ApplicationDefault(), options=options
                )
        return self._app

    def verify(self, token: str) -> str:
        try:
            decoded = firebase_auth.verify_id_token(token, app=self._get_app())
        except (ValueError, FirebaseError) as e:
            raise AuthenticationError(str(e)) from e
        except Exception as e:
            # Credential lookup and app initialization failures land here
            logger.error("Firebase token verification failed: %s", e)
            raise AuthenticationError("Token verification failed") from e
        return decoded["uid"]


def build_identity_verifier(settings: Settings) -> IdentityVerifier:
    """Create the verifier selected by `AUTH_BACKEND`."""
    if settings.AUTH_BACKEND == "firebase":
        logger.info("Using Firebase identity verification")
        return FirebaseIdentityVerifier(project_id=settings.FIREBASE_PROJECT_ID)

    if not settings.JWT_SECRET:
        logger.warning("JWT_SECRET is empty; every request will be rejected")
    return JWTIdentityVerifier(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        user_claim=settings.JWT_USER_CLAIM,
    )
