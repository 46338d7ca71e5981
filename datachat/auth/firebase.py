"""Firebase Admin initialization and ID token verification.

The browser signs in with the Firebase JS SDK; the server only ever sees the
resulting ID token and verifies it here.
"""

import json
import logging
import os

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from datachat.auth.config import FirebaseConfig, get_firebase_config
from datachat.models.schemas import UserProfile

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when sign-in cannot be completed."""

    pass


def _load_credentials(value: str | None) -> credentials.Base:
    """Build Admin SDK credentials from a file path, inline JSON or the environment."""
    if not value:
        return credentials.ApplicationDefault()

    if os.path.exists(value):
        return credentials.Certificate(value)

    try:
        return credentials.Certificate(json.loads(value))
    except json.JSONDecodeError as e:
        raise AuthError("FIREBASE_CREDENTIALS is neither a file nor valid JSON") from e


def initialize_firebase(config: FirebaseConfig | None = None) -> firebase_admin.App | None:
    """Initialize the default Firebase app once.

    Args:
        config: Optional Firebase configuration. Loads from environment if not provided.

    Returns:
        The Firebase app, or None when Firebase is not configured.
    """
    config = config or get_firebase_config()
    if not config.enabled:
        logger.info("Firebase not configured - sign-in and saved chats disabled")
        return None

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    app = firebase_admin.initialize_app(
        _load_credentials(config.credentials),
        {"projectId": config.project_id},
    )
    logger.info(f"Firebase initialized for project {config.project_id}")
    return app


def verify_id_token(id_token: str, app: firebase_admin.App | None = None) -> UserProfile:
    """Verify a Firebase ID token and return the signed-in user.

    Args:
        id_token: Token produced by the browser SDK after the popup flow.
        app: Firebase app to verify against (default app if None).

    Returns:
        UserProfile for the token's subject.

    Raises:
        AuthError: If the token is missing, malformed, expired or revoked.
    """
    if not id_token:
        raise AuthError("ID token required")

    try:
        decoded = auth.verify_id_token(id_token, app=app)
    except (ValueError, FirebaseError) as e:
        raise AuthError(f"Invalid ID token: {e}") from e

    return UserProfile(
        uid=decoded["uid"],
        email=decoded.get("email"),
        display_name=decoded.get("name"),
        photo_url=decoded.get("picture"),
    )
