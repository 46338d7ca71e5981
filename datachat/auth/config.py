"""Firebase configuration with environment variable loading.

Sign-in is optional: when the web API key or project id is missing the
chat runs without authentication or saved history.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class FirebaseConfig(BaseModel):
    """Configuration for Firebase Authentication and Firestore.

    Attributes:
        credentials: Service account JSON file path or inline JSON.
                     None falls back to application default credentials.
        api_key: Web API key used by the browser SDK.
        auth_domain: Auth domain for the sign-in popup.
        project_id: Firebase / Google Cloud project id.
    """

    credentials: str | None = Field(
        default_factory=lambda: os.getenv("FIREBASE_CREDENTIALS") or None,
        description="Service account JSON path or inline JSON",
    )
    api_key: str | None = Field(
        default_factory=lambda: os.getenv("FIREBASE_API_KEY") or None,
        description="Firebase web API key",
    )
    auth_domain: str | None = Field(
        default_factory=lambda: os.getenv("FIREBASE_AUTH_DOMAIN") or None,
        description="Firebase auth domain (defaults to <project>.firebaseapp.com)",
    )
    project_id: str | None = Field(
        default_factory=lambda: os.getenv("FIREBASE_PROJECT_ID") or None,
        description="Firebase project id",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.project_id)

    def web_config(self) -> dict[str, str]:
        """Config object for `firebase.initializeApp` in the browser."""
        return {
            "apiKey": self.api_key or "",
            "authDomain": self.auth_domain or f"{self.project_id}.firebaseapp.com",
            "projectId": self.project_id or "",
        }


def get_firebase_config() -> FirebaseConfig:
    """Create Firebase configuration from environment."""
    return FirebaseConfig()
