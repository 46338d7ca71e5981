"""Optional Google sign-in through Firebase Authentication.

Responsibilities:
    - Firebase Admin initialization from environment configuration
    - ID token verification into a UserProfile
    - Browser popup flow (Firebase JS SDK) for the NiceGUI page
"""

from datachat.auth.config import FirebaseConfig, get_firebase_config
from datachat.auth.firebase import AuthError, initialize_firebase, verify_id_token

__all__ = [
    "AuthError",
    "FirebaseConfig",
    "get_firebase_config",
    "initialize_firebase",
    "verify_id_token",
]
