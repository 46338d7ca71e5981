"""Browser side of the Google sign-in popup.

Loads the Firebase JS SDK into the page, runs `signInWithPopup` in the
browser and hands the resulting ID token back to Python for verification.
"""

import json
import logging

from nicegui import run, ui

from datachat.auth.config import FirebaseConfig
from datachat.auth.firebase import AuthError, verify_id_token
from datachat.models.schemas import UserProfile

logger = logging.getLogger(__name__)

FIREBASE_SDK_VERSION = "10.7.1"
FIREBASE_SDK_URL = f"https://www.gstatic.com/firebasejs/{FIREBASE_SDK_VERSION}"

# Popup errors (closed window, blocked popup) resolve to null instead of throwing
SIGN_IN_JS = """
(async () => {
    try {
        const provider = new firebase.auth.GoogleAuthProvider();
        const result = await firebase.auth().signInWithPopup(provider);
        return await result.user.getIdToken();
    } catch (error) {
        console.error('Google Sign-In Error:', error.code, error.message);
        return null;
    }
})()
"""

SIGN_OUT_JS = """
(async () => {
    await firebase.auth().signOut();
    return true;
})()
"""


def firebase_head_html(config: FirebaseConfig) -> str:
    """Script tags that load and initialize the Firebase web SDK."""
    return f"""
<script src="{FIREBASE_SDK_URL}/firebase-app-compat.js"></script>
<script src="{FIREBASE_SDK_URL}/firebase-auth-compat.js"></script>
<script>
    if (!firebase.apps.length) {{
        firebase.initializeApp({json.dumps(config.web_config())});
    }}
</script>
"""


async def sign_in_with_popup(timeout: float = 120.0) -> UserProfile:
    """Run the Google popup in the current page and verify the returned token.

    Args:
        timeout: Seconds to wait for the user to finish the popup.

    Returns:
        The verified user.

    Raises:
        AuthError: If the popup fails, times out, or the token is rejected.
    """
    try:
        id_token = await ui.run_javascript(SIGN_IN_JS, timeout=timeout)
    except TimeoutError as e:
        raise AuthError("Sign-in popup timed out") from e

    user = await run.io_bound(verify_id_token, id_token)
    logger.info(f"User signed in: {user.email or user.uid}")
    return user


async def sign_out() -> None:
    """Sign the browser out of Firebase."""
    await ui.run_javascript(SIGN_OUT_JS)
