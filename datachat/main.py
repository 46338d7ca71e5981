"""Main application entry point.

Runs the FastAPI relay with the NiceGUI chat page mounted on the same
server, on port 3001. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEFAULT_PORT = 3001


def main() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI handles /api/generate and /health, NiceGUI serves the chat page at /.
    """
    import uvicorn
    from nicegui import ui

    from datachat.api.app import create_app
    from datachat.auth.firebase import initialize_firebase
    from datachat.relay.persona import PERSONA_NAME
    from datachat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    initialize_firebase()
    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title=PERSONA_NAME,
        favicon="🖖",
        dark=True,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "data-chat-secret"),
    )

    port = int(os.getenv("PORT", DEFAULT_PORT))
    logger.info(f"Server running on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
