"""Relay application: the generate endpoint and a health check.

The NiceGUI chat page is mounted onto this app by `datachat.main`.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from datachat import __version__
from datachat.api.generate import router as generate_router
from datachat.auth.config import get_firebase_config

logger = logging.getLogger(__name__)

SERVICE_NAME = "data-chat"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    accounts = "enabled" if get_firebase_config().enabled else "disabled"
    logger.info(f"Data Chat relay {__version__} starting (sign-in {accounts})")
    yield
    logger.info("Data Chat relay stopped")


def create_app() -> FastAPI:
    """Build the relay app with CORS open to any origin."""
    application = FastAPI(
        title="Data Chat API",
        description="Streams Gemini replies in the Lt. Commander Data persona as Server-Sent Events.",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept"],
    )

    application.include_router(generate_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": SERVICE_NAME}

    return application


app = create_app()
