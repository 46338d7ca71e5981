"""FastAPI endpoints for the Data Chat relay.

Endpoints:
    - GET /health: Service health status
    - POST /api/generate: Stream a reply to the conversation as Server-Sent Events
"""

from datachat.api.app import app, create_app

__all__ = ["app", "create_app"]
