"""Pydantic models for messages, relay payloads and saved chats.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message / Part: One conversation turn in Gemini's role/parts shape
    - GenerateRequest: Incoming relay request carrying the full history
    - StreamChunk: One server-sent event payload
    - ErrorResponse: Fixed relay error body
    - ChatRecord: A conversation saved to the user's collection
    - UserProfile: Verified sign-in identity
"""

from datachat.models.schemas import (
    ChatRecord,
    ErrorResponse,
    GenerateRequest,
    Message,
    Part,
    StreamChunk,
    UserProfile,
    now_ms,
)

__all__ = [
    "ChatRecord",
    "ErrorResponse",
    "GenerateRequest",
    "Message",
    "Part",
    "StreamChunk",
    "UserProfile",
    "now_ms",
]
