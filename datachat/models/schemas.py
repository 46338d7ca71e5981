import time
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


def now_ms() -> int:
    """Current wall-clock time in milliseconds, used as message ids."""
    return int(time.time() * 1000)


class Part(BaseModel):
    """One text part of a message."""

    text: str


class Message(BaseModel):
    """A single conversation turn.

    Attributes:
        id: Creation timestamp in milliseconds.
        role: Speaker, either "user" or "model".
        parts: Message content. Only the first part is rendered and relayed.
    """

    id: int = Field(default_factory=now_ms)
    role: Literal["user", "model"]
    parts: list[Part] = Field(..., min_length=1)

    @property
    def text(self) -> str:
        return self.parts[0].text

    @classmethod
    def from_text(cls, role: Literal["user", "model"], text: str) -> "Message":
        return cls(role=role, parts=[Part(text=text)])


class GenerateRequest(BaseModel):
    """Request payload for the streaming relay.

    Attributes:
        history: Full conversation. The final entry is the newest user message.
    """

    history: list[Message] = Field(..., min_length=1)


class StreamChunk(BaseModel):
    """Payload of a single server-sent event."""

    text: str


class ErrorResponse(BaseModel):
    """Body returned when the relay fails."""

    error: str


class ChatRecord(BaseModel):
    """A saved conversation in the user's chat collection.

    Attributes:
        id: Document id.
        title: Short label shown in the sidebar.
        messages: Stored conversation, verbatim.
        timestamp: Creation time. None until the server timestamp resolves.
    """

    id: str
    title: str = "Untitled"
    messages: list[Message] = Field(default_factory=list)
    timestamp: datetime | None = None


class UserProfile(BaseModel):
    """Identity verified from a Firebase ID token."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
