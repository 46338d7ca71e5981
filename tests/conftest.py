"""Pytest fixtures and shared test configuration.

Fixtures:
    - sample_history: A short user/model/user conversation
    - fake_relay: Stand-in for RelayService with scripted chunks
    - async_client: HTTPX client for API testing
    - sse_transport: Factory for mock relay responses
"""

import json
from collections.abc import AsyncGenerator, Callable, Sequence

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from datachat.api import app
from datachat.models.schemas import Message


class FakeRelay:
    """Scripted replacement for RelayService.

    Yields `chunks` in order. If `error` is set it is raised before the chunk
    at index `fail_at` (or after the last chunk when fail_at is None).
    """

    def __init__(
        self,
        chunks: Sequence[str] = (),
        error: Exception | None = None,
        fail_at: int | None = None,
    ) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.fail_at = fail_at
        self.calls: list[list[Message]] = []

    async def stream_reply(self, history: Sequence[Message]) -> AsyncGenerator[str]:
        self.calls.append(list(history))
        for index, chunk in enumerate(self.chunks):
            if self.error is not None and index == self.fail_at:
                raise self.error
            yield chunk
        if self.error is not None and self.fail_at is None:
            raise self.error


def sse_body(chunks: Sequence[str]) -> str:
    return "".join(f"data: {json.dumps({'text': chunk})}\n\n" for chunk in chunks)


@pytest.fixture
def sample_history() -> list[Message]:
    """Return a conversation ending with a user message."""
    return [
        Message(id=1, role="user", parts=[{"text": "Hello"}]),
        Message(id=2, role="model", parts=[{"text": "Greetings. I am Lt. Commander Data."}]),
        Message(id=3, role="user", parts=[{"text": "What is a positronic brain?"}]),
    ]


@pytest.fixture
def fake_relay() -> Callable[..., FakeRelay]:
    """Return a factory for scripted relays."""
    return FakeRelay


@pytest.fixture
def sse_transport() -> Callable[..., httpx.MockTransport]:
    """Return a factory for transports that answer like the relay.

    The factory records each request in `requests` when given a list.
    """

    def factory(
        chunks: Sequence[str] = (),
        status_code: int = 200,
        requests: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            if status_code != 200:
                return httpx.Response(
                    status_code, json={"error": "Something went wrong on the server."}
                )
            return httpx.Response(
                200,
                text=sse_body(chunks),
                headers={"Content-Type": "text/event-stream"},
            )

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
