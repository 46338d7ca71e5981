"""Client for the relay's Server-Sent Events stream."""

import logging
import os
from collections.abc import Callable, Sequence

import httpx

from datachat.models.schemas import GenerateRequest, Message, StreamChunk

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3001")
GENERATE_PATH = "/api/generate"
DATA_PREFIX = "data: "


def parse_event(line: str) -> str | None:
    """Return the text of a `data: ` line, or None for any other line."""
    if not line.startswith(DATA_PREFIX):
        return None
    return StreamChunk.model_validate_json(line.removeprefix(DATA_PREFIX)).text


async def stream_generate(
    history: Sequence[Message],
    on_chunk: Callable[[str], None],
    *,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Send the conversation to the relay and feed each chunk to a callback.

    Lines are decoded and split by httpx, so events that straddle network
    reads are reassembled before parsing.

    Args:
        history: Conversation to send, newest user message last.
        on_chunk: Called with each text fragment in arrival order.
        base_url: Relay base URL. Defaults to API_BASE_URL.
        transport: Optional httpx transport (used by tests).

    Returns:
        Number of chunks received.

    Raises:
        httpx.HTTPStatusError: If the relay answers with an error status.
        httpx.RequestError: If the relay cannot be reached.
        pydantic.ValidationError: If an event is not a valid chunk.
    """
    payload = GenerateRequest(history=list(history)).model_dump(mode="json")
    received = 0

    async with httpx.AsyncClient(
        base_url=base_url or API_BASE_URL,
        transport=transport,
        timeout=120.0,
    ) as client:
        async with client.stream(
            "POST",
            GENERATE_PATH,
            json=payload,
            headers={"Accept": "text/event-stream"},
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                text = parse_event(line)
                if text is None:
                    continue
                received += 1
                on_chunk(text)

    logger.debug(f"Stream finished after {received} chunks")
    return received
