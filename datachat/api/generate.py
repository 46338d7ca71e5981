"""Streaming relay endpoint.

Forwards the conversation to Gemini and streams the reply back as
Server-Sent Events, one `data: {"text": ...}` event per chunk.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from datachat.models.schemas import ErrorResponse, GenerateRequest, StreamChunk
from datachat.relay.gemini_relay import get_relay_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])

SERVER_ERROR_MESSAGE = "Something went wrong on the server."

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def format_sse(text: str) -> str:
    """Frame a text fragment as a single SSE data event."""
    return f"data: {StreamChunk(text=text).model_dump_json()}\n\n"


async def _event_stream(
    first: str | None,
    replies: AsyncIterator[str],
) -> AsyncGenerator[str]:
    """Yield SSE events, starting with the chunk already pulled from upstream.

    Once the response has started the status can no longer change, so an
    upstream failure here is logged and the stream simply ends.
    """
    if first is None:
        return

    yield format_sse(first)
    try:
        async for text in replies:
            yield format_sse(text)
    except Exception:
        logger.exception("Upstream stream failed mid-response")


@router.post(
    "/generate",
    response_class=StreamingResponse,
    response_model=None,
    responses={
        status.HTTP_200_OK: {"content": {"text/event-stream": {}}},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def generate(request: GenerateRequest) -> Response:
    """Stream the model's reply to the newest message in the history.

    The first chunk is awaited before the response starts, so failures while
    opening the upstream session are reported as a 500 with a JSON body
    instead of an empty event stream.

    Args:
        request: Conversation history, newest user message last.

    Returns:
        text/event-stream of `data: {"text": "<fragment>"}` events.

    Raises:
        422: Malformed request body.
        500: Upstream failure before any output was produced.
    """
    try:
        relay = get_relay_service()
        replies = relay.stream_reply(request.history)
        first = await anext(replies, None)
    except Exception:
        logger.exception("Relay request failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=SERVER_ERROR_MESSAGE).model_dump(),
        )

    return StreamingResponse(
        _event_stream(first, replies),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
