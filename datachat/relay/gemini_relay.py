"""Gemini relay service with streaming support.

Core module for forwarding a conversation to the Gemini API and yielding
the reply as it is generated.

Each request is stateless: the browser sends the whole history, the service
opens a fresh Gemini chat seeded with every message except the last one, then
sends the last (newest user) message and streams the reply back.
"""

import logging
from collections.abc import AsyncGenerator, Sequence

from google import genai
from google.genai import types

from datachat.models.schemas import Message
from datachat.relay.config import RelayConfig, get_relay_config

logger = logging.getLogger(__name__)


def to_contents(messages: Sequence[Message]) -> list[types.Content]:
    """Convert messages into Gemini content objects."""
    return [
        types.Content(
            role=message.role,
            parts=[types.Part(text=part.text) for part in message.parts],
        )
        for message in messages
    ]


class RelayService:
    """Service wrapping the Gemini chat API.

    Wraps google-genai's async chat client with:
    - Persona system instruction and thinking budget from config
    - History seeding from the client-supplied conversation
    - Clean streaming interface for the SSE endpoint
    """

    def __init__(self, config: RelayConfig | None = None) -> None:
        """Initialize the relay service.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_relay_config()
        self._client = self._create_client()

    def _create_client(self) -> genai.Client:
        return genai.Client(api_key=self._config.api_key)

    def _chat_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=self._config.system_prompt,
            thinking_config=types.ThinkingConfig(
                thinking_budget=self._config.thinking_budget,
            ),
        )

    async def stream_reply(self, history: Sequence[Message]) -> AsyncGenerator[str]:
        """Stream the model's reply to the final message of a conversation.

        Args:
            history: Full conversation; the final entry is the message to send.

        Yields:
            Reply text fragments in arrival order.

        Raises:
            ValueError: If history is empty.
            google.genai.errors.APIError: On upstream failure.
        """
        if not history:
            raise ValueError("history must contain at least one message")

        *previous, latest = history

        chat = self._client.aio.chats.create(
            model=self._config.model_name,
            history=to_contents(previous),
            config=self._chat_config(),
        )
        logger.debug(
            f"Opened {self._config.model_name} chat with {len(previous)} prior messages"
        )

        stream = await chat.send_message_stream(latest.text)
        async for chunk in stream:
            if chunk.text:
                yield chunk.text


# Module-level singleton instance
_relay_service: RelayService | None = None


def get_relay_service() -> RelayService:
    """Get or create the global relay service.

    Returns:
        The RelayService instance.

    Raises:
        ValidationError: If the relay configuration is invalid.
    """
    global _relay_service
    if _relay_service is None:
        _relay_service = RelayService()
    return _relay_service
