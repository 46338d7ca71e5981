"""Gemini relay logic.

Forwards a conversation to the Gemini API and streams the reply back.

Responsibilities:
    - Client initialization from environment configuration
    - Persona system instruction
    - History seeding (all messages but the newest)
    - Streaming text fragments for the SSE endpoint

Maintains clean separation from the HTTP layer.
"""

from datachat.relay.config import RelayConfig, get_relay_config
from datachat.relay.gemini_relay import RelayService, get_relay_service

__all__ = ["RelayConfig", "RelayService", "get_relay_config", "get_relay_service"]
