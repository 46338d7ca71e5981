"""Relay configuration with environment variable loading.

Pydantic-based configuration for the Gemini streaming relay.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from datachat.relay.persona import SYSTEM_PROMPT

# Load environment variables from .env file
load_dotenv()


class RelayConfig(BaseModel):
    """Configuration for the Gemini relay.

    Attributes:
        api_key: Gemini API key (GEMINI_API_KEY).
        model_name: Gemini model identifier.
        thinking_budget: Token budget for model thinking (0 disables it).
        system_prompt: Persona instruction sent with every chat session.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""),
        description="API key for the Gemini API",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        description="Model to use",
    )
    thinking_budget: int = Field(
        default=0,
        ge=0,
        description="Thinking token budget (0 = no thinking)",
    )
    system_prompt: str = Field(
        default=SYSTEM_PROMPT,
        min_length=1,
        description="System instruction for the persona",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("GEMINI_API_KEY is required. Set it in the environment or .env")
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValidationError: If GEMINI_API_KEY is not set.
    """
    return RelayConfig()
