"""Client configuration with environment variable loading.

Pydantic-based configuration for the chat client: Supabase project
credentials, the assistant webhook and a few UI switches.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class ChatConfig(BaseModel):
    """Configuration for the chat client.

    Attributes:
        supabase_url: Base URL of the Supabase project.
        supabase_anon_key: Public anon key sent as the ``apikey`` header.
        webhook_url: Assistant endpoint receiving chat messages.
        webhook_timeout: Transport timeout for assistant calls, in seconds.
        oauth_providers: Third-party identity providers offered on login.
        site_url: Public URL of this app, used for OAuth redirects.
        related_topics_enabled: Show follow-up topics parsed from replies.
    """

    model_config = ConfigDict(validate_default=True)

    supabase_url: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_URL", ""),
        description="Supabase project URL",
    )
    supabase_anon_key: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""),
        description="Supabase anon (public) API key",
    )
    webhook_url: str = Field(
        default_factory=lambda: os.getenv("WEBHOOK_URL", ""),
        description="Assistant webhook URL",
    )
    webhook_timeout: float = Field(
        default_factory=lambda: float(os.getenv("WEBHOOK_TIMEOUT", "120")),
        gt=0.0,
        description="Timeout for assistant webhook calls in seconds",
    )
    oauth_providers: list[str] = Field(
        default_factory=lambda: os.getenv("OAUTH_PROVIDERS", "google,facebook").split(","),
        description="OAuth providers shown on the login page",
    )
    site_url: str = Field(
        default_factory=lambda: os.getenv("SITE_URL", "http://localhost:8000"),
        description="Public base URL of this app",
    )
    related_topics_enabled: bool = Field(
        default_factory=lambda: _env_flag("RELATED_TOPICS_ENABLED"),
        description="Populate follow-up topic buttons from assistant replies",
    )

    @field_validator("supabase_url", "webhook_url", "site_url")
    @classmethod
    def validate_url(cls, v: str, info: ValidationInfo) -> str:
        """Validate that URLs are present and absolute."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError(f"{info.field_name} required. Set {info.field_name.upper()} in .env")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must start with http:// or https://")
        return v

    @field_validator("supabase_anon_key")
    @classmethod
    def validate_anon_key(cls, v: str) -> str:
        """Validate that the anon key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("Supabase anon key required. Set SUPABASE_ANON_KEY in .env")
        return v.strip()

    @field_validator("oauth_providers")
    @classmethod
    def clean_providers(cls, v: list[str]) -> list[str]:
        """Drop blanks and normalise provider names."""
        return [p.strip().lower() for p in v if p and p.strip()]


def get_chat_config() -> ChatConfig:
    """Create client configuration from environment.

    Returns:
        Configured ChatConfig instance.

    Raises:
        ValueError: If a required setting is missing.
    """
    return ChatConfig()
