"""Configuration management with pydantic-settings for voicenav.

Loads from (in order of precedence):
1. Environment variables (VOICENAV_* prefix, OPENAI_API_KEY unprefixed)
2. .env file in the working directory
3. Default values

The upstream credential only matters to the proxy service and is held as
a SecretStr so it never shows up in logs or reprs.
"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("voicenav.config")

__all__ = ["VoiceNavConfig", "get_config", "reset_config"]


class VoiceNavConfig(BaseSettings):
    """Configuration for voice navigation and the /api/voice proxy.

    Attributes:
        openai_api_key: Upstream credential, server side only
        openai_model: Chat model used by the proxy
        openai_base_url: Upstream API base URL
        openai_temperature: Sampling temperature for intent replies
        openai_max_tokens: Reply token cap
        upstream_timeout: Proxy -> upstream timeout in seconds
        proxy_url: Endpoint the remote interpreter posts to
        proxy_timeout: Interpreter -> proxy timeout in seconds
        intent_source: Primary intent source (local or remote)
        remote_fallback: What to do when the remote source fails
            (local: re-score locally, default: generic projects section)
        confidence_threshold: Remote confidence below this is "low"
        low_confidence_policy: proceed silently or advise "command unclear"
        filter_retry_interval_ms: Delay between deferred filter attempts
        filter_retry_timeout_ms: Give up applying a deferred filter after this
        circuit_failure_threshold: Consecutive remote failures before skipping it
        circuit_reset_timeout: Seconds before the remote source is retried
        log_level: Logging level
        log_format: json (production) or text (development)
    """

    model_config = SettingsConfigDict(
        env_prefix="VOICENAV_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    # Upstream model (proxy side)
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("OPENAI_API_KEY", "VOICENAV_OPENAI_API_KEY"),
        description="Upstream API credential. Never sent to the client.",
    )
    openai_model: str = Field(default="gpt-4o-mini", description="Upstream chat model")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", description="Upstream API base URL"
    )
    openai_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    openai_max_tokens: int = Field(default=150, ge=16, le=4000)
    upstream_timeout: float = Field(default=15.0, gt=0, le=120)

    # Interpreter (client side)
    proxy_url: str = Field(
        default="http://localhost:3000/api/voice",
        description="URL of the /api/voice proxy endpoint",
    )
    proxy_timeout: float = Field(default=10.0, gt=0, le=120)

    # Routing policy
    intent_source: str = Field(default="remote", pattern="^(local|remote)$")
    remote_fallback: str = Field(default="local", pattern="^(local|default)$")
    confidence_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Remote confidence below this is treated as low confidence",
    )
    low_confidence_policy: str = Field(
        default="proceed",
        pattern="^(proceed|advise)$",
        description="proceed: route silently; advise: route and report 'command unclear'",
    )

    # Deferred filter application after a cross-page redirect
    filter_retry_interval_ms: int = Field(default=100, ge=10, le=5000)
    filter_retry_timeout_ms: int = Field(default=2000, ge=0, le=30000)

    # Remote source circuit breaker
    circuit_failure_threshold: int = Field(default=5, ge=1, le=100)
    circuit_reset_timeout: int = Field(default=60, ge=1, le=3600)

    # Logging
    log_level: str = Field(
        default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )
    log_format: str = Field(default="json", pattern="^(json|text)$")

    @model_validator(mode="after")
    def validate_retry_window(self) -> "VoiceNavConfig":
        """Retry interval must fit inside the retry timeout (when one is set)."""
        if (
            self.filter_retry_timeout_ms
            and self.filter_retry_interval_ms > self.filter_retry_timeout_ms
        ):
            raise ValueError(
                f"VOICENAV_FILTER_RETRY_INTERVAL_MS ({self.filter_retry_interval_ms}) "
                f"must be <= VOICENAV_FILTER_RETRY_TIMEOUT_MS ({self.filter_retry_timeout_ms})"
            )
        return self

    @property
    def has_upstream_credential(self) -> bool:
        return bool(self.openai_api_key.get_secret_value())


@lru_cache(maxsize=1)
def get_config() -> VoiceNavConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return VoiceNavConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
