"""Agent telemetry configuration."""

import os
from dataclasses import dataclass, field

from agent_telemetry.connection import ReconnectPolicy
from agent_telemetry.exceptions import ConfigurationError
from agent_telemetry.realtime.polling import DEFAULT_POLL_INTERVAL
from agent_telemetry.refresh import DEFAULT_CACHE_TTL
from agent_telemetry.transport import RetryConfig

REALTIME_MODES = ("sse", "polling")


@dataclass
class TelemetryConfig:
    """Settings for building a store against a live telemetry API."""

    base_url: str
    api_key: str | None = None
    timeout: float = 30.0
    realtime_mode: str = "sse"  # "sse" or "polling"
    poll_interval: float = DEFAULT_POLL_INTERVAL
    cache_ttl: float = DEFAULT_CACHE_TTL
    auto_reconnect: bool = True
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    reconnect_policy: ReconnectPolicy = field(default_factory=ReconnectPolicy)

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if self.realtime_mode not in REALTIME_MODES:
            raise ConfigurationError(
                f"Invalid realtime_mode: {self.realtime_mode}. Must be 'sse' or 'polling'"
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be positive")
        if self.cache_ttl < 0:
            raise ConfigurationError("cache_ttl must not be negative")

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            AGENT_TELEMETRY_BASE_URL: Base URL of the telemetry API (required)
            AGENT_TELEMETRY_API_KEY: Bearer token (optional)
            AGENT_TELEMETRY_TIMEOUT: Request timeout in seconds (optional, default: 30)
            AGENT_TELEMETRY_REALTIME_MODE: "sse" or "polling" (optional, default: sse)
            AGENT_TELEMETRY_POLL_INTERVAL: Seconds between polls (optional, default: 10)
            AGENT_TELEMETRY_CACHE_TTL: Seconds a refresh stays fresh (optional, default: 30)

        Returns:
            Configured TelemetryConfig

        Raises:
            ConfigurationError: If required variables are missing or values are invalid
        """
        base_url = os.environ.get("AGENT_TELEMETRY_BASE_URL")
        if not base_url:
            raise ConfigurationError("AGENT_TELEMETRY_BASE_URL environment variable not set")

        return cls(
            base_url=base_url,
            api_key=os.environ.get("AGENT_TELEMETRY_API_KEY") or None,
            timeout=_float_env("AGENT_TELEMETRY_TIMEOUT", 30.0),
            realtime_mode=os.environ.get("AGENT_TELEMETRY_REALTIME_MODE", "sse").lower(),
            poll_interval=_float_env("AGENT_TELEMETRY_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            cache_ttl=_float_env("AGENT_TELEMETRY_CACHE_TTL", DEFAULT_CACHE_TTL),
        )


def _float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: {value!r} is not a number") from None
