"""Agent telemetry - synchronized view of the marketing agent suite."""

from agent_telemetry.catalog import AGENT_CATALOG, CatalogEntry
from agent_telemetry.client import AsyncTelemetryClient
from agent_telemetry.config import TelemetryConfig
from agent_telemetry.connection import ConnectionManager, ReconnectPolicy
from agent_telemetry.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    FetchError,
    MalformedPayloadError,
    NotFoundError,
    RateLimitedError,
    RealtimeConnectionError,
    ServerError,
    TelemetryError,
)
from agent_telemetry.logging import configure_logging, get_logger
from agent_telemetry.normalize import normalize, normalize_collection, to_payload
from agent_telemetry.realtime import PollingChannel, RealtimeChannel, SSEChannel
from agent_telemetry.refresh import AgentDataSource, RefreshOrchestrator
from agent_telemetry.store import SyncStore, dispose_store, get_store, init_store
from agent_telemetry.transport import AsyncHTTPTransport, RetryConfig
from agent_telemetry.types import (
    Agent,
    AgentPerformance,
    ContributionMetrics,
    LearningMetrics,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Store
    "SyncStore",
    "init_store",
    "get_store",
    "dispose_store",
    # Components
    "RefreshOrchestrator",
    "AgentDataSource",
    "ConnectionManager",
    "ReconnectPolicy",
    # Normalization
    "normalize",
    "normalize_collection",
    "to_payload",
    "AGENT_CATALOG",
    "CatalogEntry",
    # Types
    "Agent",
    "AgentPerformance",
    "ContributionMetrics",
    "LearningMetrics",
    # Client
    "AsyncTelemetryClient",
    "TelemetryConfig",
    "AsyncHTTPTransport",
    "RetryConfig",
    # Realtime
    "RealtimeChannel",
    "SSEChannel",
    "PollingChannel",
    # Exceptions
    "TelemetryError",
    "ConfigurationError",
    "FetchError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ServerError",
    "RealtimeConnectionError",
    "MalformedPayloadError",
    # Logging
    "configure_logging",
    "get_logger",
]
