"""Agent telemetry exception classes."""


class TelemetryError(Exception):
    """Base exception for all agent telemetry errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(TelemetryError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class FetchError(TelemetryError):
    """Raised when agent data could not be fetched from the data source."""

    pass


class AuthenticationError(FetchError):
    """Raised when the data source rejects the credentials."""

    pass


class AuthorizationError(FetchError):
    """Raised when access is denied."""

    pass


class NotFoundError(FetchError):
    """Raised when an agent or endpoint is not found."""

    pass


class RateLimitedError(FetchError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(FetchError):
    """Raised on server errors (5xx) and network failures."""

    pass


class RealtimeConnectionError(TelemetryError):
    """Raised by channels when the realtime stream cannot be opened or drops.

    The connection manager absorbs this into its state; it never reaches
    UI code.
    """

    def __init__(self, message: str) -> None:
        super().__init__("REALTIME_CONNECTION_ERROR", message)


class MalformedPayloadError(TelemetryError):
    """Raised when an agent payload cannot be parsed."""

    def __init__(self, message: str, agent_id: str | None = None) -> None:
        super().__init__("MALFORMED_PAYLOAD", message)
        self.agent_id = agent_id
