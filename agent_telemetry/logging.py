"""
Agent telemetry logging utilities.

Provides configurable logging for HTTP requests/responses, realtime
connection transitions and store writes. Ensures no credentials
(API keys, bearer tokens) are logged.
"""

import logging
import re
from typing import Any

# Package loggers
_sdk_logger = logging.getLogger("agent_telemetry")
_http_logger = logging.getLogger("agent_telemetry.http")
_realtime_logger = logging.getLogger("agent_telemetry.realtime")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Bearer tokens in Authorization headers
    (re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE), "Bearer [REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key|apikey)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"authorization", "api_key", "apikey", "secret", "token", "password"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    realtime_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure agent telemetry logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        realtime_level: Log level for connection transitions (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from agent_telemetry.logging import configure_logging

        # Trace every request made to the agent data source
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _realtime_logger.setLevel(realtime_level if realtime_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get an agent telemetry logger.

    Args:
        name: Logger name suffix (e.g., "http", "realtime", "store").
            If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"agent_telemetry.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in a string.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with bearer tokens and key/secret assignments redacted
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, api_key,
            secret, token, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> None:
    """
    Log an HTTP request at DEBUG level with credentials masked.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        headers: Request headers (optional)
        params: Query parameters (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(dict(headers))}")

    if params:
        log_parts.append(f"params={safe_log_dict(params)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log an HTTP response at DEBUG level.

    Args:
        status_code: HTTP status code
        url: Request URL
        elapsed_ms: Request duration in milliseconds (optional)
    """
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_connection_transition(
    previous: str,
    current: str,
    reason: str | None = None,
) -> None:
    """
    Log a realtime connection state transition.

    Transitions into "error" are logged at WARNING, everything else at INFO.

    Args:
        previous: State before the transition
        current: State after the transition
        reason: Why the transition happened (optional)
    """
    level = logging.WARNING if current == "error" else logging.INFO
    if not _realtime_logger.isEnabledFor(level):
        return

    message = f"connection {previous} -> {current}"
    if reason:
        message = f"{message} | reason={mask_sensitive_data(reason)}"

    _realtime_logger.log(level, message)


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_connection_transition",
]
