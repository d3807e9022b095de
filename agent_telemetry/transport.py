"""
Async HTTP transport for the agent data source.

Handles HTTP communication with automatic retry logic and error handling
using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

import httpx

from agent_telemetry.exceptions import (
    AuthenticationError,
    AuthorizationError,
    FetchError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)
from agent_telemetry.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer with retry logic.

    Handles:
    - Bearer authentication when an API key is configured
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://telemetry.example.com")
            api_key: Optional bearer token sent with every request
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying httpx client, shared with streaming channels."""
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/v1/agents")
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            FetchError: On API errors or unusable responses
        """
        async def make_request() -> httpx.Response:
            log_http_request(method, path, dict(self._client.headers), params)
            started = time.monotonic()
            response = await self._client.request(method, path, params=params)
            log_http_response(
                response.status_code, path, (time.monotonic() - started) * 1000
            )
            return response

        return await self._execute_with_retry(make_request)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> dict[str, Any]:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Async function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            FetchError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = await request_fn()

                if response.status_code < 400:
                    return self._parse_body(response)

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                await asyncio.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                await asyncio.sleep(wait_time)

        if last_error:
            if isinstance(last_error, FetchError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_body(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise FetchError("INVALID_RESPONSE", f"response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise FetchError(
                "INVALID_RESPONSE", f"expected a JSON object, got {type(data).__name__}"
            )
        return data

    def _parse_error_response(self, response: httpx.Response) -> FetchError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate FetchError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        error = data.get("error") or {}
        if isinstance(error, str):
            error = {"message": error}
        code = error.get("code", "UNKNOWN_ERROR")
        message = error.get("message", f"HTTP {response.status_code}")
        request_id = (data.get("meta") or {}).get("requestId")

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError(code, message, request_id)
        elif status_code == 403:
            return AuthorizationError(code, message, request_id)
        elif status_code == 404:
            return NotFoundError(code, message, request_id)
        elif status_code == 429:
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after, request_id)
        elif status_code >= 500:
            return ServerError(code, message, request_id)
        else:
            return FetchError(code, message, request_id)
