"""
Full-collection refreshes.

A refresh fetches every agent from the data source, normalizes the records
and hands them to the store's write path. Merging is additive: agents the
source did not return are left as they are.
"""

import asyncio
import time
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Protocol

from agent_telemetry.exceptions import FetchError, MalformedPayloadError
from agent_telemetry.logging import get_logger
from agent_telemetry.normalize import normalize, normalize_collection
from agent_telemetry.types.agents import Agent

logger = get_logger("store")

DEFAULT_CACHE_TTL = 30.0


class AgentDataSource(Protocol):
    """Where full agent collections come from."""

    async def fetch_all(self) -> Mapping[str, Any]:
        """Return a mapping of agent id to raw agent payload."""
        ...

    async def fetch(self, agent_id: str) -> Mapping[str, Any]:
        """Return the raw payload of one agent."""
        ...


Commit = Callable[[Mapping[str, Agent]], None]


class RefreshOrchestrator:
    """Runs refreshes with at most one full fetch in flight."""

    def __init__(
        self,
        source: AgentDataSource,
        commit: Commit,
        is_populated: Callable[[], bool],
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            source: Agent data source
            commit: Store write path taking normalized agents by id
            is_populated: Whether the store already holds agents
            cache_ttl: Seconds a successful refresh stays fresh (0 disables)
            clock: Monotonic clock, replaceable in tests
        """
        self.source = source
        self.cache_ttl = cache_ttl
        self._commit = commit
        self._is_populated = is_populated
        self._clock = clock
        self._in_flight: asyncio.Task | None = None
        self._refreshed_at: float | None = None
        self.last_refresh_at: datetime | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    def is_fresh(self) -> bool:
        """True if the last refresh is younger than cache_ttl and the store has data."""
        if self._refreshed_at is None or self.cache_ttl <= 0:
            return False
        age = self._clock() - self._refreshed_at
        return age < self.cache_ttl and self._is_populated()

    async def refresh_all(self, force: bool = False) -> None:
        """
        Fetch and merge the full agent collection.

        A call made while another refresh is running waits for that refresh
        instead of fetching again.

        Args:
            force: Fetch even if the last refresh is still fresh

        Raises:
            FetchError: If the fetch fails; the store is left unchanged
        """
        if self._in_flight is None:
            if not force and self.is_fresh():
                logger.debug("agent data is fresh, skipping refresh")
                return
            self._in_flight = asyncio.create_task(self._run())

        await asyncio.shield(self._in_flight)

    async def refresh_one(self, agent_id: str) -> Agent | None:
        """
        Fetch and merge a single agent.

        Returns:
            The merged agent, or None if the payload was malformed and dropped

        Raises:
            FetchError: If the fetch fails
        """
        raw = await self._fetch(lambda: self.source.fetch(agent_id))
        if isinstance(raw, Mapping) and raw.get("id") is None:
            raw = {**raw, "id": agent_id}

        try:
            agent = normalize(raw)
        except MalformedPayloadError as e:
            logger.warning("dropping malformed agent %r: %s", agent_id, e.message)
            return None

        self._commit({agent.id: agent})
        return agent

    def reset(self) -> None:
        """Forget refresh history and abandon any refresh in flight."""
        in_flight, self._in_flight = self._in_flight, None
        if in_flight is not None:
            in_flight.cancel()
        self._refreshed_at = None
        self.last_refresh_at = None

    async def _run(self) -> None:
        try:
            raw = await self._fetch(self.source.fetch_all)
            if not isinstance(raw, Mapping):
                raise FetchError(
                    "INVALID_RESPONSE",
                    f"agent collection must be a mapping, got {type(raw).__name__}",
                )

            agents = normalize_collection(raw)
            self._commit(agents)

            self._refreshed_at = self._clock()
            self.last_refresh_at = datetime.now(timezone.utc)
            logger.info("refreshed %d agents", len(agents))
        finally:
            # reset() may already have replaced this task
            if self._in_flight is asyncio.current_task():
                self._in_flight = None

    async def _fetch(self, fetch: Callable[[], Any]) -> Any:
        try:
            return await fetch()
        except FetchError:
            raise
        except Exception as e:
            raise FetchError("FETCH_FAILED", str(e) or type(e).__name__) from e


__all__ = ["AgentDataSource", "RefreshOrchestrator", "DEFAULT_CACHE_TTL"]
