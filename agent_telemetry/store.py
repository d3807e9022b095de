"""
Agent telemetry synchronization store.

Holds the dashboard's view of every agent. The view is bootstrapped by a
full refresh and kept live by the realtime channel. Fetched and pushed
records both reach the collection through `SyncStore._commit`, which
replaces whole agent records without yielding to the event loop, so writes
never interleave.

UI code receives a store instance and only reads from it or calls its
public coroutines:

    store = init_store(TelemetryConfig.from_env())
    await store.ensure_initialized()
    unsubscribe = store.subscribe(lambda changed: redraw(changed))
    ...
    await dispose_store()
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from contextlib import suppress
from datetime import datetime
from types import MappingProxyType
from typing import Any

from agent_telemetry.client import AsyncTelemetryClient
from agent_telemetry.config import TelemetryConfig
from agent_telemetry.connection import ConnectionManager, ReconnectPolicy
from agent_telemetry.exceptions import ConfigurationError, FetchError, MalformedPayloadError
from agent_telemetry.logging import get_logger
from agent_telemetry.normalize import normalize
from agent_telemetry.realtime.channel import RealtimeChannel
from agent_telemetry.refresh import DEFAULT_CACHE_TTL, AgentDataSource, RefreshOrchestrator
from agent_telemetry.types.agents import Agent

logger = get_logger("store")

ChangeListener = Callable[[tuple[str, ...]], None]


class SyncStore:
    """Process-wide agent collection with refresh and realtime sync."""

    def __init__(
        self,
        source: AgentDataSource,
        channel: RealtimeChannel,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        reconnect_policy: ReconnectPolicy | None = None,
        auto_reconnect: bool = True,
        on_dispose: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            source: Agent data source used for refreshes
            channel: Realtime channel delivering agent updates
            cache_ttl: Seconds a successful refresh stays fresh
            reconnect_policy: Backoff used after the channel drops
            auto_reconnect: Reconnect automatically after failures
            on_dispose: Coroutine function releasing resources the store owns
        """
        self._agents: dict[str, Agent] = {}
        self._listeners: list[ChangeListener] = []
        self._on_dispose = on_dispose
        self._initialized = False
        self._initializing: asyncio.Task | None = None

        self._refresh = RefreshOrchestrator(
            source,
            commit=self._commit,
            is_populated=lambda: bool(self._agents),
            cache_ttl=cache_ttl,
        )
        self._connection = ConnectionManager(
            channel,
            on_update=self._apply_push,
            policy=reconnect_policy,
            auto_reconnect=auto_reconnect,
        )

    @classmethod
    def from_config(cls, config: TelemetryConfig) -> "SyncStore":
        """
        Build a store talking to a live telemetry API.

        The store owns the HTTP client it creates and closes it on dispose.
        """
        client = AsyncTelemetryClient.from_config(config)
        return cls(
            source=client.agents,
            channel=client.realtime_channel(config.realtime_mode, config.poll_interval),
            cache_ttl=config.cache_ttl,
            reconnect_policy=config.reconnect_policy,
            auto_reconnect=config.auto_reconnect,
            on_dispose=client.close,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def agents(self) -> Mapping[str, Agent]:
        """Read-only snapshot of all agents in registration order."""
        return MappingProxyType(dict(self._agents))

    def get_agent(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    @property
    def connection_status(self) -> str:
        """One of disconnected, connecting, connected, error."""
        return self._connection.status

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    @property
    def last_refresh_at(self) -> datetime | None:
        """When the last full refresh completed (UTC), or None."""
        return self._refresh.last_refresh_at

    def is_realtime_connected(self) -> bool:
        return self._connection.is_connected()

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Observe committed writes.

        Args:
            listener: Called with the ids of agents that changed

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            with suppress(ValueError):
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def connect_realtime(self) -> None:
        """Open the realtime channel. Never raises on connection failure."""
        await self._connection.connect()

    async def disconnect_realtime(self) -> None:
        await self._connection.disconnect()

    async def refresh_all_data(self, force: bool = False) -> None:
        """
        Pull the full agent collection and merge it.

        Args:
            force: Fetch even if the last refresh is still fresh

        Raises:
            FetchError: If the fetch fails; existing data is kept
        """
        try:
            await self._refresh.refresh_all(force=force)
        except FetchError as e:
            logger.warning("refresh failed, keeping current data: %s", e)
            raise

    async def refresh_agent(self, agent_id: str) -> Agent | None:
        """
        Pull and merge a single agent.

        Returns:
            The merged agent, or None if its payload was malformed

        Raises:
            FetchError: If the fetch fails
        """
        return await self._refresh.refresh_one(agent_id)

    async def ensure_initialized(self) -> None:
        """
        Bootstrap the store once: refresh, then connect.

        Safe to call from every UI mount. Concurrent calls share one
        bootstrap, so the data source is fetched once and one channel is
        opened. If the refresh fails the error is raised to every caller
        and the next call tries again. A mount that finds the channel
        disconnected bootstraps again; the refresh is skipped while the
        data is still fresh.

        Raises:
            FetchError: If the bootstrap refresh fails
        """
        if self._initialized and self.is_realtime_connected():
            return
        if self._initializing is None:
            self._initializing = asyncio.create_task(self._initialize())
        await asyncio.shield(self._initializing)

    async def dispose(self) -> None:
        """Close the channel, clear all state and release owned resources."""
        initializing, self._initializing = self._initializing, None
        if initializing is not None:
            initializing.cancel()
            with suppress(asyncio.CancelledError, FetchError):
                await initializing

        await self._connection.disconnect()

        self._agents.clear()
        self._listeners.clear()
        self._refresh.reset()
        self._initialized = False

        if self._on_dispose is not None:
            await self._on_dispose()
        logger.info("store disposed")

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def _initialize(self) -> None:
        try:
            if not self.is_realtime_connected():
                await self.refresh_all_data()
                await self.connect_realtime()
            self._initialized = self.is_realtime_connected()
        finally:
            if self._initializing is asyncio.current_task():
                self._initializing = None

    def _apply_push(self, payload: Any) -> None:
        try:
            agent = normalize(payload)
        except MalformedPayloadError as e:
            logger.warning("dropping malformed update: %s", e.message)
            return
        self._commit({agent.id: agent})

    def _commit(self, agents: Mapping[str, Agent]) -> None:
        changed = []
        for agent_id, agent in agents.items():
            if self._agents.get(agent_id) != agent:
                self._agents[agent_id] = agent
                changed.append(agent_id)

        if not changed:
            return

        logger.debug("committed %d agents: %s", len(changed), ", ".join(changed))
        ids = tuple(changed)
        for listener in list(self._listeners):
            try:
                listener(ids)
            except Exception:
                logger.exception("store listener failed")


_store: SyncStore | None = None


def init_store(
    config: TelemetryConfig | None = None,
    store: SyncStore | None = None,
) -> SyncStore:
    """
    Create the process-wide store, or return it if it already exists.

    Args:
        config: Configuration for a store built against a live API
            (default: read from AGENT_TELEMETRY_* environment variables)
        store: Pre-built store to install instead (tests inject one)

    Returns:
        The process-wide store
    """
    global _store
    if _store is None:
        _store = store or SyncStore.from_config(config or TelemetryConfig.from_env())
    return _store


def get_store() -> SyncStore:
    """
    Return the process-wide store.

    Raises:
        ConfigurationError: If init_store() has not been called
    """
    if _store is None:
        raise ConfigurationError("store is not initialized; call init_store() first")
    return _store


async def dispose_store() -> None:
    """Dispose the process-wide store. A no-op if none exists."""
    global _store
    store, _store = _store, None
    if store is not None:
        await store.dispose()


__all__ = ["SyncStore", "init_store", "get_store", "dispose_store"]
