#!/usr/bin/env python3
"""
Agent telemetry - dashboard sync example

Bootstraps the process-wide store against a live telemetry API, prints the
agent table, then prints each realtime update until interrupted.

Run with:
    AGENT_TELEMETRY_BASE_URL=http://localhost:8080 python examples/dashboard_sync.py
"""

import asyncio
import logging
import sys

from agent_telemetry import (
    FetchError,
    SyncStore,
    configure_logging,
    dispose_store,
    init_store,
)


def print_table(store: SyncStore) -> None:
    print(f"{'agent':<22} {'results':>8} {'alignment':>10} {'effectiveness':>14}  trend")
    for agent in store.agents.values():
        perf = agent.performance
        print(
            f"{agent.name:<22} {perf.results_score:>8} {perf.alignment_score:>10} "
            f"{perf.effectiveness_score:>14}  {perf.learning_metrics.improvement_trend}"
        )


async def main() -> None:
    """Run the dashboard sync example."""
    configure_logging(level=logging.INFO)

    print("=== Agent Telemetry Dashboard ===\n")
    store = init_store()

    try:
        # Step 1: Refresh, then open the realtime channel
        print("1. Initializing store...")
        await store.ensure_initialized()
        print(f"   Loaded {len(store.agents)} agents at {store.last_refresh_at}")
        print(f"   Realtime: {store.connection_status}\n")

        # Step 2: Show what we have
        print_table(store)

        # Step 3: Follow updates
        print("\n2. Waiting for updates (Ctrl+C to stop)...")

        def on_change(changed: tuple[str, ...]) -> None:
            for agent_id in changed:
                agent = store.get_agent(agent_id)
                if agent is not None:
                    print(f"   {agent.name}: results={agent.performance.results_score}")

        store.subscribe(on_change)
        store.connection.add_listener(
            lambda previous, current: print(f"   realtime {previous} -> {current}")
        )

        while True:
            await asyncio.sleep(3600)

    except FetchError as e:
        print(f"\nError: [{e.code}] {e.message}")
        if e.request_id:
            print(f"Request ID: {e.request_id}")
        sys.exit(1)
    finally:
        await dispose_store()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
