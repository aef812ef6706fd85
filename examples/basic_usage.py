#!/usr/bin/env python3
"""
Basic Usage Example - FXSync Dashboard Core

This script drives the dashboard core the way a renderer would. It shows how to:
- Load configuration and configure logging
- Initialize the orchestrator and subscribe to state updates
- Render the derived dashboard view
- Emit the pair selection and manual refresh intents

No API server is required: unreachable sources degrade to fallback data.

Run: python examples/basic_usage.py [PAIR]
"""

import asyncio
import sys

from fxsync_app.analytics import DashboardView
from fxsync_app.config import load_config
from fxsync_app.logging import configure_logging
from fxsync_app.orchestrator import SyncOrchestrator
from fxsync_app.state.models import SessionState


def print_view(view: DashboardView) -> None:
    """Render a dashboard view as plain text."""
    status = view.connection_status.value.upper()
    print(f"📡 Status: {status}{'  (loading)' if view.loading else ''}")
    print(f"   Last updated: {view.last_updated}")

    card = view.rate_card
    if card is None:
        print("   No pair tracked")
        return

    arrow = "▲" if card.direction.value == "up" else "▼"
    print(f"\n💱 {card.pair.value}: {card.rate} {arrow} {card.change} ({card.percent})"
          f"  updated {card.updated}")

    if view.history:
        print(f"\n📈 History ({len(view.history)} points):")
        for row in view.history[-5:]:
            print(f"   {row.timestamp:%Y-%m-%d %H:%M}  {row.rate}  vol {row.volume:,}")

    if view.forecast:
        print(f"\n🔮 Forecast: {view.forecast.label}")
        for row in view.forecast.predictions[:5]:
            print(f"   {row.timestamp:%Y-%m-%d %H:%M}  {row.predicted}  ({row.confidence})")

    if view.news:
        print("\n📰 News:")
        for item in view.news:
            print(f"   [{item.sentiment}] {item.title} - {item.source}, {item.published}")
    print("-" * 60)


async def main(pair: str) -> None:
    """Main demo function."""
    config = load_config()
    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    print("🚀 FXSync Dashboard Core - Basic Usage Demo")
    print("=" * 60)
    print(f"API: {config.api.base_url}\n")

    updates = []

    def on_update(state: SessionState) -> None:
        updates.append(state)

    async with SyncOrchestrator.create(config) as orchestrator:
        orchestrator.subscribe(on_update)

        print("1. Initial load")
        print_view(orchestrator.view())

        print(f"2. Selecting {pair}")
        await orchestrator.select_pair(pair)
        print_view(orchestrator.view())

        print("3. Manual refresh")
        await orchestrator.request_refresh()
        print_view(orchestrator.view())

    print(f"Received {len(updates)} state updates")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "USD/JPY"))
