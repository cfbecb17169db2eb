"""
Command-line interface for content-feed.

Provides commands to build a feed snapshot, probe each upstream source,
and keep a feed refreshing with metrics exposed.

Usage:
    content-feed snapshot   # Aggregate once and print the bundle as JSON
    content-feed sources    # Fetch each source once and report outcomes
    content-feed watch      # Refresh periodically, serving metrics
"""

import asyncio
import json
import signal
import sys
import time

import click

from src.config.settings import get_settings
from src.observability.logging import setup_logging
from src.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Content Feed - aggregate catalog, channel and ranking sources."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--mock", is_flag=True, help="Use mock adapters")
@click.option("--indent", default=2, type=int, help="JSON indentation")
def snapshot(mock: bool, indent: int) -> None:
    """Run one refresh and print the bundle as JSON."""
    from src.feed.aggregator import FeedAggregator
    from src.services.feed_service import FeedService

    async def run() -> FeedService:
        service = FeedService(FeedAggregator.from_settings(use_mock=mock))
        await service.refresh()
        return service

    service = asyncio.run(run())

    if service.last_error:
        click.echo(click.style(f"Refresh failed: {service.last_error}", fg="red"), err=True)
        sys.exit(1)

    click.echo(json.dumps(service.current_bundle.to_dict(), indent=indent or None))


@main.command()
@click.option("--mock", is_flag=True, help="Use mock adapters")
def sources(mock: bool) -> None:
    """Fetch each source once and report its outcome."""
    from src.feed.aggregator import FeedAggregator

    async def probe(adapter):
        start_time = time.monotonic()
        result = await adapter.fetch()
        return result, time.monotonic() - start_time

    async def run():
        adapters = FeedAggregator.from_settings(use_mock=mock).adapters
        results = await asyncio.gather(*(probe(a) for a in adapters.values()))
        return list(zip(adapters.keys(), results))

    results = asyncio.run(run())

    click.echo("\nSource Results:")
    click.echo("-" * 40)

    all_ok = True
    for name, (result, elapsed) in results:
        icon = "✓" if result.is_ok else "✗"
        color = "green" if result.is_ok else "red"
        line = f"  {icon} {name}: {len(result)} records in {elapsed:.2f}s"
        if not result.is_ok:
            line += f" ({result.reason})"
            all_ok = False
        click.echo(click.style(line, fg=color))

    click.echo("-" * 40)

    if all_ok:
        click.echo(click.style("All sources healthy!", fg="green"))
    else:
        click.echo(click.style("Some sources degraded!", fg="red"))
        sys.exit(1)


@main.command()
@click.option("--mock", is_flag=True, help="Use mock adapters")
@click.option("--interval", default=60.0, type=float, help="Seconds between refreshes")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def watch(mock: bool, interval: float, metrics: bool, metrics_port: int | None) -> None:
    """Keep the feed refreshing until interrupted."""
    from src.feed.aggregator import FeedAggregator
    from src.services.feed_service import FeedService, FeedState

    def report(state: FeedState) -> None:
        if state.is_loading:
            return
        if state.error:
            click.echo(click.style(f"Refresh failed: {state.error}", fg="red"))
            return
        sizes = ", ".join(f"{k}={v}" for k, v in state.bundle.bucket_sizes().items())
        click.echo(f"Feed refreshed: {sizes}")

    async def run():
        service = FeedService(FeedAggregator.from_settings(use_mock=mock))
        service.add_listener(report)

        if metrics:
            get_metrics().start_server(port=metrics_port)

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop.set)

        try:
            await service.start()
            while not stop.is_set():
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval)
                except asyncio.TimeoutError:
                    await service.refresh()
        finally:
            await service.aclose()

    asyncio.run(run())


if __name__ == "__main__":
    main()
