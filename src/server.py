"""Protean Engine runner for ShopStream domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes event handlers; a
  message that keeps failing is retried and then parked on the dead
  letter stream (see ``[production.server.stream_subscription]`` in each
  domain's ``domain.toml``)

Alongside the notifications engine, a thread runs the periodic retry sweep.

Usage:
    python src/server.py                          # All domain engines + sweep
    python src/server.py --domain payments        # Only the payments engine
    python src/server.py --no-sweep               # Engines only
    python src/server.py --sweep-once             # One sweep pass, then exit
"""

import argparse
import asyncio
import functools
import threading

import structlog
from protean.server.engine import Engine
from shared.config import get_settings
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

DOMAINS = ("ordering", "payments", "notifications")


@functools.cache
def _get_domain(name):
    """Import and initialize a domain by name, once per process."""
    if name == "ordering":
        from ordering.domain import ordering

        ordering.init()
        return ordering
    elif name == "payments":
        from payments.domain import payments

        payments.init()
        return payments
    elif name == "notifications":
        from notifications.domain import notifications

        notifications.init()
        return notifications
    else:
        raise ValueError(f"Unknown domain: {name}")


def _start_sweeper(stop: threading.Event) -> threading.Thread:
    from notifications.notification.sweep import run_sweeper

    sweeper = threading.Thread(
        target=run_sweeper,
        args=(_get_domain("notifications"), stop, get_settings().notification_sweep_interval_seconds),
        name="notification-sweeper",
        daemon=True,
    )
    sweeper.start()
    return sweeper


async def run(domain_names, sweep=True):
    engines = [Engine(_get_domain(name)) for name in domain_names]

    stop = threading.Event()
    sweeper = _start_sweeper(stop) if sweep and "notifications" in domain_names else None
    try:
        await asyncio.gather(*(engine.run() for engine in engines))
    finally:
        stop.set()
        if sweeper is not None:
            sweeper.join(timeout=5)


def sweep_once() -> int:
    from notifications.notification.sweep import sweep_retries

    with _get_domain("notifications").domain_context():
        return sweep_retries()


def main():
    parser = argparse.ArgumentParser(description="ShopStream Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAINS,
        help="Run a single domain engine (default: run all)",
    )
    parser.add_argument("--no-sweep", action="store_true", help="Do not run the notification retry sweep")
    parser.add_argument("--sweep-once", action="store_true", help="Run one retry sweep pass and exit")
    args = parser.parse_args()

    configure_logging()
    if args.sweep_once:
        attempted = sweep_once()
        print(f"Retried {attempted} notification(s).")
        return

    domain_names = [args.domain] if args.domain else list(DOMAINS)
    logger.info("Starting engines", domains=domain_names, sweep=not args.no_sweep)
    asyncio.run(run(domain_names, sweep=not args.no_sweep))


if __name__ == "__main__":
    main()
