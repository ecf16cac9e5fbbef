#!/usr/bin/env python3
"""Command-line interface for HackFlow.

Commands:
  - hackflow scrape   : Run the Telegram ingestion scheduler (or one cycle)
  - hackflow serve    : Run the read API

Typical usage:
  hackflow scrape
  hackflow scrape --once --channels astanahub tce_kz
  hackflow serve --port 8080
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from datetime import timedelta

from hackflow.configs.config import Config
from hackflow.configs.settings import Settings, get_settings
from hackflow.ingestion.deduplication import DeduplicationGate
from hackflow.ingestion.errors import PersistenceError
from hackflow.ingestion.fetcher import ChannelFetcher
from hackflow.ingestion.filters import PostFilter
from hackflow.ingestion.normalization.extractor import HackathonExtractor
from hackflow.ingestion.normalization.llm_client import create_llm_client
from hackflow.ingestion.orchestrator import IngestionCycle
from hackflow.ingestion.rate_limit import STRATEGIES, create_rate_limiter
from hackflow.ingestion.scheduler import CycleScheduler, parse_schedule
from hackflow.monitoring.logging import setup_logging
from hackflow.storage.base import HackathonStore

logger = logging.getLogger("hackflow")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hackflow", description="HackFlow hackathon aggregator")
    sub = p.add_subparsers(dest="cmd")

    # scrape
    ps = sub.add_parser("scrape", help="Run the Telegram ingestion scheduler")
    ps.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    ps.add_argument("--channels", nargs="*", default=None, help="Override configured channels")
    ps.add_argument("--interval", default=None, help="Override cycle interval (e.g. 6h, 30m)")

    # serve
    pv = sub.add_parser("serve", help="Run the HTTP API")
    pv.add_argument("--host", default="0.0.0.0")
    pv.add_argument("--port", type=int, default=None)

    return p


def build_cycle(settings: Settings, store: HackathonStore, channels: list[str] | None = None) -> IngestionCycle:
    """Wire one IngestionCycle from settings and an injected store handle."""
    llm = create_llm_client(
        provider=settings.LLM_PROVIDER,
        model_name=settings.LLM_MODEL,
        api_key=settings.llm_api_key(),
        temperature=settings.LLM_TEMPERATURE,
        timeout_s=settings.LLM_TIMEOUT_S,
    )
    return IngestionCycle(
        channels=Config.get_channels(channels or settings.CHANNELS),
        fetcher=ChannelFetcher(timeout_s=settings.FETCH_TIMEOUT_S),
        post_filter=PostFilter(
            keywords=Config.get_keywords(),
            retention=timedelta(days=settings.RETENTION_DAYS),
        ),
        extractor=HackathonExtractor(llm),
        gate=DeduplicationGate(store),
        rate_limiter=create_rate_limiter(
            settings.RATE_LIMIT_STRATEGY, delay_s=settings.EXTRACTION_DELAY_S
        ),
    )


def cmd_scrape(args: argparse.Namespace, settings: Settings) -> int:
    """Run the scraper. Missing credentials or database are fatal."""
    from hackflow.storage.postgres import PostgresHackathonStore, create_pool, ensure_schema

    logger.info("Starting HackFlow Telegram scraper", extra={"stage": "bootstrap"})

    if not settings.llm_api_key():
        logger.error(f"No API key configured for LLM provider '{settings.LLM_PROVIDER}'")
        return 1

    schedule = parse_schedule(args.interval or settings.SCRAPE_INTERVAL)
    if schedule is None:
        logger.error(f"Invalid scrape interval: {args.interval or settings.SCRAPE_INTERVAL!r}")
        return 1

    if settings.RATE_LIMIT_STRATEGY not in STRATEGIES:
        logger.error(
            f"Unknown rate limit strategy {settings.RATE_LIMIT_STRATEGY!r}, expected one of {STRATEGIES}"
        )
        return 1

    try:
        pool = create_pool(settings.get_psycopg2_params())
    except PersistenceError as e:
        logger.error(f"Database initialization failed: {e}")
        return 1

    try:
        ensure_schema(pool)
    except PersistenceError as e:
        logger.error(f"Database initialization failed: {e}")
        pool.closeall()
        return 1

    try:
        cycle = build_cycle(settings, PostgresHackathonStore(pool), channels=args.channels)
    except Exception:
        pool.closeall()
        raise

    try:
        scheduler = CycleScheduler(cycle.run_cycle, schedule.value)

        def _shutdown(signum, frame):
            logger.info("Shutdown requested, stopping after the current cycle")
            scheduler.stop()

        signal.signal(signal.SIGTERM, _shutdown)
        signal.signal(signal.SIGINT, _shutdown)

        scheduler.run(max_cycles=1 if args.once else None)
    finally:
        cycle.fetcher.close()
        pool.closeall()
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from hackflow.api.main import create_app

    port = args.port or settings.PORT
    logger.info(f"Starting HackFlow API server on {args.host}:{port}", extra={"stage": "bootstrap"})
    uvicorn.run(create_app(settings=settings), host=args.host, port=port, log_config=None)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.ENV)

    if args.cmd == "scrape":
        return cmd_scrape(args, settings)
    if args.cmd == "serve":
        return cmd_serve(args, settings)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
