"""Command-line entry point for the quote sync core."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from shrutam.config import ShrutamConfig, describe_environment
from shrutam.context import AppContext, build_context
from shrutam.data.sync import SyncError
from shrutam.formatters import format_date, format_quote, format_quote_list
from shrutam.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def show_today(ctx: AppContext) -> int:
    """Fetch and print today's quote. Returns the process exit code."""
    try:
        result = await ctx.orchestrator.sync_today()
    except SyncError as exc:
        logger.error("Unable to fetch today's quote: %s", exc)
        print("Unable to load today's quote. Check your connection and retry.")
        return 1

    if result.from_cache:
        print("(offline - showing today's cached quote)\n")
    print(format_quote(result.value))
    return 0


async def show_recent(ctx: AppContext) -> int:
    """Fetch and print the recent history. Returns the process exit code."""
    try:
        result = await ctx.orchestrator.sync_recent()
    except SyncError as exc:
        logger.error("Unable to load recent quotes: %s", exc)
        print("Unable to load recent quotes. Check your connection and retry.")
        return 1

    if result.from_cache:
        print("(offline - showing cached quotes)\n")
    print(format_quote_list(result.value))
    return 0


async def show_cached(ctx: AppContext) -> int:
    """Print what is stored locally without touching the network."""
    entry = await ctx.daily_cache.peek()
    if entry is None:
        print("Quote of the day: none cached")
    else:
        print(f"Quote of the day (cached {format_date(entry.cached_on)}): {entry.quote.id}")

    quotes = await ctx.recent_cache.read_all()
    print(f"Recent quotes: {len(quotes)}/{ctx.recent_cache.capacity}")
    if quotes:
        print(format_quote_list(quotes))
    return 0


async def validate_cache(ctx: AppContext) -> int:
    if await ctx.recent_cache.validate():
        logger.info("Recent quote cache passed validation.")
        return 0
    logger.error("Recent quote cache FAILED validation.")
    return 1


def show_environment(config: ShrutamConfig) -> int:
    lines, warnings = describe_environment(config)
    for line in lines:
        print(line)
    for warning in warnings:
        print(f"WARNING: {warning}")
    return 1 if not config.api.base_url else 0


_COMMANDS = {
    "today": show_today,
    "recent": show_recent,
    "cached": show_cached,
    "validate": validate_cache,
}


async def run_command(command: str, config: ShrutamConfig) -> int:
    """Build the context, run *command* against it and tear it down."""
    ctx = build_context(config)
    try:
        return await _COMMANDS[command](ctx)
    finally:
        await ctx.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shrutam",
        description="Shrutam daily quote sync (offline-first)",
    )
    parser.add_argument(
        "--mode",
        help="Deployment mode override (selects config/<mode>.yaml)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        help="Path to config directory",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("today", help="Show today's quote")
    subparsers.add_parser("recent", help="Show recent quotes")
    subparsers.add_parser("cached", help="Show cached data without using the network")
    subparsers.add_parser("validate", help="Check the integrity of the recent quote cache")
    subparsers.add_parser("env", help="Show the effective environment configuration")
    return parser


def cli_entry(argv: list[str] | None = None) -> None:
    """CLI entry point for `shrutam` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = ShrutamConfig.load(
        deployment_mode=args.mode,
        config_dir=args.config_dir,
    )

    setup_logging(
        level=config.deployment.log_level,
        log_format=config.deployment.log_format,
        log_dir=config.deployment.log_dir,
    )

    if args.command == "env":
        sys.exit(show_environment(config))

    sys.exit(asyncio.run(run_command(args.command, config)))


if __name__ == "__main__":
    cli_entry()
