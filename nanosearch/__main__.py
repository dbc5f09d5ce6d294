"""Command line entry point: `python -m nanosearch QUERY`."""

from __future__ import annotations

import argparse
import asyncio
import json
import signal
import sys
from pathlib import Path

from loguru import logger

from nanosearch.config.loader import load_config
from nanosearch.search.cancel import CancellationToken
from nanosearch.search.client import MAX_RESULTS_LIMIT, SearchClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nanosearch", description="Search the web.")
    parser.add_argument("query", help="Search query")
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help=f"Maximum results (at most {MAX_RESULTS_LIMIT})",
    )
    parser.add_argument(
        "--engine",
        choices=["local", "brave", "tavily", "exa", "perplexity"],
        default=None,
        help="Override the configured engine",
    )
    parser.add_argument("--titles-only", action="store_true", help="Omit page content")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config).search
    if args.engine:
        config.engine = args.engine
    if args.titles_only:
        config.titles_only = True

    client = SearchClient(config)
    if not client.is_enabled():
        logger.error("Search engine '{}' is disabled or missing an API key", config.engine)
        return 1

    cancel = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.signal)
    except NotImplementedError:
        # add_signal_handler is unavailable on Windows event loops
        pass

    try:
        response = await client.search(args.query, args.max_results, cancel)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except NotImplementedError:
            pass

    print(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))
    return 1 if response.error else 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
