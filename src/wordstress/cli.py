from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from wordstress.config import HttpMethod, LoadMode, OutputFormat, RunConfig, build_config, load_defaults, validate
from wordstress.errors import ConfigurationError
from wordstress.formatters import get_formatter
from wordstress.loadgen.runner import run_test
from wordstress.log import setup_logging
from wordstress.storage import Storage
from wordstress.useragent import BROWSER_USER_AGENTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordstress",
        description="Stress-testing CLI tool for WordPress and WooCommerce sites",
    )
    parser.add_argument("domain", help="Domain to test (e.g., example.com)")
    parser.add_argument("--clients", type=int, help="Parallel clients for steady-state mode (default: 5)")
    parser.add_argument("--interval", type=int, help="Milliseconds between each client request (default: 1000)")
    parser.add_argument("--duration", type=int, help="Test duration in seconds (default: 60)")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in LoadMode],
        default=LoadMode.STEADY_STATE.value,
    )
    parser.add_argument("--burst-clients", type=int, help="Simultaneous requests for burst mode")
    parser.add_argument("--endpoint", default="/", help="URL path to test (default: /)")
    parser.add_argument(
        "--method",
        type=str.upper,
        choices=[m.value for m in HttpMethod],
        default=HttpMethod.GET.value,
    )
    parser.add_argument("--https", choices=["on", "off"], default="on")
    parser.add_argument("--timeout", type=int, help="Request timeout in milliseconds (default: 30000)")
    parser.add_argument("--follow-redirects", choices=["on", "off"], default="on")
    parser.add_argument("--output", type=str.lower, choices=[f.value for f in OutputFormat])
    parser.add_argument("--browser", choices=sorted(BROWSER_USER_AGENTS), default="chrome")
    parser.add_argument("--user-agent", help="Custom User-Agent string (overrides --browser)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--save", action="store_true", help="Store the run in the local DuckDB history")
    parser.add_argument("--notes", default="")
    return parser


def _log_banner(logger: logging.Logger, config: RunConfig) -> None:
    logger.info("Starting stress test...")
    logger.info("Target: %s", config.target_url)
    if config.mode is LoadMode.STEADY_STATE:
        logger.info("Mode: Steady-State")
        logger.info("Clients: %d", config.steady.clients)
        logger.info("Interval: %dms", config.steady.interval_ms)
        logger.info("Duration: %ss", config.steady.duration_sec)
    else:
        logger.info("Mode: Burst")
        logger.info("Simultaneous Requests: %d", config.burst.burst_clients)
    logger.info("Method: %s", config.request.method)
    logger.info("Output Format: %s", config.output.value)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        defaults = load_defaults()
    except ConfigurationError as exc:
        setup_logging("INFO").error(str(exc))
        sys.exit(1)
    logger = setup_logging("DEBUG" if args.verbose else defaults.log_level)

    try:
        config = build_config(args, defaults)
        validate(config)
    except ConfigurationError as exc:
        logger.error(str(exc))
        sys.exit(1)

    _log_banner(logger, config)
    storage = Storage(defaults.db_path) if args.save else None
    result = asyncio.run(run_test(config, storage=storage, logger=logger))
    print(get_formatter(config.output)(result.report))
    if storage is not None:
        logger.info("Run saved: %s", result.run_id)


if __name__ == "__main__":
    main()
