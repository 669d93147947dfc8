from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from rich import print_json
from rich.console import Console
from rich.logging import RichHandler

from pagecheck.browser import open_page
from pagecheck.config import ConfigError, merge_login_options, merge_options
from pagecheck.engine.login import run_login_checks
from pagecheck.engine.result import Report
from pagecheck.engine.runner import run_all
from pagecheck.report import build_pdf_report

LOGGER = logging.getLogger("pagecheck")

EXIT_OK = 0
EXIT_CHECKS_FAILED = 1
EXIT_FAULT = 2


def configure_logging() -> None:
    log_level = (os.getenv("PAGECHECK_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pagecheck", description="Run DOM check batteries against a live page")
    sub = parser.add_subparsers(dest="battery", required=True)

    randomuser = sub.add_parser("randomuser", help="RandomUser demo app checks")
    randomuser.add_argument("--url", help="Target URL (default: $RANDOMUSER_URL or http://localhost:3000)")
    randomuser.add_argument("--headed", action="store_true", help="Show the browser window")
    randomuser.add_argument("--isolate-faults", action="store_true", help="Record driver faults per check instead of aborting")
    randomuser.add_argument("--pdf", help="Also write the report as a PDF to this path")
    randomuser.add_argument("--timeout", type=int, dest="timeout_ms", help="Default Playwright timeout in milliseconds")

    login = sub.add_parser("login", help="Login page checks")
    login.add_argument("--url", help="Login page URL (default: $TAIKO_URL)")
    login.add_argument("--headed", action="store_true", help="Show the browser window")
    login.add_argument("--timeout", type=int, dest="timeout_ms", help="Default Playwright timeout in milliseconds")
    return parser


async def _run(args: argparse.Namespace) -> tuple[Report, str]:
    if args.battery == "login":
        login_options = merge_login_options({"url": args.url})
        async with open_page(headless=not args.headed, timeout_ms=args.timeout_ms) as page:
            return await run_login_checks(page, login_options), login_options.url

    options = merge_options({"url": args.url})
    async with open_page(headless=not args.headed, timeout_ms=args.timeout_ms) as page:
        report = await run_all(page, options, isolate_faults=args.isolate_faults)
    return report, options.url


def main(argv: Optional[list[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        report, url = asyncio.run(_run(args))
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return EXIT_FAULT
    except PlaywrightError as exc:
        LOGGER.error("Error running checks: %s", exc)
        return EXIT_FAULT

    print_json(data=report.to_dict())
    LOGGER.info("%s", report.summary())

    pdf_path = getattr(args, "pdf", None)
    if pdf_path:
        written = build_pdf_report(report, pdf_path, title="RandomUser checks", target_url=url)
        LOGGER.info("Saved: %s", written)

    return EXIT_OK if report.ok else EXIT_CHECKS_FAILED


if __name__ == "__main__":
    sys.exit(main())
