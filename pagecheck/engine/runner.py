from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, Callable

from playwright.async_api import Error as PlaywrightError

from pagecheck.config import CheckOptions, merge_options
from pagecheck.engine.checks import (
    Options,
    check_access_chart,
    check_advanced_search_controls,
    check_documentation_anchors,
    check_donate_anti_bot,
    check_navbar_photos,
    check_readable_info,
    check_refresh_centers,
    check_user_cards,
    check_versions_nav,
)
from pagecheck.engine.result import CheckResult, Report

LOGGER = logging.getLogger("pagecheck")

Check = Callable[[Any, CheckOptions], Awaitable[CheckResult]]

# Execution order is part of the report contract.
CHECKS: list[tuple[str, Check]] = [
    ("user_cards", check_user_cards),
    ("refresh_center", check_refresh_centers),
    ("readable_info", check_readable_info),
    ("advanced_search", check_advanced_search_controls),
    ("navbar_photos", check_navbar_photos),
    ("documentation", check_documentation_anchors),
    ("versions_nav", check_versions_nav),
    ("access_chart", check_access_chart),
    ("donate", check_donate_anti_bot),
]


def _fault_result(exc: Exception) -> CheckResult:
    error = f"{type(exc).__name__}: {exc}"
    return CheckResult(
        ok=False,
        message=f"Driver fault: {error}",
        details={"error": error, "fault": True},
    )


async def run_all(page: Any, options: Options = None, *, isolate_faults: bool = False) -> Report:
    """
    Run the RandomUser battery sequentially against ``page``.

    Playwright errors abort the run unless ``isolate_faults`` is set, in
    which case the failing check is recorded as failed and the rest still
    run.
    """
    opts = merge_options(options)
    report = Report()
    for name, check in CHECKS:
        try:
            result = await check(page, opts)
        except PlaywrightError as exc:
            if not isolate_faults:
                raise
            LOGGER.warning("Check %s faulted: %s", name, exc)
            result = _fault_result(exc)
        LOGGER.debug("Check %s ok=%s %s", name, result.ok, result.message or "")
        report.details[name] = result

    LOGGER.info(
        "RandomUser checks: %d/%d passed, %d failed against %s",
        report.passed,
        report.total,
        report.failed,
        opts.url,
    )
    return report
