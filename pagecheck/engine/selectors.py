from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Optional, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

Candidates = Union[str, Sequence[str]]


def _candidates(selectors: Candidates) -> list[str]:
    if isinstance(selectors, str):
        return [selectors]
    return [s for s in selectors if s]


async def first_match(scope: Any, selectors: Candidates) -> Optional[Any]:
    """Return the first element matched by the candidates, tried in order."""
    for selector in _candidates(selectors):
        element = await scope.query_selector(selector)
        if element:
            return element
    return None


async def all_matches(scope: Any, selectors: Candidates) -> list[Any]:
    for selector in _candidates(selectors):
        elements = await scope.query_selector_all(selector)
        if elements:
            return list(elements)
    return []


async def first_selector_exists(page: Any, selectors: Candidates) -> Optional[str]:
    for selector in _candidates(selectors):
        if await page.query_selector(selector):
            return selector
    return None


async def wait_for_any(page: Any, selectors: Candidates, timeout_ms: int) -> Optional[str]:
    """
    Wait on each candidate in turn for up to ``timeout_ms``.

    A timeout only means the candidate did not show up; any other driver
    error propagates.
    """
    for selector in _candidates(selectors):
        try:
            await page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            continue
        return selector
    return None
