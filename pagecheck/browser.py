from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from playwright.async_api import Page, async_playwright


@asynccontextmanager
async def open_page(*, headless: bool = True, timeout_ms: Optional[int] = None) -> AsyncIterator[Page]:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            if timeout_ms is not None:
                page.set_default_timeout(timeout_ms)
            yield page
        finally:
            await browser.close()
