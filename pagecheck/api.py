from __future__ import annotations

import logging
import os
from typing import Optional, Union

from fastapi import FastAPI, Header, HTTPException
from playwright.async_api import Error as PlaywrightError
from pydantic import BaseModel, Field

from pagecheck.browser import open_page
from pagecheck.config import ConfigError, merge_login_options, merge_options
from pagecheck.engine.login import run_login_checks
from pagecheck.engine.runner import run_all

LOGGER = logging.getLogger("pagecheck")


class ChecksRequest(BaseModel):
    url: Optional[str] = None
    selectors: Optional[dict[str, Union[str, list[str]]]] = None
    settle_delay_ms: Optional[int] = None
    center_tolerance: Optional[float] = None
    isolate_faults: bool = False
    timeout_ms: Optional[int] = Field(default=None, gt=0)


class LoginChecksRequest(BaseModel):
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_ms: Optional[int] = Field(default=None, gt=0)


API_TOKEN = os.getenv("API_TOKEN", "").strip()


def _validate_api_token(x_api_token: str | None) -> None:
    if not API_TOKEN:
        raise HTTPException(
            status_code=500,
            detail="server misconfigured: API_TOKEN is missing",
        )
    if x_api_token != API_TOKEN:
        raise HTTPException(status_code=401, detail="invalid api token")


app = FastAPI(
    title="Page Checks API",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/checks")
async def checks(
    request: ChecksRequest,
    x_api_token: str | None = Header(default=None, alias="X-API-Token"),
) -> dict:
    _validate_api_token(x_api_token)
    try:
        options = merge_options(request.model_dump(exclude={"isolate_faults", "timeout_ms"}))
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        async with open_page(timeout_ms=request.timeout_ms) as page:
            report = await run_all(page, options, isolate_faults=request.isolate_faults)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PlaywrightError as exc:
        LOGGER.error("Error running checks against %s: %s", options.url, exc)
        raise HTTPException(status_code=502, detail=f"page driver error: {exc}") from exc
    return report.to_dict()


@app.post("/login-checks")
async def login_checks(
    request: LoginChecksRequest,
    x_api_token: str | None = Header(default=None, alias="X-API-Token"),
) -> dict:
    _validate_api_token(x_api_token)
    try:
        options = merge_login_options(request.model_dump(exclude={"timeout_ms"}))
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        async with open_page(timeout_ms=request.timeout_ms) as page:
            report = await run_login_checks(page, options)
    except PlaywrightError as exc:
        LOGGER.error("Error running login checks against %s: %s", options.url, exc)
        raise HTTPException(status_code=502, detail=f"page driver error: {exc}") from exc
    return report.to_dict()
