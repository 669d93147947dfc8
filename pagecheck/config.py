from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

load_dotenv()

DEFAULT_URL = "http://localhost:3000"
DEFAULT_LOGIN_URL = "https://taiko.mantishub.io/login_page.php"

Selector = Union[str, list[str]]

DEFAULT_SELECTORS: dict[str, Selector] = {
    "userCard": ".user-card",
    "userName": ".user-name",
    "userEmail": ".user-email",
    "userNationality": ".user-nationality",
    "refresh": "#refresh",
    "navbarSecondItem": "nav a >> nth=1",
    "userPhotoImg": ".user-photo img",
    "documentation": "#documentation, .documentation",
    "versionsNav": [
        "nav >> text=Versioni",
        "nav >> text=RandomUser Versions",
        "nav >> text=versioni",
    ],
    "accessChart": ".access-chart, #access-chart",
    "donateSection": "#donate, .donate",
}


class ConfigError(ValueError):
    pass


def _env_url() -> str:
    return (os.getenv("RANDOMUSER_URL") or DEFAULT_URL).strip()


def _env_login_url() -> str:
    return (os.getenv("TAIKO_URL") or DEFAULT_LOGIN_URL).strip()


def _env_first(*names: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return ""


def _normalize_url(value: str) -> str:
    clean = (value or "").strip()
    if not clean:
        raise ValueError("url is required")
    if "://" not in clean:
        clean = f"http://{clean}"
    return clean


class CheckOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(default_factory=_env_url)
    selectors: dict[str, Selector] = Field(default_factory=lambda: dict(DEFAULT_SELECTORS))
    settle_delay_ms: int = Field(default=500, ge=0)
    center_tolerance: float = Field(default=0.25, gt=0, le=1)

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: str) -> str:
        return _normalize_url(value)

    def selector(self, role: str) -> Selector:
        try:
            return self.selectors[role]
        except KeyError:
            raise ConfigError(
                f"selector '{role}' is not configured (a selectors override replaces the whole default map)"
            ) from None


class LoginOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(default_factory=_env_login_url)
    username: str = Field(default_factory=lambda: _env_first("TAIKO_USER", "TAIKO_USERNAME"))
    password: str = Field(default_factory=lambda: _env_first("TAIKO_PASS", "TAIKO_PASSWORD"))
    username_selectors: list[str] = Field(default_factory=lambda: [
        'input[name="username"]',
        "input#username",
        'input[name="login"]',
        'input[name="username_field"]',
        'input[type="text"]',
    ])
    password_selectors: list[str] = Field(default_factory=lambda: [
        'input[name="password"]',
        "input#password",
        'input[name="pass"]',
        'input[type="password"]',
    ])
    submit_selectors: list[str] = Field(default_factory=lambda: [
        'button[type="submit"]',
        'input[type="submit"]',
        'button:has-text("Login")',
        'button:has-text("Sign in")',
        'input[value="Login"]',
    ])
    success_indicators: list[str] = Field(default_factory=lambda: [
        'a:has-text("Logout")',
        'a:has-text("Sign out")',
        "text=My Account",
        "text=Dashboard",
        "nav >> text=Projects",
    ])
    error_selectors: list[str] = Field(default_factory=lambda: [
        ".error",
        ".warning",
        "text=Invalid",
        "text=failed",
        "text=incorrect",
    ])
    wait_timeout_ms: int = Field(default=3000, gt=0)
    invalid_username: str = "invalid_user_xyz"
    invalid_password: str = "wrong_password_123"

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: str) -> str:
        return _normalize_url(value)


def _merge(model: type[BaseModel], overrides: Optional[Mapping[str, Any]]) -> Any:
    # Shallow: a supplied key replaces the default value wholesale.
    data = {key: value for key, value in (overrides or {}).items() if value is not None}
    try:
        return model(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def merge_options(overrides: Union[CheckOptions, Mapping[str, Any], None] = None) -> CheckOptions:
    if isinstance(overrides, CheckOptions):
        return overrides
    return _merge(CheckOptions, overrides)


def merge_login_options(overrides: Union[LoginOptions, Mapping[str, Any], None] = None) -> LoginOptions:
    if isinstance(overrides, LoginOptions):
        return overrides
    return _merge(LoginOptions, overrides)
