"""Pytest configuration and shared fixtures."""

import pytest

from fakes import FakePage, login_elements, randomuser_elements


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env or shell from leaking into defaults."""
    for name in (
        "RANDOMUSER_URL",
        "TAIKO_URL",
        "TAIKO_USER",
        "TAIKO_USERNAME",
        "TAIKO_PASS",
        "TAIKO_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def randomuser_page():
    return FakePage(randomuser_elements())


@pytest.fixture
def login_page():
    return FakePage(login_elements())
