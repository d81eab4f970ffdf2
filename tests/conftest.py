"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING/APP_ENV so settings never pick up a developer .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"
os.environ.setdefault("APP_ENV", "testing")

import pytest  # noqa: E402

from crpt_client.core.rate_limit import reset_rate_gate  # noqa: E402


class FakeClock:
    """Deterministic millisecond clock whose sleep advances time."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.current = start
        self.sleeps: list[float] = []

    def __call__(self) -> int:
        return self.current

    def advance(self, millis: int) -> None:
        self.current += millis

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += round(seconds * 1000)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _fresh_rate_gate():
    reset_rate_gate()
    yield
    reset_rate_gate()
