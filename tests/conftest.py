"""Shared pytest fixtures for the full aocinput test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from aocinput.config import ClientConfig
from aocinput.errors import TransportError
from aocinput.keys import ResourceKey


class FakeClock:
    """Deterministic wall clock whose sleeps advance time instead of blocking."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        """Initialize clock at a fixed epoch value."""

        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        """Return the current fake epoch time."""

        return self.now

    def sleep(self, seconds: float) -> None:
        """Record the requested wait and advance fake time by it."""

        self.sleeps.append(seconds)
        self.now += seconds


class RecordingFetcher:
    """Fetch capability double that records each call and its fake start time."""

    def __init__(self, clock: FakeClock) -> None:
        """Initialize recording storage and canned responses."""

        self.clock = clock
        self.calls: list[tuple[ResourceKey, float, str, str]] = []
        self.bodies: dict[ResourceKey, str] = {}
        self.failures: dict[ResourceKey, TransportError] = {}

    def __call__(self, key: ResourceKey, credential: str, identity: str) -> str:
        """Record the call, then return a canned body or raise a canned failure."""

        self.calls.append((key, self.clock.now, credential, identity))
        if key in self.failures:
            raise self.failures[key]
        return self.bodies.get(key, f"body for {key}\n")

    @property
    def keys(self) -> list[ResourceKey]:
        """Return fetched keys in call order."""

        return [call[0] for call in self.calls]

    @property
    def start_times(self) -> list[float]:
        """Return fake start times of each fetch in call order."""

        return [call[1] for call in self.calls]


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a fresh deterministic clock."""

    return FakeClock()


@pytest.fixture
def fetcher(fake_clock: FakeClock) -> RecordingFetcher:
    """Provide a recording fetch capability bound to the fake clock."""

    return RecordingFetcher(fake_clock)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ClientConfig]:
    """Provide a factory for valid client configs rooted in a temp store directory."""

    def _make(**overrides: object) -> ClientConfig:
        """Build a config with test defaults and keyword overrides."""

        values: dict[str, object] = {
            "session_token": "test-session",
            "contact": "tests@example.com",
            "store_location": tmp_path / "store",
        }
        values.update(overrides)
        return ClientConfig(**values)  # type: ignore[arg-type]

    return _make
