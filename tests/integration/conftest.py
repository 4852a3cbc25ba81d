"""Integration-test fixtures for deterministic network and credential behavior."""

from __future__ import annotations

import pytest
import requests


class FakeHttpResponse:
    """Minimal `requests.Response` stand-in served by the fake site."""

    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakePuzzleSite:
    """URL-keyed canned responses recording every request made."""

    def __init__(self) -> None:
        self.pages: dict[str, tuple[int, str]] = {}
        self.requests: list[dict[str, object]] = []

    def serve(self, url: str, text: str, status_code: int = 200) -> None:
        """Register a canned response for one URL."""

        self.pages[url] = (status_code, text)

    def get(self, url: str, **kwargs: object) -> FakeHttpResponse:
        self.requests.append({"url": url, **kwargs})
        status_code, text = self.pages.get(url, (404, "404 Not Found"))
        return FakeHttpResponse(status_code, text)

    @property
    def urls(self) -> list[str]:
        return [str(request["url"]) for request in self.requests]


class InMemoryCredentialStore:
    """Simple in-memory credential store used for CLI tests."""

    def __init__(self, initial_token: str | None = None) -> None:
        """Initialize the store with an optional pre-seeded session token."""

        self._token = initial_token

    def is_available(self) -> bool:
        """Return availability flag expected by the CLI status command."""

        return True

    def get_session_token(self) -> str | None:
        """Return currently stored session token value."""

        return self._token

    def set_session_token(self, token: str) -> None:
        """Persist a normalized session token value."""

        self._token = token.strip()

    def clear_session_token(self) -> bool:
        """Clear the token and return whether one existed."""

        existed = self._token is not None
        self._token = None
        return existed


@pytest.fixture(autouse=True)
def puzzle_site(monkeypatch: pytest.MonkeyPatch) -> FakePuzzleSite:
    """Route all outbound HTTP in integration tests to a fake puzzle site."""

    site = FakePuzzleSite()
    monkeypatch.setattr("aocinput.fetch.requests.get", site.get)
    return site


@pytest.fixture(autouse=True)
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Keep integration tests away from the real OS keyring."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("aocinput.cli_runtime.create_credential_store", lambda: store)
    monkeypatch.setattr("aocinput.cli.create_credential_store", lambda: store)
    return store
