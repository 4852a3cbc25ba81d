"""HTTP fetch capability for puzzle inputs and puzzle pages.

Responsibilities:
- Define the single-request `Fetcher` capability the client consumes.
- Provide a `requests`-based default that performs exactly one GET per call.
- Raise classified, secret-free `TransportError`s; never retry.
"""

from __future__ import annotations

import re
import socket
from typing import Protocol

import requests

from .errors import TransportError
from .keys import ResourceKey


DEFAULT_BASE_URL = "https://adventofcode.com"


class Fetcher(Protocol):
    """Capability performing one network request for a resource key."""

    def __call__(self, key: ResourceKey, credential: str, identity: str) -> str:
        """Return the response body text or raise `TransportError`."""


class RequestsFetcher:
    """Minimal requests-based GET client for puzzle resources."""

    _MAX_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize HTTP settings shared by every request."""

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def url_for(self, key: ResourceKey) -> str:
        """Return the URL serving a resource key.

        Raises:
            ValueError: For named keys, which have no puzzle site URL.
        """

        if key.is_named:
            raise ValueError(f"Named key `{key}` has no puzzle site URL.")
        page_url = f"{self.base_url}/{key.year}/day/{key.day}"
        if key.is_example:
            return page_url
        return f"{page_url}/input"

    def __call__(self, key: ResourceKey, credential: str, identity: str) -> str:
        if key.is_named:
            raise TransportError(
                f"Named key `{key}` has no puzzle site URL; inject a fetcher that serves it.",
                failure_kind="unsupported_key",
            )
        headers = {
            "Cookie": f"session={credential}",
            "User-Agent": identity,
        }
        try:
            response = requests.get(
                self.url_for(key),
                headers=headers,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            body = response.text
        except requests.HTTPError as exc:
            raise self._http_error_to_transport_error(exc, credential) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = f"Request for {key} timed out."
            else:
                detail = (
                    f"Request for {key} failed at the transport layer: "
                    f"{self._short_message(self._redact(str(exc), credential))}"
                )
            raise TransportError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise TransportError(
                f"Request for {key} timed out.",
                failure_kind="timeout",
            ) from exc

        if not body:
            raise TransportError(
                f"Response for {key} is empty.",
                failure_kind="empty_response",
                status_code=response.status_code,
            )
        return body

    @staticmethod
    def _redact(text: str, credential: str) -> str:
        """Remove session cookie values from diagnostic text."""

        redacted = re.sub(r"(?i)session=[A-Za-z0-9]+", "session=[redacted]", text)
        if credential:
            redacted = redacted.replace(credential, "[redacted]")
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_http_failure(status_code: int, body: str) -> str:
        """Classify HTTP errors into deterministic diagnostic kinds."""

        body_lower = body.lower()
        if status_code in {400, 401, 403} or "log in" in body_lower:
            return "invalid_session"
        if status_code == 404:
            return "not_found"
        if status_code == 429:
            return "rate_limited"
        if status_code in {408, 504}:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_transport_error(
        cls, exc: requests.HTTPError, credential: str
    ) -> TransportError:
        """Convert HTTP errors into normalized transport errors with metadata."""

        response = exc.response
        status_code = response.status_code if response is not None else 0
        body = ""
        if response is not None:
            try:
                body = response.text or ""
            except Exception:
                body = ""
        failure_kind = cls._classify_http_failure(status_code, body)

        headline = {
            "invalid_session": "Session token was rejected",
            "not_found": "Puzzle resource not found or not unlocked yet",
            "rate_limited": "Server asked to slow down",
            "timeout": "Request timed out",
        }.get(failure_kind, "Request failed")

        message = cls._short_message(cls._redact(body, credential))
        if message:
            detail = f"{headline} (HTTP {status_code}): {message}"
        else:
            detail = f"{headline} (HTTP {status_code})."
        return TransportError(detail, failure_kind=failure_kind, status_code=status_code)
