"""Domain exceptions for client, store, and CLI diagnostics."""

from __future__ import annotations


class TransportError(RuntimeError):
    """Raised when one outbound request fails at the network or HTTP layer."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize transport error metadata for caller-side diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code


class StoreError(RuntimeError):
    """Raised when persistent store writes fail."""

    def __init__(self, *, operation: str, detail: str) -> None:
        """Initialize an operation-scoped store error."""

        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class ConfigError(ValueError):
    """Raised when client configuration is invalid at construction time."""

    def __init__(
        self,
        *,
        field: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a field-scoped configuration error."""

        super().__init__(detail)
        self.field = field
        self.detail = detail
        self.hint = hint


class ClientClosedError(RuntimeError):
    """Raised when a closed client is asked for more work."""


class CommandError(RuntimeError):
    """Raised when a specific CLI command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
