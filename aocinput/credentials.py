"""Secure session-token storage helpers.

Responsibilities:
- Persist the puzzle-site session token in an OS-backed keyring.
- Provide deterministic read/write/delete operations for the token.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for session token persistence.
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass

import keyring
from keyring.errors import KeyringError


_DEFAULT_SERVICE_NAME = "aocinput"
_DEFAULT_ACCOUNT_NAME = "session_token"


class CredentialStore:
    """Interface for secure session token operations."""

    def is_available(self) -> bool:
        """Return whether secure credential operations are available."""

        raise NotImplementedError

    def get_session_token(self) -> str | None:
        """Load the stored session token, when available."""

        raise NotImplementedError

    def set_session_token(self, token: str) -> None:
        """Persist a session token in secure storage."""

        raise NotImplementedError

    def clear_session_token(self) -> bool:
        """Delete a stored session token and return whether one existed."""

        raise NotImplementedError


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package."""

    service_name: str = _DEFAULT_SERVICE_NAME
    account_name: str = _DEFAULT_ACCOUNT_NAME

    def _load_keyring_module(self):
        """Return the keyring module used for storage operations."""

        return keyring

    def is_available(self) -> bool:
        """Return `True` when a keyring backend can be reached."""

        keyring_module = self._load_keyring_module()
        try:
            keyring_module.get_password(self.service_name, self.account_name)
        except KeyringError:
            return False
        return True

    def get_session_token(self) -> str | None:
        """Get a normalized session token, returning `None` when missing or unreachable."""

        keyring_module = self._load_keyring_module()
        try:
            value = keyring_module.get_password(self.service_name, self.account_name)
        except KeyringError:
            return None
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            return None
        return normalized

    def set_session_token(self, token: str) -> None:
        """Persist a normalized session token or raise when storage is unavailable."""

        keyring_module = self._load_keyring_module()
        normalized = token.strip()
        if not normalized:
            raise ValueError("Session token must be a non-empty string.")
        keyring_module.set_password(self.service_name, self.account_name, normalized)

    def clear_session_token(self) -> bool:
        """Remove the stored session token and report if one was present."""

        keyring_module = self._load_keyring_module()
        existing = self.get_session_token()
        if existing is None:
            return False

        keyring_module.delete_password(self.service_name, self.account_name)
        return True


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
