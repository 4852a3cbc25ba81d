"""Unit tests for CLI runtime config resolution helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from aocinput.cli_runtime import load_config_file, resolve_client_config
from aocinput.config import ClientConfig
from aocinput.errors import CommandError


class InMemoryCredentialStore:
    """In-memory credential store implementation for runtime-resolution tests."""

    def __init__(self, initial_token: str | None = None) -> None:
        """Initialize the store with an optional initial session token."""

        self._token = initial_token
        self.reads = 0

    def get_session_token(self) -> str | None:
        """Return currently stored session token and count the lookup."""

        self.reads += 1
        return self._token


def test_resolve_client_config_layers_file_cli_keyring_and_env(tmp_path: Path) -> None:
    """CLI values should win, then keyring, then environment, then the config file."""

    config_path = tmp_path / "aocinput.yaml"
    config_path.write_text(
        "contact: file@example.com\ntimeout_seconds: 9\n",
        encoding="utf-8",
    )
    store = InMemoryCredentialStore(initial_token="keyring-token")

    config = resolve_client_config(
        config_path=config_path,
        session=None,
        contact=" cli@example.com ",
        cache_dir=tmp_path / "store",
        no_persist=True,
        env={"AOC_SESSION": "env-token", "AOCINPUT_TIMEOUT_SECONDS": "4"},
        credential_store_factory=lambda: store,
    )

    assert config.session_token == "keyring-token"
    assert config.contact == "cli@example.com"
    assert config.store_location == tmp_path / "store"
    assert config.persistent_cache is False
    assert config.timeout_seconds == 4.0


def test_resolve_client_config_skips_keyring_when_session_is_given() -> None:
    """An explicit `--session` should not touch secure storage."""

    store = InMemoryCredentialStore(initial_token="keyring-token")

    config = resolve_client_config(
        config_path=None,
        session="cli-token",
        contact=None,
        cache_dir=None,
        no_persist=False,
        env={},
        credential_store_factory=lambda: store,
    )

    assert config.session_token == "cli-token"
    assert store.reads == 0


def test_resolve_client_config_maps_bad_env_values_to_command_errors() -> None:
    """Malformed environment values should surface as config-stage command errors."""

    with pytest.raises(CommandError) as exc_info:
        resolve_client_config(
            config_path=None,
            session="token",
            contact=None,
            cache_dir=None,
            no_persist=False,
            env={"AOCINPUT_PERSISTENT_CACHE": "perhaps"},
            credential_store_factory=InMemoryCredentialStore,
        )

    assert exc_info.value.stage == "config"
    assert "`persistent_cache` must be a boolean" in exc_info.value.detail


def test_load_config_file_reports_missing_and_invalid_files(tmp_path: Path) -> None:
    """Config file failures should become config-stage command errors."""

    assert load_config_file(None) == ClientConfig()

    with pytest.raises(CommandError, match="Config file not found"):
        load_config_file(tmp_path / "missing.yaml")

    invalid_path = tmp_path / "invalid.yaml"
    invalid_path.write_text("colour: blue\n", encoding="utf-8")
    with pytest.raises(CommandError, match=r"unsupported key\(s\): colour"):
        load_config_file(invalid_path)
