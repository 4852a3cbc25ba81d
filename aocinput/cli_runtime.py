"""CLI runtime resolution helpers.

This module isolates config-file loading, runtime source assembly, and secure
session-token lookup from the command wiring layer.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Mapping, Protocol

from .config import ClientConfig, ConfigLoader, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import CommandError, ConfigError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by CLI runtime resolution."""

    def get_session_token(self) -> str | None:
        """Return the currently stored session token, if available."""


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: object,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def load_config_file(config_path: Path | None) -> ClientConfig:
    """Load a YAML config file when requested and map failures to command errors."""

    if config_path is None:
        return ClientConfig()

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise CommandError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ConfigError as exc:
        raise CommandError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc.detail}",
            hint=exc.hint or "Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise CommandError(
            stage="config",
            detail=f"Failed to read config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def resolve_client_config(
    *,
    config_path: Path | None,
    session: str | None,
    contact: str | None,
    cache_dir: Path | None,
    no_persist: bool,
    env: Mapping[str, str] | None = None,
    credential_store_factory: Callable[[], CredentialStoreProtocol] | None = None,
) -> ClientConfig:
    """Resolve the effective client config from file, CLI, keyring, and environment."""

    base_config = load_config_file(config_path)

    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "session_token", session)
    _set_runtime_cli_value(runtime_cli_values, "contact", contact)
    _set_runtime_cli_value(runtime_cli_values, "store_location", cache_dir)
    if no_persist:
        runtime_cli_values["persistent_cache"] = "false"

    runtime_secure_values: dict[str, str] = {}
    if "session_token" not in runtime_cli_values:
        factory = credential_store_factory or create_credential_store
        stored_token = factory().get_session_token()
        if stored_token is not None:
            runtime_secure_values["session_token"] = stored_token

    try:
        return base_config.with_sources(
            RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ if env is None else env,
            )
        )
    except ConfigError as exc:
        raise CommandError(stage="config", detail=exc.detail, hint=exc.hint) from exc
