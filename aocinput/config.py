"""Configuration model and loaders for aocinput clients.

Responsibilities:
- Define client configuration as a typed dataclass.
- Provide deterministic precedence resolution for runtime settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `ClientConfig`: settings for one `AocClient`.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `ClientConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
import sys
from typing import Any, Mapping

import yaml

from .errors import ConfigError
from .fetch import DEFAULT_BASE_URL
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    parse_positive_float,
)
from .store.file_store import FileStore


_STORE_DIRNAME = "aocinput"
_DEFAULT_TIMEOUT_SECONDS = 30.0

# Runtime key -> environment variable.
_ENV_KEYS: dict[str, str] = {
    "session_token": "AOC_SESSION",
    "contact": "AOCINPUT_CONTACT",
    "persistent_cache": "AOCINPUT_PERSISTENT_CACHE",
    "store_location": "AOCINPUT_CACHE_DIR",
    "eager_persistence": "AOCINPUT_EAGER_PERSISTENCE",
    "timeout_seconds": "AOCINPUT_TIMEOUT_SECONDS",
    "base_url": "AOCINPUT_BASE_URL",
}


def default_cache_root(
    env: Mapping[str, str] | None = None,
    platform: str = sys.platform,
) -> Path:
    """Return the default store root for this platform.

    `AOCINPUT_CACHE_DIR` wins; otherwise the platform cache directory is used
    with an `aocinput` subdirectory.
    """

    env_map: Mapping[str, str] = os.environ if env is None else env
    override = normalize_optional_string(env_map.get("AOCINPUT_CACHE_DIR"))
    if override is not None:
        return Path(override).expanduser()

    if platform == "win32":
        base = normalize_optional_string(env_map.get("LOCALAPPDATA"))
        cache_base = Path(base) if base else Path.home() / "AppData" / "Local"
    elif platform == "darwin":
        cache_base = Path.home() / "Library" / "Caches"
    else:
        base = normalize_optional_string(env_map.get("XDG_CACHE_HOME"))
        cache_base = Path(base) if base else Path.home() / ".cache"
    return cache_base / _STORE_DIRNAME


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ClientConfig:
    """Settings for one client.

    Attributes:
        session_token: Session cookie value of the logged-in account.
        contact: Contact identity embedded in the outbound User-Agent.
        persistent_cache: Whether cache and throttle state persist across runs.
        store_location: Store root directory; `None` selects the platform default.
        eager_persistence: Persist each fetched body and request time immediately.
        timeout_seconds: Per-request network timeout.
        base_url: Puzzle site base URL.
    """

    session_token: str | None = None
    contact: str | None = None
    persistent_cache: bool = True
    store_location: Path | None = None
    eager_persistence: bool = True
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    base_url: str = DEFAULT_BASE_URL

    def validate(self) -> None:
        """Validate configuration before any store or network activity.

        Raises:
            ConfigError: If a required value is missing or malformed.
        """

        if normalize_optional_string(self.session_token) is None:
            raise ConfigError(
                field="session_token",
                detail="A session token is required.",
                hint="Set `AOC_SESSION`, pass `--session`, or store one with "
                "`aocinput credentials --set-session`.",
            )
        if normalize_optional_string(self.contact) is None:
            raise ConfigError(
                field="contact",
                detail="A contact identity is required for the outbound User-Agent.",
                hint="Set `AOCINPUT_CONTACT` or pass `--contact` (an email or repo URL).",
            )
        if parse_positive_float(self.timeout_seconds) is None:
            raise ConfigError(
                field="timeout_seconds",
                detail="`timeout_seconds` must be a positive number.",
            )
        if normalize_optional_string(self.base_url) is None:
            raise ConfigError(field="base_url", detail="`base_url` must be a non-empty URL.")

    def resolved_store_location(self, env: Mapping[str, str] | None = None) -> Path:
        """Return the configured store root, or the platform default."""

        if self.store_location is not None:
            return Path(self.store_location).expanduser()
        return default_cache_root(env)

    def create_store(self, env: Mapping[str, str] | None = None) -> FileStore:
        """Build the default file store and verify its root is usable."""

        return FileStore(self.resolved_store_location(env)).prepare()

    def with_sources(self, sources: RuntimeConfigSources | None = None) -> ClientConfig:
        """Return a copy with runtime values resolved in deterministic precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > current field value.
        """

        resolved_sources = sources if sources is not None else RuntimeConfigSources()

        session_token = self._resolve_value("session_token", resolved_sources)
        contact = self._resolve_value("contact", resolved_sources)
        store_location = self._resolve_value("store_location", resolved_sources)
        base_url = self._resolve_value("base_url", resolved_sources)
        persistent_cache = self._resolve_value("persistent_cache", resolved_sources)
        eager_persistence = self._resolve_value("eager_persistence", resolved_sources)
        timeout_seconds = self._resolve_value("timeout_seconds", resolved_sources)

        return replace(
            self,
            session_token=session_token if session_token is not None else self.session_token,
            contact=contact if contact is not None else self.contact,
            store_location=(
                Path(store_location) if store_location is not None else self.store_location
            ),
            base_url=base_url if base_url is not None else self.base_url,
            persistent_cache=(
                _require_boolean(persistent_cache, "persistent_cache")
                if persistent_cache is not None
                else self.persistent_cache
            ),
            eager_persistence=(
                _require_boolean(eager_persistence, "eager_persistence")
                if eager_persistence is not None
                else self.eager_persistence
            ),
            timeout_seconds=(
                _require_positive_float(timeout_seconds, "timeout_seconds")
                if timeout_seconds is not None
                else self.timeout_seconds
            ),
        )

    @staticmethod
    def _resolve_value(key: str, sources: RuntimeConfigSources) -> str | None:
        """Resolve one runtime value from sources, or `None` when no source sets it."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, _ENV_KEYS[key]),
        ):
            value = normalize_optional_string(mapping.get(lookup_key))
            if value is not None:
                return value
        return None


def _require_positive_float(value: object, field_name: str) -> float:
    parsed = parse_positive_float(value)
    if parsed is None:
        raise ConfigError(field=field_name, detail=f"`{field_name}` must be a positive number.")
    return parsed


def _require_boolean(value: str, field_name: str) -> bool:
    parsed = parse_permissive_boolean(value)
    if parsed is None:
        raise ConfigError(
            field=field_name,
            detail=f"`{field_name}` must be a boolean value (`true`/`false`, `1`/`0`, `yes`/`no`).",
        )
    return parsed


class ConfigLoader:
    """Factory methods for creating `ClientConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(_ENV_KEYS)

    @staticmethod
    def from_yaml(path: Path) -> ClientConfig:
        """Create a config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ClientConfig:
        """Create a config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        return ClientConfig().with_sources(RuntimeConfigSources(env=env_map))

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigError(
                field="config",
                detail=f"YAML config `{path}` could not be parsed: {exc}",
            ) from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigError(
                field="config",
                detail=f"YAML config `{path}` must contain a top-level mapping/object.",
            )
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> ClientConfig:
        """Build a config from a mapping payload, validating key names and types."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            raise ConfigError(
                field="config",
                detail=f"{source_label} includes unsupported key(s): {', '.join(unknown)}.",
            )

        store_location = normalize_optional_string(payload.get("store_location"))
        timeout_seconds = _DEFAULT_TIMEOUT_SECONDS
        if normalize_optional_string(payload.get("timeout_seconds")) is not None:
            timeout_seconds = _require_positive_float(
                payload["timeout_seconds"], "timeout_seconds"
            )

        return ClientConfig(
            session_token=normalize_optional_string(payload.get("session_token")),
            contact=normalize_optional_string(payload.get("contact")),
            persistent_cache=ConfigLoader._optional_boolean(
                payload, "persistent_cache", source_label, default=True
            ),
            store_location=Path(store_location) if store_location is not None else None,
            eager_persistence=ConfigLoader._optional_boolean(
                payload, "eager_persistence", source_label, default=True
            ),
            timeout_seconds=timeout_seconds,
            base_url=normalize_optional_string(payload.get("base_url")) or DEFAULT_BASE_URL,
        )

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload or payload[key] is None:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ConfigError(
                field=key,
                detail=(
                    f"{source_label} field `{key}` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                ),
            )
        return parsed
