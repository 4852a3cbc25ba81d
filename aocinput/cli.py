"""Command-line interface for aocinput.

Responsibilities:
- Expose user-facing commands for fetching inputs and examples.
- Convert CLI arguments into `ClientConfig` and run one scoped client.

Key public functions:
- `app`: Typer application instance.
- `main`: configure logging and invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import Annotated

import typer

from .cli_rendering import (
    echo_example,
    echo_flush_errors,
    echo_throttle_status,
    exit_with_command_error,
)
from .cli_runtime import resolve_client_config
from .client import AocClient
from .credentials import create_credential_store
from .errors import CommandError
from .parsing import normalize_optional_string
from .store.file_store import FileStore
from .telemetry.logger import configure_logging
from .throttle import Throttle

app = typer.Typer(
    name="aocinput",
    no_args_is_help=True,
    help="Fetch puzzle inputs politely: cached forever, at most one request per cooldown.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="YAML config file with client settings."),
]
SessionOption = Annotated[
    str | None,
    typer.Option("--session", help="Session token (overrides keyring and `AOC_SESSION`)."),
]
ContactOption = Annotated[
    str | None,
    typer.Option("--contact", help="Contact identity sent in the User-Agent."),
]
CacheDirOption = Annotated[
    Path | None,
    typer.Option("--cache-dir", help="Persistent store directory."),
]
NoPersistOption = Annotated[
    bool,
    typer.Option("--no-persist", help="Keep cache and throttle state in memory only."),
]
RefreshOption = Annotated[
    bool,
    typer.Option("--refresh", help="Ignore the cached copy and fetch again (still throttled)."),
]


def _open_client(
    config: Path | None,
    session: str | None,
    contact: str | None,
    cache_dir: Path | None,
    no_persist: bool,
) -> AocClient:
    """Resolve runtime config and open a client."""

    client_config = resolve_client_config(
        config_path=config,
        session=session,
        contact=contact,
        cache_dir=cache_dir,
        no_persist=no_persist,
    )
    return AocClient(client_config)


@app.command("input")
def input_command(
    year: Annotated[int, typer.Argument(help="Event year, e.g. 2023.")],
    day: Annotated[int, typer.Argument(help="Puzzle day, 1-25.")],
    refresh: RefreshOption = False,
    config: ConfigOption = None,
    session: SessionOption = None,
    contact: ContactOption = None,
    cache_dir: CacheDirOption = None,
    no_persist: NoPersistOption = False,
) -> None:
    """Print the personal puzzle input for one day."""

    try:
        with _open_client(config, session, contact, cache_dir, no_persist) as client:
            body = client.get_input(year, day, refresh=refresh)
        echo_flush_errors(client.flush_errors)
    except Exception as exc:
        exit_with_command_error("input", exc)

    typer.echo(body, nl=False)


@app.command("example")
def example_command(
    year: Annotated[int, typer.Argument(help="Event year, e.g. 2023.")],
    day: Annotated[int, typer.Argument(help="Puzzle day, 1-25.")],
    part: Annotated[
        int,
        typer.Option("--part", min=1, max=2, help="Puzzle part whose page to read."),
    ] = 1,
    refresh: RefreshOption = False,
    config: ConfigOption = None,
    session: SessionOption = None,
    contact: ContactOption = None,
    cache_dir: CacheDirOption = None,
    no_persist: NoPersistOption = False,
) -> None:
    """Print the worked example and its answers from a puzzle page."""

    try:
        with _open_client(config, session, contact, cache_dir, no_persist) as client:
            example = client.get_example(year, day, part, refresh=refresh)
        echo_flush_errors(client.flush_errors)
        if example is None:
            raise CommandError(
                stage="parse",
                detail=f"No example found on the puzzle page for {year} day {day}.",
                hint="Some puzzles describe examples in prose; check the page manually.",
            )
    except Exception as exc:
        exit_with_command_error("example", exc)

    echo_example(example)


@app.command("throttle-status")
def throttle_status_command(
    config: ConfigOption = None,
    cache_dir: CacheDirOption = None,
) -> None:
    """Show when the last request was made and how long until the next is allowed."""

    try:
        client_config = resolve_client_config(
            config_path=config,
            session=None,
            contact=None,
            cache_dir=cache_dir,
            no_persist=False,
        )
        throttle = Throttle()
        if client_config.persistent_cache:
            throttle.load_from(FileStore(client_config.resolved_store_location()))
    except Exception as exc:
        exit_with_command_error("throttle-status", exc)

    if not client_config.persistent_cache:
        typer.echo("Persistent cache disabled; no throttle state is kept between runs.")
        return
    echo_throttle_status(throttle.last_request_time, throttle.seconds_until_ready())


@app.command("credentials")
def credentials_command(
    set_session: Annotated[
        bool,
        typer.Option(
            "--set-session",
            help="Prompt for the session token with hidden input and store it securely.",
        ),
    ] = False,
    clear_session: Annotated[
        bool,
        typer.Option(
            "--clear-session",
            help="Clear the stored session token from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage the securely stored session token."""

    if set_session and clear_session:
        exit_with_command_error(
            "credentials",
            CommandError(
                stage="credentials",
                detail="`--set-session` and `--clear-session` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_session:
        prompted_token = normalize_optional_string(
            typer.prompt(
                "Session token (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_token is None:
            exit_with_command_error(
                "credentials",
                CommandError(
                    stage="credentials",
                    detail="No session token entered.",
                    hint="Provide a non-empty token when using `--set-session`.",
                ),
            )
        try:
            credential_store.set_session_token(prompted_token)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                CommandError(
                    stage="credentials",
                    detail=f"Failed to store session token securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("Session token stored in secure credential storage.")
        return

    if clear_session:
        try:
            removed = credential_store.clear_session_token()
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                CommandError(
                    stage="credentials",
                    detail=f"Failed to clear session token: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        if removed:
            typer.echo("Stored session token cleared from secure credential storage.")
        else:
            typer.echo("No stored session token found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    status = "present" if credential_store.get_session_token() is not None else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored session token: {status}")


def main() -> None:
    """Run the CLI application."""

    level = normalize_optional_string(os.environ.get("AOCINPUT_LOG_LEVEL")) or "WARNING"
    configure_logging(sys.stderr, level=level.upper())
    app()
