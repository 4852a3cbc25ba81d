"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
example listings, and throttle status.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import NoReturn

import typer

from .errors import CommandError, ConfigError, StoreError, TransportError
from .examples import Example


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, ConfigError):
        typer.secho(
            f"{command_name} failed at stage `config`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, TransportError):
        typer.secho(
            f"{command_name} failed at stage `fetch`: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.failure_kind == "invalid_session":
            typer.secho(
                "Hint: Refresh the session token from your browser cookies.",
                fg=typer.colors.YELLOW,
                err=True,
            )
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_example(example: Example) -> None:
    """Print example data followed by the known answers."""

    typer.echo(example.data.rstrip("\n"))
    typer.echo(f"Part 1 answer: {example.part1_answer}")
    if example.part2_answer is not None:
        typer.echo(f"Part 2 answer: {example.part2_answer}")


def echo_throttle_status(last_request_time: float | None, seconds_until_ready: float) -> None:
    """Print the last request time and the remaining cooldown."""

    if last_request_time is None:
        typer.echo("Last request: none recorded")
    else:
        moment = datetime.fromtimestamp(last_request_time, tz=timezone.utc)
        typer.echo(f"Last request: {moment.isoformat(timespec='seconds')}")
    typer.echo(f"Next request allowed in: {seconds_until_ready:.0f}s")


def echo_flush_errors(errors: list[StoreError]) -> None:
    """Warn about state that could not be persisted."""

    for error in errors:
        typer.secho(f"Warning: could not persist state ({error})", fg=typer.colors.YELLOW, err=True)
