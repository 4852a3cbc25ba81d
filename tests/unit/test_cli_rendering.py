"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

import pytest
import typer

from aocinput.cli_rendering import echo_throttle_status, exit_with_command_error
from aocinput.errors import CommandError, ConfigError, TransportError


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = CommandError(
        stage="config",
        detail="Config file not found: `missing.yaml`.",
        hint="Provide an existing path via `--config <path.yaml>`.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("input", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "input failed at stage `config`" in captured.err
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in captured.err


def test_exit_with_command_error_maps_config_and_transport_errors(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Library errors should render with the stage they belong to."""

    with pytest.raises(typer.Exit):
        exit_with_command_error(
            "input",
            ConfigError(field="contact", detail="A contact identity is required."),
        )
    with pytest.raises(typer.Exit):
        exit_with_command_error(
            "example",
            TransportError("Session token was rejected (HTTP 400).", failure_kind="invalid_session"),
        )

    captured = capsys.readouterr()
    assert "input failed at stage `config`: A contact identity is required." in captured.err
    assert "example failed at stage `fetch`: Session token was rejected" in captured.err
    assert "Hint: Refresh the session token" in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for unexpected failures."""

    error = RuntimeError("unexpected store error")

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("input", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "input failed: unexpected store error" in captured.err


def test_echo_throttle_status_formats_time_and_wait(capsys: pytest.CaptureFixture[str]) -> None:
    """Status output should show a UTC timestamp and whole seconds remaining."""

    echo_throttle_status(86400.0, 42.4)
    echo_throttle_status(None, 0.0)

    assert capsys.readouterr().out.splitlines() == [
        "Last request: 1970-01-02T00:00:00+00:00",
        "Next request allowed in: 42s",
        "Last request: none recorded",
        "Next request allowed in: 0s",
    ]
