"""Configuration management commands."""

import json

import typer
from pydantic import ValidationError as PydanticValidationError

from taskboard.services.config_service import get_config_service
from taskboard.utils.exit_codes import ERROR_INVALID_ARGS
from taskboard.utils.ui.console import get_console
from taskboard.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console(highlight=False)


def _parse_value(value: str):
    """Interpret command-line values the way JSON would, falling back to text."""
    if value.lower() in ("null", "none"):
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


@app.command("show")
@command_wrapper
def show_config() -> None:
    """Show the current configuration."""
    config_service = get_config_service()
    console.print_json(config_service.config.model_dump_json())
    console.print(f"[dim]{config_service.config_path}[/dim]")


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., storage.backend)"),
) -> None:
    """Get a configuration value."""
    config_service = get_config_service()
    try:
        value = config_service.get(key)
    except KeyError as e:
        raise AppError(
            f"Configuration key '{key}' not found", ERROR_INVALID_ARGS
        ) from e
    if hasattr(value, "model_dump_json"):
        console.print_json(value.model_dump_json())
    else:
        console.print("null" if value is None else value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., storage.backend)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    config_service = get_config_service()
    parsed_value = _parse_value(value)
    try:
        config_service.set(key, parsed_value)
    except KeyError as e:
        raise AppError(
            f"Configuration key '{key}' not found", ERROR_INVALID_ARGS
        ) from e
    except PydanticValidationError as e:
        message = e.errors()[0]["msg"] if e.errors() else str(e)
        raise AppError(
            f"Invalid value for '{key}': {message}", ERROR_INVALID_ARGS
        ) from e
    format_success(f"Configuration '{key}' set to '{config_service.get(key)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        confirm = typer.confirm(f"Are you sure you want to reset {msg}?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    config_service = get_config_service()
    try:
        config_service.reset(key)
    except KeyError as e:
        raise AppError(
            f"Configuration key '{key}' not found", ERROR_INVALID_ARGS
        ) from e

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
