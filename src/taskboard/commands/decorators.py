"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from taskboard.models import (
    MutationError,
    MutationResult,
    NotFoundError,
    TaskBoardError,
    ValidationError,
)
from taskboard.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
    get_exit_code_name,
)
from taskboard.utils.logger import get_logger
from taskboard.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def exit_code_for(error: TaskBoardError) -> int:
    """Map a domain error to a process exit code."""
    if isinstance(error, NotFoundError):
        return ERROR_NOT_FOUND
    if isinstance(error, ValidationError):
        return ERROR_INVALID_ARGS
    return ERROR_GENERAL


def raise_for_result(result: MutationResult) -> None:
    """Raise the error carried by a rejected mutation, if any."""
    if result.error is not None:
        raise result.error


def command_wrapper(func: Callable) -> Callable:
    """Decorator to wrap command functions with common functionality.

    Runs coroutine commands on a fresh event loop, logs start and finish
    with timing, and turns errors into a formatted message plus exit code.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except (AppError, TaskBoardError) as e:
            exit_code = (
                e.exit_code if isinstance(e, AppError) else exit_code_for(e)
            )
            elapsed = time.monotonic() - start
            log = logger.warning if isinstance(e, MutationError) else logger.error
            log(
                "command failed: %s (%.3fs) [%s] - %s",
                cmd,
                elapsed,
                get_exit_code_name(exit_code),
                str(e),
            )
            format_error(str(e))
            raise typer.Exit(code=exit_code) from e

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            # Generic fallback for unexpected crashes
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
