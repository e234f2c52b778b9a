"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from the real config, data and
log directories.
"""

from __future__ import annotations

import logging
import logging.handlers
from datetime import UTC, datetime
from itertools import count
from unittest.mock import patch

import pytest

from taskboard.models import AppState, initial_state


# ---------------------------------------------------------------------------
# Directory isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Send the application log to *tmp_path* and reset the singleton."""
    import taskboard.utils.logger as logger_mod

    logger_mod._logger = None
    _remove_file_handlers()
    log_dir = tmp_path / "logs"
    with patch("taskboard.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield log_dir
    _remove_file_handlers()
    logger_mod._logger = None


def _remove_file_handlers():
    logger = logging.getLogger("taskboard")
    for handler in list(logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from taskboard.services.config_service import ConfigService, get_config_service

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    get_config_service.cache_clear()
    with (
        patch("taskboard.services.config_service.user_config_dir", return_value=config_dir),
        patch("taskboard.services.config_service.user_data_dir", return_value=data_dir),
    ):
        yield ConfigService()
    get_config_service.cache_clear()


@pytest.fixture()
def patch_config_service(tmp_config):
    """Make get_config_service() return the temporary ConfigService."""
    with (
        patch(
            "taskboard.services.config_service.get_config_service",
            return_value=tmp_config,
        ),
        patch(
            "taskboard.services.board_context.get_config_service",
            return_value=tmp_config,
        ),
        patch("taskboard.commands.board.get_config_service", return_value=tmp_config),
        patch("taskboard.commands.config.get_config_service", return_value=tmp_config),
    ):
        yield tmp_config


# ---------------------------------------------------------------------------
# Board state
# ---------------------------------------------------------------------------


@pytest.fixture()
def seeded_state() -> AppState:
    """The demo board: task-1..task-4 in column-1, two empty columns."""
    return initial_state()


@pytest.fixture()
def id_factory():
    """Deterministic task id generator: task-new-1, task-new-2, ..."""
    counter = count(1)
    return lambda: f"task-new-{next(counter)}"


@pytest.fixture()
def fixed_clock():
    """Clock always returning the same instant."""
    instant = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
    return lambda: instant
