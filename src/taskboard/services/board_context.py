"""Wiring of the configured repository, publisher and identity.

The storage backend and transport are resolved once from configuration
and injected into the change notifier, so commands never know which
backend they are talking to.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from taskboard.models import AppState
from taskboard.models.storage_strategy import create_publisher, create_storage_strategy
from taskboard.services.auth_service import AuthService
from taskboard.services.change_notifier import ChangeNotifier
from taskboard.services.config_service import ConfigService, get_config_service
from taskboard.ui.presentation import PresentationAdapter
from taskboard.utils.logger import get_logger

logger = get_logger("context")


def build_notifier(config_service: ConfigService | None = None) -> ChangeNotifier:
    """Create a change notifier for the configured backend and transport.

    Raises:
        ValueError: If the configured transport is incomplete
    """
    config_service = config_service or get_config_service()
    config = config_service.config
    strategy = create_storage_strategy(config, config_service.state_location())
    publisher = create_publisher(config.transport)
    logger.debug(
        "storage=%s transport=%s key=%s",
        strategy.storage_type,
        config.transport.kind,
        config.storage.state_key,
    )
    return ChangeNotifier(
        strategy.get_state_repository(),
        publisher,
        state_key=config.storage.state_key,
    )


@asynccontextmanager
async def board_session(
    config_service: ConfigService | None = None,
    *,
    surface_errors: bool = True,
    replace: AppState | None = None,
) -> AsyncIterator[PresentationAdapter]:
    """Open the configured board state for one unit of work.

    Args:
        config_service: Configuration source (defaults to the process-wide one)
        surface_errors: Print rejected commands through the formatters
        replace: Snapshot written over the stored state instead of loading it

    Yields:
        A presentation adapter bound to an open change notifier
    """
    config_service = config_service or get_config_service()
    notifier = build_notifier(config_service)
    await notifier.open(replace=replace)
    try:
        yield PresentationAdapter(
            notifier, AuthService(config_service), surface_errors=surface_errors
        )
    finally:
        await notifier.close()
