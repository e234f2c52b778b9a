"""Unit tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from taskboard.models.config_models import (
    DEFAULT_STATE_KEY,
    AppConfig,
    StorageConfig,
    TransportConfig,
)


def test_defaults():
    config = AppConfig()
    assert config.storage.backend == "sqlite"
    assert config.storage.path is None
    assert config.storage.state_key == DEFAULT_STATE_KEY == "kanban-board-data"
    assert config.transport.kind == "log"
    assert config.transport.timeout == 10.0
    assert config.auth.actor is None
    assert config.output.color is True


@pytest.mark.parametrize("key", ["", "   ", "a/b", "a\\b"])
def test_invalid_state_key_rejected(key):
    with pytest.raises(ValidationError):
        StorageConfig(state_key=key)


def test_state_key_is_stripped():
    assert StorageConfig(state_key=" boards ").state_key == "boards"


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        StorageConfig(backend="postgres")


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        TransportConfig(timeout=0)


def test_json_round_trip():
    config = AppConfig.model_validate(
        {"storage": {"backend": "json"}, "auth": {"actor": "alice"}}
    )
    assert AppConfig.model_validate_json(config.model_dump_json()) == config
