"""JSON file implementation of StateRepository.

Mirrors the browser-storage layout of the web client: one document per
state key, stored as ``<directory>/<key>.json``.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from taskboard.models import AppState, PersistenceError
from taskboard.repositories import StateRepository


class JsonFileStateRepository(StateRepository):
    """Stores each snapshot as a pretty-printed JSON file."""

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = Path(user_data_dir("taskboard")) / "states"
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    async def load(self, key: str) -> AppState | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
            return AppState.from_document(document)
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise PersistenceError(f"Stored state {path} is corrupt: {e}") from e

    async def save(self, key: str, state: AppState) -> None:
        path = self.path_for(key)
        # Atomic write: write to temp, then rename
        tmp_file = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(state.to_document(), f, indent=2)
            tmp_file.rename(path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
