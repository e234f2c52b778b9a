"""Entity store: immutable snapshot holder and integrity checks."""

from .entity_store import EntityStore, check_integrity, locate_task

__all__ = ["EntityStore", "check_integrity", "locate_task"]
