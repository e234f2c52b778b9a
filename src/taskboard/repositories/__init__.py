"""Collaborator interfaces for taskboard.

This package contains abstract base classes (ABCs) that define the contracts
for persistence, change broadcast and identity. These are the "Ports" in the
Hexagonal Architecture; implementations live in ``taskboard.adapters``.
"""

from .repository import ChangePublisher, IdentityProvider, StateRepository

__all__ = [
    "StateRepository",
    "ChangePublisher",
    "IdentityProvider",
]
