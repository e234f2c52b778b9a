"""Identity resolution for the local user."""

from __future__ import annotations

import os

from taskboard.repositories import IdentityProvider
from taskboard.services.config_service import ConfigService

ACTOR_ENV_VAR = "TASKBOARD_ACTOR"


class AuthService(IdentityProvider):
    """Resolves the current actor from the environment or configuration.

    ``TASKBOARD_ACTOR`` takes precedence over ``auth.actor`` in config.
    Commands are never gated on the result; the actor is only recorded on
    broadcast change descriptors.
    """

    def __init__(self, config_service: ConfigService):
        self.config_service = config_service

    def current_actor(self) -> str | None:
        actor = os.environ.get(ACTOR_ENV_VAR) or self.config_service.config.auth.actor
        if actor is None or not actor.strip():
            return None
        return actor.strip()

    def is_authenticated(self) -> bool:
        return self.current_actor() is not None


class StaticIdentity(IdentityProvider):
    """Identity provider returning a fixed actor."""

    def __init__(self, actor: str | None = None):
        self.actor = actor

    def current_actor(self) -> str | None:
        return self.actor
