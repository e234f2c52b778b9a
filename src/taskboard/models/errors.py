"""Error taxonomy for the task board."""


class TaskBoardError(Exception):
    """Base exception for all task board errors."""


class MutationError(TaskBoardError):
    """Base for errors a mutation command can be rejected with.

    These are returned as values by ``apply_command`` and never escape
    the mutation engine's public surface.
    """


class NotFoundError(MutationError):
    """Raised when a referenced board, column or task id is absent."""

    def __init__(self, kind: str, identifier: str, detail: str | None = None):
        message = f"{kind.capitalize()} '{identifier}' not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.kind = kind
        self.identifier = identifier


class ValidationError(MutationError):
    """Raised when a field value is empty or invalid."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid {field}: {message}")
        self.field = field


class IdCollisionError(MutationError):
    """Raised when id generation keeps producing ids already in use."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not generate a unique task id after {attempts} attempts"
        )
        self.attempts = attempts


class DanglingReferenceError(TaskBoardError):
    """Raised when the state violates referential integrity.

    This signals a bug (a previously mis-applied mutation or a corrupt
    stored document), never a user error.
    """


class PersistenceError(TaskBoardError):
    """Raised by state repositories when a load or save fails."""
