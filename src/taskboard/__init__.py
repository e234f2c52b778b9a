"""taskboard - a personal kanban task board."""

__version__ = "0.1.0"
