"""Rich console output helpers."""
