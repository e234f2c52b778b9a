"""Command-line commands for taskboard."""
