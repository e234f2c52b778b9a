"""Services module for taskboard - business logic layer."""
