"""Adapters implementing the taskboard collaborator interfaces."""
