"""Shared helpers (logging, paths, time formatting)."""
