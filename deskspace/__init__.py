"""Deskspace: backend and desktop state for a personal virtual desktop."""

__version__ = "1.0.0"
