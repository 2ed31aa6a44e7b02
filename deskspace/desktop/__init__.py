"""Client-side desktop state: windows, note autosave and the API client."""

from .window_manager import (
    OverviewEntry,
    WindowKey,
    WindowKind,
    WindowManager,
    WindowNotOpenError,
    WindowState,
)
from .autosave import NoteAutosaver
from .api_client import ApiError, AssistantUnavailable, DesktopClient, NoteRef

__all__ = [
    "OverviewEntry",
    "WindowKey",
    "WindowKind",
    "WindowManager",
    "WindowNotOpenError",
    "WindowState",
    "NoteAutosaver",
    "ApiError",
    "AssistantUnavailable",
    "DesktopClient",
    "NoteRef",
]
