"""Window state for the desktop: open, minimized and focused apps and folders.

Apps and folders share one state machine keyed by ``WindowKey``. There is a
single focus slot, so focusing a folder unfocuses any app and vice versa.

States per window:
  CLOSED    -- not open
  FOCUSED   -- open, holds the focus slot, highest z-index
  UNFOCUSED -- open and visible, another window (or none) has focus
  MINIMIZED -- open but hidden; never focused

Every focus takes the next value of a global z-counter, so the most recently
focused window is always on top.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Set

BASE_Z_INDEX = 100

APP_TITLES = {
    "docs": "Docs",
    "notes": "Notes",
    "utilities": "Utilities",
    "vault": "Vault",
}


class WindowKind(str, Enum):
    APP = "app"
    FOLDER = "folder"


class WindowState(Enum):
    CLOSED = "closed"
    FOCUSED = "focused"
    UNFOCUSED = "unfocused"
    MINIMIZED = "minimized"


class WindowNotOpenError(Exception):
    """Raised when focusing, minimizing or restoring a window that is not open."""

    def __init__(self, key: "WindowKey"):
        self.window = key
        super().__init__(f"Window is not open: {key.key}")


@dataclass(frozen=True)
class WindowKey:
    kind: WindowKind
    id: str

    @property
    def key(self) -> str:
        """Stable string form, ``app-<id>`` or ``folder-<id>``."""
        return f"{self.kind.value}-{self.id}"

    @classmethod
    def app(cls, app_id: str) -> "WindowKey":
        return cls(WindowKind.APP, app_id)

    @classmethod
    def folder(cls, folder_id: str) -> "WindowKey":
        return cls(WindowKind.FOLDER, folder_id)


@dataclass(frozen=True)
class OverviewEntry:
    window: WindowKey
    title: str
    minimized: bool
    focused: bool


class WindowManager:
    """Synchronous state machine driven by UI events."""

    def __init__(self):
        # dict keeps opening order
        self._open: Dict[WindowKey, None] = {}
        self._minimized: Set[WindowKey] = set()
        self._focused: Optional[WindowKey] = None
        self._z_counter = BASE_Z_INDEX
        self._z: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open(self, window: WindowKey) -> None:
        """Open (or re-show) *window* and focus it."""
        self._open.setdefault(window, None)
        self._minimized.discard(window)
        self.focus(window)

    def close(self, window: WindowKey) -> None:
        self._open.pop(window, None)
        self._minimized.discard(window)
        self._z.pop(window.key, None)
        if self._focused == window:
            self._focused = None

    def minimize(self, window: WindowKey) -> None:
        self._require_open(window)
        self._minimized.add(window)
        if self._focused == window:
            self._focused = None

    def restore(self, window: WindowKey) -> None:
        self._require_open(window)
        self._minimized.discard(window)
        self.focus(window)

    def focus(self, window: WindowKey) -> None:
        """Give *window* the focus slot and the top z-index.

        A minimized window is restored first.
        """
        self._require_open(window)
        self._minimized.discard(window)
        self._focused = window
        self._z_counter += 1
        self._z[window.key] = self._z_counter

    def activate(self, window: WindowKey) -> None:
        """Overview click: restore when minimized, otherwise focus."""
        if window in self._minimized:
            self.restore(window)
        else:
            self.focus(window)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def state(self, window: WindowKey) -> WindowState:
        if window not in self._open:
            return WindowState.CLOSED
        if window in self._minimized:
            return WindowState.MINIMIZED
        if self._focused == window:
            return WindowState.FOCUSED
        return WindowState.UNFOCUSED

    def is_open(self, window: WindowKey) -> bool:
        return window in self._open

    def z_index(self, window: WindowKey) -> Optional[int]:
        return self._z.get(window.key)

    @property
    def focused(self) -> Optional[WindowKey]:
        return self._focused

    @property
    def open_apps(self) -> List[str]:
        return self._ids(self._open, WindowKind.APP)

    @property
    def minimized_apps(self) -> Set[str]:
        return set(self._ids(self._minimized, WindowKind.APP))

    @property
    def focused_app(self) -> Optional[str]:
        return self._focused_id(WindowKind.APP)

    @property
    def open_folders(self) -> List[str]:
        return self._ids(self._open, WindowKind.FOLDER)

    @property
    def minimized_folders(self) -> Set[str]:
        return set(self._ids(self._minimized, WindowKind.FOLDER))

    @property
    def focused_folder(self) -> Optional[str]:
        return self._focused_id(WindowKind.FOLDER)

    def overview(
        self,
        folder_names: Optional[Mapping[str, str]] = None,
        app_titles: Optional[Mapping[str, str]] = None,
    ) -> List[OverviewEntry]:
        """Open folders then open apps, each in opening order.

        Derived from the state on every call; holds nothing of its own.
        """
        folder_names = folder_names or {}
        app_titles = APP_TITLES if app_titles is None else app_titles

        entries = []
        for kind in (WindowKind.FOLDER, WindowKind.APP):
            for window in self._open:
                if window.kind != kind:
                    continue
                if kind == WindowKind.FOLDER:
                    title = folder_names.get(window.id, "Unknown")
                else:
                    title = app_titles.get(window.id, window.id)
                entries.append(OverviewEntry(
                    window=window,
                    title=title,
                    minimized=window in self._minimized,
                    focused=self._focused == window,
                ))
        return entries

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_open(self, window: WindowKey) -> None:
        if window not in self._open:
            raise WindowNotOpenError(window)

    @staticmethod
    def _ids(windows, kind: WindowKind) -> List[str]:
        return [w.id for w in windows if w.kind == kind]

    def _focused_id(self, kind: WindowKind) -> Optional[str]:
        if self._focused is not None and self._focused.kind == kind:
            return self._focused.id
        return None
