"""Debounced note autosave.

Edits are buffered per note and written after an idle delay, or right away
on ``flush`` / ``close``. A newer edit to the same note replaces the pending
one and restarts its timer. Saves are skipped when the content matches what
was last saved.
"""

import logging
import threading
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0

K = TypeVar("K", bound=Hashable)


class NoteAutosaver(Generic[K]):
    """Buffers note edits and calls ``save(note, content)`` after *delay* seconds idle.

    ``timer_factory(delay, callback)`` must return an object with ``start()``
    and ``cancel()``; ``threading.Timer`` by default.
    """

    def __init__(
        self,
        save: Callable[[K, str], None],
        delay: float = DEFAULT_DELAY_SECONDS,
        timer_factory: Callable = threading.Timer,
    ):
        self._save = save
        self._delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Dict[K, str] = {}
        self._timers: Dict[K, object] = {}
        self._saved: Dict[K, str] = {}

    def mark_saved(self, note: K, content: str) -> None:
        """Record *content* as what the server has, e.g. when an editor opens."""
        with self._lock:
            self._saved[note] = content

    def edit(self, note: K, content: str) -> None:
        with self._lock:
            timer = self._timers.pop(note, None)
            if timer is not None:
                timer.cancel()

            if self._saved.get(note) == content:
                self._pending.pop(note, None)
                return

            self._pending[note] = content
            timer = self._timer_factory(self._delay, lambda: self._on_timer(note, timer))
            self._timers[note] = timer
        timer.start()

    def has_pending(self, note: K) -> bool:
        with self._lock:
            return note in self._pending

    def flush(self, note: K) -> bool:
        """Save the pending edit for *note* now. Returns True if a save happened.

        A failed save keeps the edit pending (unless a newer one arrived) and
        re-raises.
        """
        return self._flush(note)

    def _flush(self, note: K, fired: Optional[object] = None) -> bool:
        with self._lock:
            # A timer that fired after being superseded must not save the newer edit.
            if fired is not None and self._timers.get(note) is not fired:
                return False
            timer = self._timers.pop(note, None)
            if timer is not None and timer is not fired:
                timer.cancel()
            content = self._pending.pop(note, None)
            if content is None or self._saved.get(note) == content:
                return False

        try:
            self._save(note, content)
        except Exception:
            with self._lock:
                self._pending.setdefault(note, content)
            raise

        with self._lock:
            self._saved[note] = content
        return True

    def flush_all(self) -> int:
        with self._lock:
            notes = list(self._pending)
        return sum(1 for note in notes if self.flush(note))

    def close(self, note: K) -> bool:
        """Flush and forget *note* (the editor was closed).

        If the save fails the edit stays pending and the error propagates.
        """
        saved = self.flush(note)
        with self._lock:
            self._saved.pop(note, None)
        return saved

    def _on_timer(self, note: K, timer: object) -> None:
        try:
            self._flush(note, fired=timer)
        except Exception:
            logger.exception("Autosave failed", extra={"note": str(note)})

    def pending_content(self, note: K) -> Optional[str]:
        with self._lock:
            return self._pending.get(note)
