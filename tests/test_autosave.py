"""Tests for debounced note autosave, driven by a manual timer."""

import pytest

from deskspace.desktop.autosave import NoteAutosaver


class ManualTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


@pytest.fixture()
def timers():
    return []


@pytest.fixture()
def saves():
    return []


@pytest.fixture()
def saver(timers, saves):
    def factory(delay, callback):
        timer = ManualTimer(delay, callback)
        timers.append(timer)
        return timer

    return NoteAutosaver(lambda note, content: saves.append((note, content)), delay=1.0, timer_factory=factory)


class TestDebounce:

    def test_save_after_idle(self, saver, timers, saves):
        saver.edit("n1", "hello")
        assert timers[0].started and timers[0].delay == 1.0
        assert saves == []
        timers[0].fire()
        assert saves == [("n1", "hello")]
        assert not saver.has_pending("n1")

    def test_newer_edit_supersedes_pending(self, saver, timers, saves):
        saver.edit("n1", "he")
        saver.edit("n1", "hello")
        assert timers[0].cancelled
        timers[0].fire()
        timers[1].fire()
        assert saves == [("n1", "hello")]

    def test_superseded_timer_firing_late_does_not_save(self, saver, timers, saves):
        saver.edit("n1", "he")
        stale = timers[0]
        saver.edit("n1", "hello")
        stale.callback()  # fired before the cancel took effect
        assert saves == []
        assert saver.pending_content("n1") == "hello"
        assert not timers[1].cancelled
        timers[1].fire()
        assert saves == [("n1", "hello")]

    def test_notes_are_independent(self, saver, timers, saves):
        saver.edit("n1", "a")
        saver.edit("n2", "b")
        timers[1].fire()
        assert saves == [("n2", "b")]
        assert saver.pending_content("n1") == "a"

    def test_unchanged_content_is_not_saved(self, saver, timers, saves):
        saver.mark_saved("n1", "same")
        saver.edit("n1", "same")
        assert timers == []
        assert not saver.has_pending("n1")

    def test_edit_back_to_saved_cancels_pending(self, saver, timers, saves):
        saver.mark_saved("n1", "orig")
        saver.edit("n1", "changed")
        saver.edit("n1", "orig")
        assert timers[0].cancelled
        assert not saver.has_pending("n1")


class TestFlush:

    def test_flush_saves_immediately(self, saver, timers, saves):
        saver.edit("n1", "text")
        assert saver.flush("n1") is True
        assert timers[0].cancelled
        assert saves == [("n1", "text")]
        assert saver.flush("n1") is False

    def test_flush_all(self, saver, saves):
        saver.edit("n1", "a")
        saver.edit("n2", "b")
        assert saver.flush_all() == 2
        assert sorted(saves) == [("n1", "a"), ("n2", "b")]

    def test_close_flushes_and_forgets_baseline(self, saver, saves):
        saver.edit("n1", "text")
        assert saver.close("n1") is True
        saver.edit("n1", "text")
        assert saver.has_pending("n1")

    def test_failed_save_stays_pending(self, timers):
        def failing(note, content):
            raise RuntimeError("offline")

        saver = NoteAutosaver(failing, timer_factory=lambda d, cb: ManualTimer(d, cb))
        saver.edit("n1", "draft")
        with pytest.raises(RuntimeError):
            saver.flush("n1")
        assert saver.pending_content("n1") == "draft"
        with pytest.raises(RuntimeError):
            saver.close("n1")
        assert saver.has_pending("n1")

    def test_timer_failure_is_logged_not_raised(self, caplog):
        created = []

        def failing(note, content):
            raise RuntimeError("offline")

        def factory(delay, callback):
            created.append(ManualTimer(delay, callback))
            return created[-1]

        saver = NoteAutosaver(failing, timer_factory=factory)
        saver.edit("n1", "draft")
        created[0].fire()
        assert "Autosave failed" in caplog.text
        assert saver.has_pending("n1")
