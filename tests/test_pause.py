"""Tests for spintable.spinner.pause module."""

import threading

import pytest

from spintable.spinner.pause import (
    PauseCoordinator,
    get_pause_coordinator,
    pause_all,
    pausing,
)


class TestPauseCoordinator:
    """Tests for the pause flag and its nesting."""

    def test_not_paused_initially(self, pause_coordinator):
        assert pause_coordinator.paused is False

    def test_pausing_sets_and_clears(self, pause_coordinator):
        with pause_coordinator.pausing():
            assert pause_coordinator.paused is True
        assert pause_coordinator.paused is False

    def test_nested_pause_restores_outer_state(self, pause_coordinator):
        """Leaving an inner pause keeps the outer one in effect."""
        with pause_coordinator.pausing():
            with pause_coordinator.pausing():
                assert pause_coordinator.paused is True
            assert pause_coordinator.paused is True
        assert pause_coordinator.paused is False

    def test_pause_restored_on_error(self, pause_coordinator):
        with pytest.raises(RuntimeError):
            with pause_coordinator.pausing():
                raise RuntimeError("boom")
        assert pause_coordinator.paused is False

    def test_pause_returns_result(self, pause_coordinator):
        """pause() runs the callable with rendering paused."""
        seen = []

        def record(value):
            seen.append(pause_coordinator.paused)
            return value * 2

        assert pause_coordinator.pause(record, 21) == 42
        assert seen == [True]

    @pytest.mark.timeout(15)
    def test_pausing_waits_for_render_lock(self, pause_coordinator):
        """pausing() cannot start while a render loop holds the lock."""
        entered = threading.Event()

        def pause_in_thread():
            with pause_coordinator.pausing():
                entered.set()

        with pause_coordinator.lock:
            thread = threading.Thread(target=pause_in_thread)
            thread.start()
            assert not entered.wait(0.1)
        thread.join(5)
        assert entered.is_set()


class TestProcessWidePause:
    """Tests for the module-level helpers."""

    def test_shared_coordinator(self):
        """Every caller sees the same coordinator."""
        assert get_pause_coordinator() is get_pause_coordinator()

    def test_pausing_uses_shared_coordinator(self):
        with pausing():
            assert get_pause_coordinator().paused is True
        assert get_pause_coordinator().paused is False

    def test_pause_all(self):
        assert pause_all(lambda: get_pause_coordinator().paused) is True
