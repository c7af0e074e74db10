"""Tests for spintable.spinner.group module."""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from spintable.spinner.group import SpinGroup
from spintable.spinner.task import CHECK, CROSS
from spintable.utils.errors import TaskInterruptedError


@pytest.fixture
def make_group(test_console, fast_settings, pause_coordinator):
    """Factory for groups drawing into the test terminal."""

    def factory(**kwargs):
        kwargs.setdefault("console", test_console)
        kwargs.setdefault("settings", fast_settings)
        kwargs.setdefault("pause_coordinator", pause_coordinator)
        return SpinGroup(**kwargs)

    return factory


def raise_value_error(task):
    print("about to fail")
    raise ValueError("connection refused")


@pytest.mark.timeout(15)
class TestSpinGroupWait:
    """Tests for the render loop and its result."""

    def test_all_succeed(self, make_group):
        group = make_group()
        group.add("First", lambda t: True)
        group.add("Second", lambda t: None)
        assert group.wait() is True

    def test_one_failure_fails_group(self, make_group):
        group = make_group()
        group.add("Good", lambda t: True)
        group.add("Bad", raise_value_error)
        assert group.wait() is False

    def test_empty_group(self, make_group):
        assert make_group().wait() is True

    def test_frames_show_titles_and_final_glyphs(self, make_group, terminal):
        group = make_group()
        group.add("Compiling assets", lambda t: True)
        group.add("Fetching sources", lambda t: False)
        group.wait()

        output = terminal.getvalue()
        assert "Compiling assets" in output
        assert "Fetching sources" in output
        assert CHECK in output
        assert CROSS in output

    def test_each_task_claims_one_line(self, make_group, terminal):
        """A task's first appearance prints its line and a newline."""
        group = make_group(auto_debrief=False)
        group.add("one", lambda t: True)
        group.add("two", lambda t: True)
        group.wait()
        assert terminal.getvalue().count("\n") == 2

    def test_task_output_not_on_terminal(self, make_group, terminal):
        group = make_group(auto_debrief=False)
        group.add("quiet", lambda t: print("captured only"))
        group.wait()
        assert "captured only" not in terminal.getvalue()
        assert group.tasks[0].stdout == "captured only\n"

    def test_slow_task_animates(self, make_group, terminal):
        """Frames keep being drawn while a task runs."""
        group = make_group(auto_debrief=False)
        group.add("slow", lambda t: time.sleep(0.1))
        group.wait()
        # First frame plus at least a few partial repaints
        assert terminal.getvalue().count("\x1b[1A") >= 3

    def test_context_manager_waits(self, make_group):
        with make_group() as group:
            group.add("inside", lambda t: True)
        assert group.result is True
        assert group.tasks[0].done

    def test_context_manager_interrupts_on_error(self, make_group):
        def work(task):
            while True:
                task.raise_if_interrupted()
                time.sleep(0.01)

        with pytest.raises(RuntimeError):
            with make_group() as group:
                task = group.add("looping", work)
                raise RuntimeError("caller failed")

        assert task.join(5)
        assert isinstance(task.exception, TaskInterruptedError)


@pytest.mark.timeout(15)
class TestSpinGroupDebrief:
    """Tests for success and failure debriefing."""

    def test_success_debrief_called_once_per_success(self, make_group):
        group = make_group()
        debriefer = MagicMock()
        group.success_debrief(debriefer)
        group.add("Good", lambda t: print("done") or True)
        group.add("Bad", raise_value_error)

        assert group.wait() is False
        debriefer.assert_called_once_with("Good", "done\n", "")

    def test_failure_debrief_replaces_default_report(self, make_group, terminal):
        group = make_group()
        failures = []

        @group.failure_debrief
        def on_failure(title, exception, out, err):
            failures.append((title, exception, out, err))

        group.add("Bad", raise_value_error)
        group.add("Refused", lambda t: False)
        group.wait()

        assert [f[0] for f in failures] == ["Bad", "Refused"]
        assert isinstance(failures[0][1], ValueError)
        assert failures[0][2] == "about to fail\n"
        assert failures[1][1] is None
        assert "Task Failed" not in terminal.getvalue()

    def test_default_report(self, make_group, terminal):
        """Without a callback, failures get a framed report."""
        group = make_group()
        group.add("Deploy api", raise_value_error)
        group.wait()

        output = terminal.getvalue()
        assert "Task Failed" in output
        assert "Deploy api" in output
        assert "ValueError: connection refused" in output
        assert "about to fail" in output
        assert "(empty)" in output

    def test_auto_debrief_false_skips_reports(self, make_group, terminal):
        group = make_group(auto_debrief=False)
        debriefer = MagicMock()
        group.success_debrief(debriefer)
        group.add("Good", lambda t: True)
        group.add("Bad", raise_value_error)

        assert group.wait() is False
        debriefer.assert_not_called()
        assert "Task Failed" not in terminal.getvalue()

        assert group.debrief() is False
        debriefer.assert_called_once()
        assert "Task Failed" in terminal.getvalue()

    def test_debrief_callback_may_reenter_group(self, make_group):
        """Callbacks run under a reentrant lock."""
        group = make_group()
        seen = []
        group.success_debrief(lambda title, out, err: seen.append(len(group.tasks)))
        group.add("only", lambda t: True)
        group.wait()
        assert seen == [1]


@pytest.mark.timeout(15)
class TestSpinGroupPauseAndInterrupt:
    """Tests for pausing and interrupting the render loop."""

    def test_paused_group_draws_nothing(self, make_group, pause_coordinator, terminal):
        group = make_group(auto_debrief=False)
        group.add("paused", lambda t: True)
        results = []

        with pause_coordinator.pausing():
            waiter = threading.Thread(target=lambda: results.append(group.wait()))
            waiter.start()
            time.sleep(0.1)
            assert terminal.getvalue() == ""
            assert waiter.is_alive()

        waiter.join(5)
        assert results == [True]
        assert "paused" in terminal.getvalue()

    def test_keyboard_interrupt_interrupts_tasks(self, make_group):
        group = make_group()

        def work(task):
            while True:
                task.raise_if_interrupted()
                time.sleep(0.01)

        task = group.add("endless", work)
        with patch.object(group, "_tick", side_effect=KeyboardInterrupt):
            with pytest.raises(KeyboardInterrupt):
                group.wait()

        assert task.interrupted
        assert task.join(5)

    def test_request_full_render(self, make_group, terminal):
        group = make_group(auto_debrief=False)
        release = threading.Event()
        group.add("Repainted title", lambda t: release.wait(5))
        group._tick(0, True)
        terminal.truncate(0)
        terminal.seek(0)

        group.request_full_render()
        group._tick(1, False)
        assert "Repainted title" in terminal.getvalue()

        terminal.truncate(0)
        terminal.seek(0)
        group._tick(2, False)
        assert "Repainted title" not in terminal.getvalue()
        release.set()
