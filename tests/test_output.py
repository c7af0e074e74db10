"""Tests for spintable.spinner.output module."""

import io
import sys
import threading
from io import StringIO

import pytest

from spintable.spinner.output import (
    OutputRouter,
    TaskOutput,
    capturing,
    install_router,
    uninstall_router,
)


class TestTaskOutput:
    """Tests for TaskOutput buffers."""

    def test_separate_streams(self):
        out = TaskOutput()
        out.write("a", "stdout")
        out.write("b", "stderr")
        assert out.stdout == "a"
        assert out.stderr == "b"

    def test_merged_streams(self):
        """Merged output sends stderr into the stdout buffer."""
        out = TaskOutput(merged=True)
        out.write("a", "stdout")
        out.write("b", "stderr")
        assert out.stdout == "ab"
        assert out.stderr == ""

    def test_duplicate_to(self):
        """Every write is copied verbatim to the duplicate sink."""
        sink = StringIO()
        out = TaskOutput(duplicate_to=sink)
        out.write("one\n", "stdout")
        out.write("two\n", "stderr")
        assert sink.getvalue() == "one\ntwo\n"


class TestCapturing:
    """Tests for capturing() and the stream routers."""

    def test_print_is_captured(self):
        """print() inside the block lands in the writer."""
        out = TaskOutput()
        with capturing(out):
            print("hello")
            print("oops", file=sys.stderr)
        assert out.stdout == "hello\n"
        assert out.stderr == "oops\n"

    def test_writes_outside_capture_pass_through(self, capsys):
        """Contexts without a writer reach the real stream."""
        install_router()
        print("visible")
        assert capsys.readouterr().out == "visible\n"

    def test_capture_ends_with_block(self, capsys):
        out = TaskOutput()
        with capturing(out):
            print("inside")
        print("outside")
        assert out.stdout == "inside\n"
        assert "outside" in capsys.readouterr().out

    @pytest.mark.timeout(15)
    def test_threads_do_not_share_capture(self):
        """Concurrent workers each see only their own output."""
        outputs = [TaskOutput() for _ in range(4)]
        barrier = threading.Barrier(len(outputs))

        def worker(index: int) -> None:
            with capturing(outputs[index]):
                barrier.wait()
                for _ in range(50):
                    print(f"worker-{index}")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(outputs))]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for index, out in enumerate(outputs):
            assert out.stdout == f"worker-{index}\n" * 50

    def test_install_is_idempotent(self):
        install_router()
        router = sys.stdout
        install_router()
        assert sys.stdout is router
        assert isinstance(router, OutputRouter)

    def test_uninstall_restores_stream(self):
        original = sys.stdout
        install_router()
        uninstall_router()
        assert sys.stdout is original


class TestRouterBuffer:
    """Tests for byte writes through sys.stdout.buffer."""

    def test_bytes_are_captured(self):
        router = OutputRouter("stdout", StringIO())
        out = TaskOutput()
        with capturing(out):
            router.buffer.write("héllo\n".encode())
        assert out.stdout == "héllo\n"
        assert router.passthrough.getvalue() == ""

    def test_stderr_bytes_are_captured(self):
        router = OutputRouter("stderr", StringIO())
        out = TaskOutput()
        with capturing(out):
            assert router.buffer.write(b"warn\n") == 5
        assert out.stderr == "warn\n"

    def test_bytes_pass_through_to_binary_buffer(self):
        raw = io.BytesIO()
        passthrough = io.TextIOWrapper(raw, encoding="utf-8")
        router = OutputRouter("stdout", passthrough)
        router.write("text ")
        router.buffer.write(b"bytes")
        assert raw.getvalue() == b"text bytes"

    def test_bytes_decoded_for_text_only_stream(self):
        passthrough = StringIO()
        router = OutputRouter("stdout", passthrough)
        router.buffer.write(b"plain\n")
        assert passthrough.getvalue() == "plain\n"

    def test_sys_stdout_buffer_is_captured(self):
        """Work writing bytes to sys.stdout.buffer is captured."""
        out = TaskOutput()
        with capturing(out):
            sys.stdout.buffer.write(b"binary\n")
        assert out.stdout == "binary\n"
