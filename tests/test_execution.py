"""Tests for command execution backends."""

import os
import time

import pytest

from shellpal.errors import ExecutionError
from shellpal.execution import PreviewExecutor, ShellExecutor, resolve_shell

posix_only = pytest.mark.skipif(os.name == "nt", reason="requires a POSIX shell")


class TestResolveShell:
    """Test shell selection."""

    def test_unsupported_shell(self) -> None:
        """Test that unknown shells are rejected."""
        with pytest.raises(ExecutionError, match="Unsupported shell"):
            resolve_shell("fish")

    def test_auto_prefers_pwsh(self, monkeypatch) -> None:
        """Test that auto picks PowerShell when installed."""
        monkeypatch.setattr(
            "shellpal.execution.shutil.which",
            lambda name: "/usr/bin/pwsh" if name == "pwsh" else None,
        )

        assert resolve_shell("auto") == [
            "/usr/bin/pwsh",
            "-NoProfile",
            "-NonInteractive",
            "-Command",
        ]

    @posix_only
    def test_auto_falls_back_to_sh(self, monkeypatch) -> None:
        """Test the POSIX fallback."""
        monkeypatch.setattr(
            "shellpal.execution.shutil.which",
            lambda name: "/bin/sh" if name == "sh" else None,
        )

        assert resolve_shell("auto") == ["/bin/sh", "-c"]

    def test_missing_pwsh(self, monkeypatch) -> None:
        """Test that an explicitly chosen but absent PowerShell is an error."""
        monkeypatch.setattr("shellpal.execution.shutil.which", lambda name: None)

        with pytest.raises(ExecutionError, match="Shell not found"):
            resolve_shell("pwsh")


@posix_only
class TestShellExecutor:
    """Test running real commands through sh."""

    def test_streams_output(self, reporter) -> None:
        """Test output lines reach the reporter."""
        outcome = ShellExecutor(reporter, shell="sh").execute("echo one; echo two")

        assert outcome.succeeded
        assert outcome.output == ["one", "two"]
        assert reporter.texts("output") == ["one", "two"]

    def test_stderr_merged(self, reporter) -> None:
        """Test that stderr is streamed with stdout."""
        outcome = ShellExecutor(reporter, shell="sh").execute("echo oops 1>&2")

        assert outcome.output == ["oops"]

    def test_nonzero_exit(self, reporter) -> None:
        """Test that a failing command reports its exit code."""
        outcome = ShellExecutor(reporter, shell="sh").execute("exit 3")

        assert outcome.return_code == 3
        assert outcome.succeeded is False

    def test_working_directory(self, reporter, tmp_path) -> None:
        """Test the configured working directory."""
        outcome = ShellExecutor(reporter, shell="sh", cwd=str(tmp_path)).execute("pwd")

        assert os.path.realpath(outcome.output[0]) == os.path.realpath(tmp_path)

    def test_timeout(self, reporter) -> None:
        """Test that a slow command is killed."""
        executor = ShellExecutor(reporter, shell="sh", timeout=0.5)

        with pytest.raises(ExecutionError, match="timed out"):
            executor.execute("exec sleep 10")

    def test_timeout_kills_child_processes(self, reporter) -> None:
        """Test that the timeout also stops processes the shell started."""
        executor = ShellExecutor(reporter, shell="sh", timeout=0.5)
        started = time.monotonic()

        with pytest.raises(ExecutionError, match="timed out"):
            executor.execute("sleep 10; echo done")

        assert time.monotonic() - started < 5
        assert "done" not in reporter.texts("output")

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command(self, reporter, command: str) -> None:
        """Test that empty commands are rejected."""
        with pytest.raises(ExecutionError, match="empty"):
            ShellExecutor(reporter, shell="sh").execute(command)

    def test_start_failure(self, reporter, monkeypatch) -> None:
        """Test that a missing shell binary becomes ExecutionError."""

        def fail(*args, **kwargs):
            raise FileNotFoundError("no such file")

        monkeypatch.setattr("shellpal.execution.subprocess.Popen", fail)

        with pytest.raises(ExecutionError, match="Failed to start"):
            ShellExecutor(reporter, shell="sh").execute("ls")


class TestPreviewExecutor:
    """Test the preview executor."""

    def test_preview(self, reporter) -> None:
        """Test that commands are reported and not run."""
        executor = PreviewExecutor(reporter)

        outcome = executor.execute("rm -rf /tmp/nothing")

        assert outcome.succeeded
        assert executor.commands == ["rm -rf /tmp/nothing"]
        assert reporter.texts("notice") == ["(preview) would run: rm -rf /tmp/nothing"]
