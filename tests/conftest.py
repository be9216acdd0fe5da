"""pytest configuration for shellpal tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path so tests can import shellpal
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from shellpal.console import RecordingReporter  # noqa: E402
from shellpal.errors import ExecutionError  # noqa: E402
from shellpal.execution import ExecutionOutcome  # noqa: E402

ISOLATED_ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_CHAT_MODEL",
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "SHELLPAL_CONFIG",
    "SHELLPAL_CHAT_PROVIDER",
    "SHELLPAL_CHAT_MODEL",
    "SHELLPAL_STT_PROVIDER",
    "SHELLPAL_TTS_PROVIDER",
    "SHELLPAL_SHELL",
    "SHELLPAL_EXEC_TIMEOUT",
    "SHELLPAL_STT_TIMEOUT",
    "SHELLPAL_STT_MAX_RETRIES",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests independent of the developer's environment and config file."""
    for var in ISOLATED_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


class FakeExecutor:
    """Executor double that records commands instead of running them."""

    def __init__(self, return_code: int = 0, error: Exception | None = None):
        self.return_code = return_code
        self.error = error
        self.commands: list[str] = []

    def execute(self, command: str) -> ExecutionOutcome:
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return ExecutionOutcome(command=command, return_code=self.return_code)


@pytest.fixture
def reporter() -> RecordingReporter:
    """Create an in-memory transcript reporter."""
    return RecordingReporter()


@pytest.fixture
def executor() -> FakeExecutor:
    """Create an executor double that always succeeds."""
    return FakeExecutor()


@pytest.fixture
def failing_executor() -> FakeExecutor:
    """Create an executor double that raises ExecutionError."""
    return FakeExecutor(error=ExecutionError("boom"))


@pytest.fixture
def executor_factory():
    """Return the FakeExecutor class for tests that need custom behavior."""
    return FakeExecutor
