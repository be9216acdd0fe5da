"""Console transcript reporting.

Reporters render session events (assistant replies, candidate commands,
notices, errors, command output). They are the only place the engine
writes user-facing text; logging goes through the logging module.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from shellpal.tts import Speaker

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """Abstract base class for transcript reporters."""

    @abstractmethod
    def emit(self, kind: str, text: str) -> None:
        """Render one transcript event.

        Args:
            kind: Event kind (user, assistant, candidate, notice, error, output, transcript)
            text: Event text
        """
        pass

    def user(self, text: str) -> None:
        self.emit("user", text)

    def assistant(self, text: str) -> None:
        self.emit("assistant", text)

    def candidate(self, text: str) -> None:
        self.emit("candidate", text)

    def notice(self, text: str) -> None:
        self.emit("notice", text)

    def error(self, text: str) -> None:
        self.emit("error", text)

    def output(self, text: str) -> None:
        self.emit("output", text)

    def transcript(self, text: str) -> None:
        self.emit("transcript", text)


class ConsoleReporter(Reporter):
    """Write transcript events as plain prefixed lines."""

    PREFIXES = {
        "user": "You: ",
        "assistant": "Assistant: ",
        "candidate": "Command:\n  ",
        "notice": "[*] ",
        "error": "[!] ",
        "output": "",
        "transcript": "Heard: ",
    }

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def emit(self, kind: str, text: str) -> None:
        stream = self.stream or sys.stdout
        prefix = self.PREFIXES.get(kind, "")
        if kind == "candidate":
            text = text.replace("\n", "\n  ")
        print(f"{prefix}{text}", file=stream, flush=True)


class RecordingReporter(Reporter):
    """Keep transcript events in memory (scripted runs and tests)."""

    def __init__(self, echo: Reporter | None = None):
        self.events: list[tuple[str, str]] = []
        self.echo = echo

    def emit(self, kind: str, text: str) -> None:
        self.events.append((kind, text))
        if self.echo is not None:
            self.echo.emit(kind, text)

    def texts(self, kind: str) -> list[str]:
        return [text for event_kind, text in self.events if event_kind == kind]


class SpeakingReporter(Reporter):
    """Echo notices and errors through a speaker in addition to the wrapped reporter."""

    SPOKEN_KINDS = {"notice", "error"}

    def __init__(self, inner: Reporter, speaker: "Speaker"):
        self.inner = inner
        self.speaker = speaker

    def emit(self, kind: str, text: str) -> None:
        self.inner.emit(kind, text)
        if kind in self.SPOKEN_KINDS:
            try:
                self.speaker.speak(text)
            except Exception as e:
                # Speech output is best-effort
                logger.warning("Speech output failed: %s", e)
