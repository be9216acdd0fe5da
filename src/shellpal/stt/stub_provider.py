"""Stub STT provider that returns deterministic transcripts for testing.

This is the default implementation used in tests and offline demos.
It doesn't require any external dependencies or API keys.
"""

import logging
from collections import deque
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPTS = ["list files", "show running processes", "what time is it"]


class StubSTTProvider:
    """Stub STT provider.

    Returns scripted transcripts in order when given; otherwise picks one of
    a few fixed commands from the audio length so results are repeatable.
    """

    SUPPORTED_FORMATS = ["wav", "m4a", "mp3", "opus"]

    def __init__(self, transcripts: Iterable[str] | None = None, enabled: bool = True):
        """Initialize stub STT provider.

        Args:
            transcripts: Optional scripted transcripts ("" simulates silence)
            enabled: Whether STT is enabled. If False, raises NotImplementedError.
        """
        self.transcripts: deque[str] | None = (
            deque(transcripts) if transcripts is not None else None
        )
        self.enabled = enabled

    def transcribe(self, audio_data: bytes, format: str) -> str:
        """Return a deterministic transcript.

        Raises:
            NotImplementedError: If STT is disabled
            ValueError: If format is unsupported
        """
        if not self.enabled:
            raise NotImplementedError(
                "Speech-to-text is disabled. Set SHELLPAL_STT_PROVIDER to enable it."
            )

        if format not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported audio format: {format}. "
                f"Supported formats: {', '.join(self.SUPPORTED_FORMATS)}"
            )

        if self.transcripts is not None:
            return self.transcripts.popleft() if self.transcripts else ""

        return DEFAULT_TRANSCRIPTS[len(audio_data) % len(DEFAULT_TRANSCRIPTS)]
