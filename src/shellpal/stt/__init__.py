"""Speech-to-Text (STT) layer.

A Transcriber couples an AudioRecorder (external capture tool) with an
STTProvider (Whisper or the offline stub).
"""

import logging
from typing import Protocol

from shellpal.config import STTConfig
from shellpal.errors import TranscriptionError
from shellpal.stt.recorder import AudioRecorder
from shellpal.stt.stub_provider import StubSTTProvider

logger = logging.getLogger(__name__)

__all__ = ["STTProvider", "StubSTTProvider", "Transcriber", "AudioRecorder", "get_stt_provider"]


class STTProvider(Protocol):
    """Protocol for STT providers."""

    def transcribe(self, audio_data: bytes, format: str) -> str:
        """Transcribe audio data to text.

        Args:
            audio_data: Raw audio data bytes
            format: Audio format (wav, m4a, mp3, opus)

        Returns:
            Transcribed text

        Raises:
            NotImplementedError: If STT is not enabled/available
            ValueError: If audio format is unsupported
        """
        ...


def get_stt_provider(config: STTConfig, api_key: str | None = None) -> STTProvider:
    """Get the configured STT provider.

    Falls back to the stub provider when the OpenAI provider cannot be
    initialized (e.g. no API key).

    Args:
        config: STT configuration
        api_key: OpenAI API key

    Returns:
        An STTProvider instance
    """
    provider_type = config.provider.lower()

    if provider_type == "stub":
        return StubSTTProvider()
    elif provider_type == "openai":
        try:
            from shellpal.stt.openai_provider import OpenAISTTProvider

            return OpenAISTTProvider(api_key=api_key, model=config.model)
        except ValueError as e:
            logger.error("Failed to initialize OpenAI STT provider: %s", e)
            logger.warning("Falling back to stub STT provider")
            return StubSTTProvider()
    else:
        logger.warning("Unknown STT provider '%s', falling back to stub", provider_type)
        return StubSTTProvider()


class Transcriber:
    """Capture audio for a fixed window and transcribe it."""

    def __init__(self, recorder: AudioRecorder, provider: STTProvider, format: str = "wav"):
        self.recorder = recorder
        self.provider = provider
        self.format = format

    def transcribe(self, seconds: float, device: str | None = None) -> str | None:
        """Record and transcribe.

        Args:
            seconds: Capture window
            device: Optional input device name

        Returns:
            Transcript, or None when nothing was said

        Raises:
            PrerequisiteMissing: If no recording tool is installed
            TranscriptionError: If capture or decoding fails
        """
        audio = self.recorder.record(seconds, device=device)
        try:
            text = self.provider.transcribe(audio, self.format)
        except TranscriptionError:
            raise
        except (ValueError, NotImplementedError, RuntimeError) as e:
            raise TranscriptionError(str(e)) from e

        text = (text or "").strip()
        return text or None
