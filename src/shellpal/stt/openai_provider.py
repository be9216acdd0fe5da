"""OpenAI Whisper STT provider implementation.

This provider uses OpenAI's Whisper API for speech-to-text transcription.
It requires an API key to be configured.
"""

import io
import logging
import os
import time
from typing import Any

import openai

from shellpal.errors import TranscriptionError

logger = logging.getLogger(__name__)


class OpenAISTTProvider:
    """OpenAI Whisper STT provider with timeouts, retries, and error handling."""

    # https://platform.openai.com/docs/guides/speech-to-text
    SUPPORTED_FORMATS = ["wav", "m4a", "mp3", "opus", "flac", "webm"]

    # Max file size: 25MB per OpenAI docs
    MAX_FILE_SIZE = 25 * 1024 * 1024

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        client: Any | None = None,
    ):
        """Initialize OpenAI STT provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Transcription model (defaults to OPENAI_STT_MODEL env var or whisper-1)
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts
            client: Pre-built client (tests)

        Raises:
            ValueError: If OpenAI API key is not configured
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if client is None and not self.api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required for OpenAI STT provider")

        self.client = client or openai.OpenAI(api_key=self.api_key, max_retries=0)
        self.model = model or os.environ.get("OPENAI_STT_MODEL", "whisper-1")
        self.timeout = float(os.environ.get("SHELLPAL_STT_TIMEOUT", str(timeout)))
        self.max_retries = max(1, int(os.environ.get("SHELLPAL_STT_MAX_RETRIES", str(max_retries))))
        self.retry_delay = 1.0

        logger.info(
            "Initialized OpenAI STT provider: model=%s, timeout=%s, max_retries=%s",
            self.model,
            self.timeout,
            self.max_retries,
        )

    def transcribe(self, audio_data: bytes, format: str) -> str:
        """Transcribe audio data to text using the Whisper API.

        Raises:
            ValueError: If audio format is unsupported or audio data is invalid
            TranscriptionError: If transcription fails after retries
        """
        if not audio_data:
            raise ValueError("Audio data cannot be empty")

        if len(audio_data) > self.MAX_FILE_SIZE:
            raise ValueError(
                f"Audio file too large: {len(audio_data)} bytes. "
                f"Maximum is {self.MAX_FILE_SIZE} bytes (25MB)."
            )

        if format not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported audio format: {format}. "
                f"Supported formats: {', '.join(self.SUPPORTED_FORMATS)}"
            )

        last_error: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                response = self.client.audio.transcriptions.create(
                    model=self.model,
                    file=(f"capture.{format}", io.BytesIO(audio_data)),
                    response_format="text",
                    timeout=self.timeout,
                )
                transcript = response.strip() if isinstance(response, str) else str(response).strip()
                logger.info(
                    "Transcribed audio (attempt %d): length=%d chars",
                    attempt + 1,
                    len(transcript),
                )
                return transcript
            except openai.OpenAIError as e:
                last_error = e
                logger.warning(
                    "OpenAI STT transcription failed (attempt %d/%d): %s",
                    attempt + 1,
                    self.max_retries,
                    e,
                )
                if attempt < self.max_retries - 1:
                    backoff_delay = min(self.retry_delay * (2**attempt), 30.0)
                    time.sleep(backoff_delay)

        error_msg = f"Audio transcription failed after {self.max_retries} attempts"
        logger.error("%s. Last error: %s", error_msg, last_error)
        raise TranscriptionError(error_msg) from last_error
