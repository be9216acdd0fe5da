"""OpenAI TTS provider implementation.

This provider uses OpenAI's Text-to-Speech API for speech synthesis.
It requires an API key to be configured.
"""

import logging
import os
from typing import Any

import openai

from shellpal.errors import TransportError
from shellpal.tts.provider import SPEECH_CONTENT_TYPE, SPEECH_FORMAT, TTSProvider

logger = logging.getLogger(__name__)


class OpenAITTSProvider(TTSProvider):
    """OpenAI TTS provider with error handling."""

    name = "openai"

    # https://platform.openai.com/docs/guides/text-to-speech
    SUPPORTED_FORMATS = ["mp3", "opus", "aac", "flac", "wav", "pcm"]

    AVAILABLE_VOICES = ["alloy", "echo", "fable", "onyx", "nova", "shimmer"]

    CONTENT_TYPES = {
        "mp3": "audio/mpeg",
        "opus": "audio/opus",
        "aac": "audio/aac",
        "flac": "audio/flac",
        "wav": "audio/wav",
        "pcm": "audio/pcm",
    }

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        voice: str | None = None,
        timeout: float = 30.0,
        client: Any | None = None,
    ):
        """Initialize OpenAI TTS provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: TTS model (defaults to OPENAI_TTS_MODEL env var or "tts-1")
            voice: Default voice (defaults to OPENAI_TTS_VOICE env var or "alloy")
            timeout: Request timeout in seconds
            client: Pre-built client (tests)

        Raises:
            ValueError: If OpenAI API key is not configured
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if client is None and not self.api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required for OpenAI TTS provider")

        self.client = client or openai.OpenAI(api_key=self.api_key)
        self.model = model or os.environ.get("OPENAI_TTS_MODEL", "tts-1")
        self.timeout = timeout
        self.default_voice = voice or os.environ.get("OPENAI_TTS_VOICE", "alloy")

        logger.info(
            "Initialized OpenAI TTS provider: model=%s, default_voice=%s, timeout=%s",
            self.model,
            self.default_voice,
            self.timeout,
        )

    def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = SPEECH_FORMAT,
    ) -> tuple[bytes, str]:
        """Synthesize speech from text using the OpenAI TTS API.

        Raises:
            ValueError: If text is empty
            TransportError: If synthesis fails
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        format_lower = format.lower()
        if format_lower not in self.SUPPORTED_FORMATS:
            logger.warning("Unsupported format '%s', falling back to '%s'", format, SPEECH_FORMAT)
            format_lower = SPEECH_FORMAT

        selected_voice = voice or self.default_voice
        if selected_voice not in self.AVAILABLE_VOICES:
            logger.warning(
                "Unknown voice '%s', using 'alloy'. Available: %s",
                selected_voice,
                ", ".join(self.AVAILABLE_VOICES),
            )
            selected_voice = "alloy"

        try:
            response = self.client.audio.speech.create(
                model=self.model,
                voice=selected_voice,
                input=text,
                response_format=format_lower,
                timeout=self.timeout,
            )
        except openai.OpenAIError as e:
            logger.error("TTS synthesis failed: %s", e)
            raise TransportError(f"TTS synthesis failed: {e}") from e

        return response.content, self.CONTENT_TYPES.get(format_lower, SPEECH_CONTENT_TYPE)
