"""Speech synthesis backends used by the voice session's Speaker."""

from abc import ABC, abstractmethod

from shellpal.errors import TransportError

# Speaker writes every clip to a .wav file for the external player
SPEECH_FORMAT = "wav"
SPEECH_CONTENT_TYPE = "audio/wav"


class TTSProvider(ABC):
    """Turns assistant notices and replies into audio clips."""

    name: str = "base"

    @abstractmethod
    def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = SPEECH_FORMAT,
    ) -> tuple[bytes, str]:
        """Render text as an audio clip.

        Args:
            text: Text to speak; never empty
            voice: Provider voice name, or None for the provider default
            format: Requested container; unsupported values fall back to wav

        Returns:
            Tuple of (audio_bytes, content_type)

        Raises:
            ValueError: If text is empty
            TransportError: If the backend call fails
        """

    def speech_clip(self, text: str, voice: str | None = None) -> bytes:
        """Synthesize a wav clip ready for playback.

        Raises:
            TransportError: If synthesis fails or the clip is not wav
        """
        audio, content_type = self.synthesize(text, voice=voice, format=SPEECH_FORMAT)
        if content_type != SPEECH_CONTENT_TYPE:
            raise TransportError(
                f"{self.name} TTS returned {content_type}, expected {SPEECH_CONTENT_TYPE}"
            )
        return audio
