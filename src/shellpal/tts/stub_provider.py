"""Stub TTS provider for offline use and testing."""

import struct

from shellpal.tts.provider import SPEECH_CONTENT_TYPE, SPEECH_FORMAT, TTSProvider


class StubTTSProvider(TTSProvider):
    """Stub TTS provider that returns a short silent WAV clip.

    Duration scales with text length so callers see realistic sizes.
    """

    name = "stub"

    def __init__(self) -> None:
        self.spoken: list[str] = []

    def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = SPEECH_FORMAT,
    ) -> tuple[bytes, str]:
        self.spoken.append(text)
        return self._generate_wav(text), SPEECH_CONTENT_TYPE

    def _generate_wav(self, text: str) -> bytes:
        """Generate a minimal valid WAV file containing silence."""
        # ~13 characters per second of speech
        duration_tenths = max(1, len(text) * 10 // 13)
        sample_rate = 8000
        num_channels = 1
        bits_per_sample = 16
        num_samples = duration_tenths * sample_rate // 10

        audio_data = bytes(num_samples * num_channels * (bits_per_sample // 8))
        subchunk2_size = len(audio_data)

        header = struct.pack(
            "<4sI4s4sIHHIIHH4sI",
            b"RIFF",
            36 + subchunk2_size,
            b"WAVE",
            b"fmt ",
            16,  # PCM
            1,
            num_channels,
            sample_rate,
            sample_rate * num_channels * (bits_per_sample // 8),
            num_channels * (bits_per_sample // 8),
            bits_per_sample,
            b"data",
            subchunk2_size,
        )
        return header + audio_data
