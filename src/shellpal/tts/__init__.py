"""Text-to-speech output for the full voice variant."""

import logging
import os
import shutil
import subprocess
import tempfile

from shellpal.config import TTSConfig
from shellpal.tts.provider import TTSProvider
from shellpal.tts.stub_provider import StubTTSProvider

logger = logging.getLogger(__name__)

__all__ = ["TTSProvider", "StubTTSProvider", "Speaker", "get_tts_provider"]

# (player, extra args) tried in order
AUDIO_PLAYERS = [
    ("paplay", []),
    ("aplay", ["-q"]),
    ("afplay", []),
    ("ffplay", ["-nodisp", "-autoexit", "-loglevel", "quiet"]),
]


def get_tts_provider(config: TTSConfig, api_key: str | None = None) -> TTSProvider:
    """Get the configured TTS provider.

    Falls back to the stub provider when the OpenAI provider cannot be
    initialized.

    Args:
        config: TTS configuration
        api_key: OpenAI API key

    Returns:
        A TTSProvider instance
    """
    provider_type = config.provider.lower()

    if provider_type == "stub":
        return StubTTSProvider()
    elif provider_type == "openai":
        try:
            from shellpal.tts.openai_provider import OpenAITTSProvider

            return OpenAITTSProvider(api_key=api_key, model=config.model, voice=config.voice)
        except ValueError as e:
            logger.error("Failed to initialize OpenAI TTS provider: %s", e)
            logger.warning("Falling back to stub TTS provider")
            return StubTTSProvider()
    else:
        logger.warning("Unknown TTS provider '%s', falling back to stub", provider_type)
        return StubTTSProvider()


def find_player() -> tuple[str, list[str]] | None:
    for player, args in AUDIO_PLAYERS:
        if shutil.which(player):
            return player, args
    return None


class Speaker:
    """Speak text through a TTS provider and an external audio player.

    Speech is best-effort: failures are logged, never raised.
    """

    def __init__(self, provider: TTSProvider, voice: str | None = None, play: bool = True):
        """Initialize the speaker.

        Args:
            provider: TTS provider used for synthesis
            voice: Voice identifier passed to the provider
            play: Whether to play audio (False only synthesizes)
        """
        self.provider = provider
        self.voice = voice
        self.play = play
        self._warned_no_player = False

    def speak(self, text: str) -> None:
        if not text or not text.strip():
            return

        try:
            audio = self.provider.speech_clip(text, voice=self.voice)
        except Exception as e:
            logger.warning("Speech synthesis failed: %s", e)
            return

        if not self.play:
            return

        player = find_player()
        if player is None:
            if not self._warned_no_player:
                logger.warning("No audio player found (tried %s)", ", ".join(p for p, _ in AUDIO_PLAYERS))
                self._warned_no_player = True
            return

        fd, path = tempfile.mkstemp(suffix=".wav", prefix="shellpal-tts-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(audio)
            name, args = player
            subprocess.run([name, *args, path], check=True, capture_output=True, timeout=60)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Audio playback failed: %s", e)
        finally:
            try:
                os.unlink(path)
            except OSError as e:
                logger.debug("Could not remove %s: %s", path, e)
