"""Microphone capture through an external recording tool.

Supported tools, in preference order: arecord (ALSA), sox, ffmpeg. The first
one found on PATH is used unless a tool is named explicitly.
"""

import logging
import math
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

from shellpal.errors import PrerequisiteMissing, TranscriptionError

logger = logging.getLogger(__name__)

SUPPORTED_TOOLS = ["arecord", "sox", "ffmpeg"]
SAMPLE_RATE = 16000


def find_recording_tool(preferred: str | None = None) -> str:
    """Locate an audio recording tool.

    Args:
        preferred: Tool name to require instead of auto-detection

    Returns:
        Name of the tool to use

    Raises:
        PrerequisiteMissing: If no supported tool is installed
    """
    candidates = [preferred] if preferred else SUPPORTED_TOOLS
    for tool in candidates:
        if shutil.which(tool):
            return tool
    raise PrerequisiteMissing(
        preferred or " / ".join(SUPPORTED_TOOLS),
        "Install one of them to use voice mode (e.g. 'apt install alsa-utils').",
    )


def build_record_command(tool: str, path: str, seconds: float, device: str | None = None) -> list[str]:
    """Build the argv that records `seconds` of 16 kHz mono WAV into path."""
    if tool == "arecord":
        argv = ["arecord", "-q", "-f", "S16_LE", "-r", str(SAMPLE_RATE), "-c", "1"]
        argv += ["-d", str(max(1, math.ceil(seconds)))]
        if device:
            argv += ["-D", device]
        return argv + [path]

    if tool == "sox":
        # sox reads the device from AUDIODEV; see AudioRecorder.record
        return [
            "sox", "-q", "-d", "-r", str(SAMPLE_RATE), "-c", "1", "-b", "16",
            path, "trim", "0", f"{seconds:g}",
        ]

    if tool == "ffmpeg":
        if sys.platform == "darwin":
            source = ["-f", "avfoundation", "-i", f":{device or '0'}"]
        elif os.name == "nt":
            source = ["-f", "dshow", "-i", f"audio={device or 'default'}"]
        else:
            source = ["-f", "alsa", "-i", device or "default"]
        return (
            ["ffmpeg", "-loglevel", "error", "-y"]
            + source
            + ["-t", f"{seconds:g}", "-ac", "1", "-ar", str(SAMPLE_RATE), path]
        )

    raise ValueError(f"Unsupported recording tool: {tool}")


class AudioRecorder:
    """Record fixed-length WAV clips with an external tool."""

    def __init__(self, tool: str | None = None):
        """Initialize the recorder.

        Args:
            tool: Recording tool to use (auto-detected when None)
        """
        self.tool = tool

    def record(self, seconds: float, device: str | None = None) -> bytes:
        """Record audio from the microphone.

        Args:
            seconds: Capture length
            device: Optional input device name

        Returns:
            WAV file bytes

        Raises:
            PrerequisiteMissing: If no recording tool is installed
            TranscriptionError: If the tool fails or produces no audio
        """
        if seconds <= 0:
            raise ValueError("Capture length must be positive")

        tool = find_recording_tool(self.tool)

        fd, path = tempfile.mkstemp(suffix=".wav", prefix="shellpal-")
        os.close(fd)
        try:
            argv = build_record_command(tool, path, seconds, device)
            env = os.environ.copy()
            if tool == "sox" and device:
                env["AUDIODEV"] = device

            logger.debug("Recording %.1fs with %s", seconds, tool)
            try:
                result = subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    timeout=seconds + 10,
                    env=env,
                )
            except subprocess.TimeoutExpired as e:
                raise TranscriptionError(f"{tool} did not finish recording in time") from e
            except OSError as e:
                raise TranscriptionError(f"Failed to start {tool}: {e}") from e

            if result.returncode != 0:
                raise TranscriptionError(
                    f"{tool} exited with code {result.returncode}: {result.stderr.strip()[:200]}"
                )

            audio = Path(path).read_bytes()
            if not audio:
                raise TranscriptionError(f"{tool} produced no audio")
            return audio
        finally:
            try:
                os.unlink(path)
            except OSError as e:
                logger.warning("Could not remove temp recording %s: %s", path, e)
