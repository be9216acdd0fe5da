"""Error taxonomy for shellpal.

Transport and transcription errors are recovered by the session loops,
execution errors are caught per attempt, and a missing prerequisite ends a
voice session. Only configuration errors surface at process level.
"""


class ShellpalError(Exception):
    """Base class for all shellpal errors."""


class TransportError(ShellpalError):
    """A chat, transcription or speech backend was unreachable or rejected the request."""


class TranscriptionError(ShellpalError):
    """Audio capture or decoding failed."""


class ExecutionError(ShellpalError):
    """A candidate command could not be run."""


class PrerequisiteMissing(ShellpalError):
    """A required external tool (e.g. an audio recorder) is not installed."""

    def __init__(self, tool: str, hint: str | None = None):
        self.tool = tool
        self.hint = hint
        message = f"Required tool not found: {tool}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ConfigError(ShellpalError):
    """Configuration file or environment values are invalid."""
