"""Session loops: text conversation, voice, and scripted replay."""

from .conversation import ConversationSession
from .scripted import ScriptedRunner, ScriptedRunResult
from .voice import VoiceSessionController, VoiceVariant

__all__ = [
    "ConversationSession",
    "ScriptedRunner",
    "ScriptedRunResult",
    "VoiceSessionController",
    "VoiceVariant",
]
