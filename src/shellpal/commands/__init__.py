"""Command mediation core.

This module implements:
- Intent classification of utterances (exit, invite-to-continue, negative)
- Command extraction from free-form model replies
- The confirmation gate for candidate commands
"""

from .confirmation import (
    ConfirmationGate,
    ConfirmationResult,
    ConsoleTokenSource,
    GateMode,
    ReinterpretPolicy,
    ScriptedTokenSource,
    VoiceTokenSource,
)
from .extractor import CommandCandidate, CommandExtractor, SourceKind, extract
from .intent_classifier import (
    IntentClassifier,
    IntentLabel,
    classify_exit,
    classify_invite_to_continue,
    classify_negative,
)

__all__ = [
    "CommandCandidate",
    "CommandExtractor",
    "ConfirmationGate",
    "ConfirmationResult",
    "ConsoleTokenSource",
    "GateMode",
    "IntentClassifier",
    "IntentLabel",
    "ReinterpretPolicy",
    "ScriptedTokenSource",
    "SourceKind",
    "VoiceTokenSource",
    "classify_exit",
    "classify_invite_to_continue",
    "classify_negative",
    "extract",
]
