"""Intent classifier for exit, invite-to-continue and negative utterances."""

import re
from enum import Enum

from shellpal.models import Role


class IntentLabel(str, Enum):
    """Classification output for a single utterance."""

    EXIT = "exit"
    INVITE_CONTINUE = "invite_continue"
    NEGATIVE = "negative"
    NONE = "none"


# Pattern tables: (regex, label). Order matters only within a table.
EXIT_PATTERNS: list[tuple[re.Pattern[str], IntentLabel]] = [
    (re.compile(r"^\s*(exit|quit|quite|q)\b", re.IGNORECASE), IntentLabel.EXIT),
    (re.compile(r"^\s*(bye|goodbye)\b", re.IGNORECASE), IntentLabel.EXIT),
    (re.compile(r"^\s*(end|stop|close|terminate)\b", re.IGNORECASE), IntentLabel.EXIT),
    (
        re.compile(r"\b(close|end)\s+(the\s+)?(session|chat)\b", re.IGNORECASE),
        IntentLabel.EXIT,
    ),
    (re.compile(r"\b(session|chat)\s+(close|end)\b", re.IGNORECASE), IntentLabel.EXIT),
    (re.compile(r"thank(s|\s?you)?", re.IGNORECASE), IntentLabel.EXIT),
]

INVITE_PATTERNS: list[tuple[re.Pattern[str], IntentLabel]] = [
    (re.compile(r"\banything\s+else\b", re.IGNORECASE), IntentLabel.INVITE_CONTINUE),
    (re.compile(r"\blet\s+me\s+know\s+if\b", re.IGNORECASE), IntentLabel.INVITE_CONTINUE),
    (
        re.compile(r"\bany\s+other\s+questions?\b", re.IGNORECASE),
        IntentLabel.INVITE_CONTINUE,
    ),
    (re.compile(r"\bis\s+there\s+anything\b", re.IGNORECASE), IntentLabel.INVITE_CONTINUE),
    (re.compile(r"\bwhat\s+else\s+can\s+i\b", re.IGNORECASE), IntentLabel.INVITE_CONTINUE),
    (
        re.compile(r"\bcan\s+i\s+help\s+(you\s+)?with\s+anything\b", re.IGNORECASE),
        IntentLabel.INVITE_CONTINUE,
    ),
    (re.compile(r"\bfeel\s+free\s+to\s+ask\b", re.IGNORECASE), IntentLabel.INVITE_CONTINUE),
    (
        re.compile(r"\bwant\s+me\s+to\s+do\s+anything\b", re.IGNORECASE),
        IntentLabel.INVITE_CONTINUE,
    ),
]

# Anchored at the start; must be followed by end of string, punctuation or space.
_NEGATIVE_TAIL = r"(?=$|[\s.,!?;:])"

NEGATIVE_PATTERNS: list[tuple[re.Pattern[str], IntentLabel]] = [
    (re.compile(r"^\s*no\s+thanks?" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*(no|nope|nah)" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*not\s+now" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*nothing" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*all\s+good" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*i'?m\s+good" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
    (re.compile(r"^\s*that'?s\s+all" + _NEGATIVE_TAIL, re.IGNORECASE), IntentLabel.NEGATIVE),
]


def _match_table(
    text: str | None, table: list[tuple[re.Pattern[str], IntentLabel]]
) -> IntentLabel:
    """Return the label of the first pattern in table that matches text."""
    if not text or not text.strip():
        return IntentLabel.NONE

    for pattern, label in table:
        if pattern.search(text):
            return label

    return IntentLabel.NONE


def classify_exit(text: str | None) -> bool:
    """Check whether a user utterance asks to end the session.

    Sign-offs such as "thanks!" count as exit signals.
    """
    return _match_table(text, EXIT_PATTERNS) is IntentLabel.EXIT


def classify_invite_to_continue(text: str | None) -> bool:
    """Check whether assistant text offers to keep the conversation going."""
    return _match_table(text, INVITE_PATTERNS) is IntentLabel.INVITE_CONTINUE


def classify_negative(text: str | None) -> bool:
    """Check whether a user utterance is a short negative reply."""
    return _match_table(text, NEGATIVE_PATTERNS) is IntentLabel.NEGATIVE


class IntentClassifier:
    """Classify utterances using the pattern tables above.

    Tables can be extended per instance without touching the session loops.
    """

    def __init__(
        self,
        exit_patterns: list[tuple[re.Pattern[str], IntentLabel]] | None = None,
        invite_patterns: list[tuple[re.Pattern[str], IntentLabel]] | None = None,
        negative_patterns: list[tuple[re.Pattern[str], IntentLabel]] | None = None,
    ) -> None:
        self.exit_patterns = list(exit_patterns if exit_patterns is not None else EXIT_PATTERNS)
        self.invite_patterns = list(
            invite_patterns if invite_patterns is not None else INVITE_PATTERNS
        )
        self.negative_patterns = list(
            negative_patterns if negative_patterns is not None else NEGATIVE_PATTERNS
        )

    def is_exit(self, text: str | None) -> bool:
        return _match_table(text, self.exit_patterns) is IntentLabel.EXIT

    def is_invite_to_continue(self, text: str | None) -> bool:
        return _match_table(text, self.invite_patterns) is IntentLabel.INVITE_CONTINUE

    def is_negative(self, text: str | None) -> bool:
        return _match_table(text, self.negative_patterns) is IntentLabel.NEGATIVE

    def classify(self, text: str | None, author: Role = Role.USER) -> IntentLabel:
        """Return the first applicable label for text written by author.

        Args:
            text: Utterance to classify
            author: Role of the author; invite phrases only apply to assistant text

        Returns:
            The matching IntentLabel, or IntentLabel.NONE
        """
        if author is Role.ASSISTANT:
            if self.is_invite_to_continue(text):
                return IntentLabel.INVITE_CONTINUE
            return IntentLabel.NONE

        if self.is_exit(text):
            return IntentLabel.EXIT
        if self.is_negative(text):
            return IntentLabel.NEGATIVE
        return IntentLabel.NONE
