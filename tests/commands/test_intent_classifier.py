"""Tests for the intent classifier."""

import re

import pytest

from shellpal.commands.intent_classifier import (
    IntentClassifier,
    IntentLabel,
    classify_exit,
    classify_invite_to_continue,
    classify_negative,
)
from shellpal.models import Role


@pytest.fixture
def classifier() -> IntentClassifier:
    """Create a classifier with the built-in tables."""
    return IntentClassifier()


class TestExitIntent:
    """Test exit classification."""

    @pytest.mark.parametrize(
        "text",
        [
            "exit",
            "quit",
            "quite",
            "q",
            "Q",
            "bye",
            "Goodbye!",
            "end",
            "stop",
            "close",
            "terminate",
            "  EXIT now",
            "please close the session",
            "end chat",
            "ok, session end",
            "chat close",
            "ok, thanks!",
            "thank you",
            "Thankyou so much",
        ],
    )
    def test_exit_phrases(self, text: str) -> None:
        """Test phrases that end the session."""
        assert classify_exit(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "list services",
            "show me the biggest files",
            "query the event log",
            "quickly list processes",
            "please stop the spooler service",
            "the weekend is near",
            "backend status",
        ],
    )
    def test_non_exit_phrases(self, text: str) -> None:
        """Test that ordinary requests are not exit signals."""
        assert classify_exit(text) is False

    @pytest.mark.parametrize("text", [None, "", "   ", "\n\t"])
    def test_empty_input(self, text) -> None:
        """Test that empty input is never an exit signal."""
        assert classify_exit(text) is False

    def test_start_anchored_words(self) -> None:
        """Test that bare exit words only count at the start."""
        assert classify_exit("stop") is True
        assert classify_exit("do not stop") is False
        assert classify_exit("bye for now") is True
        assert classify_exit("say bye") is False


class TestInviteToContinue:
    """Test invite-to-continue classification."""

    @pytest.mark.parametrize(
        "text",
        [
            "Done. Anything else?",
            "Let me know if you need more help.",
            "Any other questions?",
            "Is there anything you'd like to adjust?",
            "What else can I do for you?",
            "Can I help you with anything more?",
            "Feel free to ask for more.",
        ],
    )
    def test_invite_phrases(self, text: str) -> None:
        """Test assistant phrases offering to continue."""
        assert classify_invite_to_continue(text) is True

    def test_plain_reply(self) -> None:
        """Test that a plain command reply is not an invite."""
        assert classify_invite_to_continue("```\nGet-Process\n```") is False

    @pytest.mark.parametrize("text", [None, "", "  "])
    def test_empty_input(self, text) -> None:
        """Test that empty input is never an invite."""
        assert classify_invite_to_continue(text) is False


class TestNegative:
    """Test short negative reply classification."""

    @pytest.mark.parametrize(
        "text",
        [
            "no",
            "No.",
            "nope",
            "nah",
            "not now",
            "nothing",
            "all good",
            "I'm good",
            "im good",
            "that's all",
            "thats all, cheers",
            "no thanks",
            "No thank you",
        ],
    )
    def test_negative_phrases(self, text: str) -> None:
        """Test short negative replies."""
        assert classify_negative(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "now list the files",
            "nobody is logged in?",
            "notepad please",
            "show me nothing but errors",
            "is all good with the disk",
        ],
    )
    def test_non_negative(self, text: str) -> None:
        """Test that requests starting with similar words are not negatives."""
        assert classify_negative(text) is False

    @pytest.mark.parametrize("text", [None, "", " "])
    def test_empty_input(self, text) -> None:
        """Test that empty input is never negative."""
        assert classify_negative(text) is False


class TestIntentClassifier:
    """Test the classifier object."""

    def test_classify_user_text(self, classifier: IntentClassifier) -> None:
        """Test labels for user-authored text."""
        assert classifier.classify("bye") is IntentLabel.EXIT
        assert classifier.classify("nope") is IntentLabel.NEGATIVE
        assert classifier.classify("list services") is IntentLabel.NONE

    def test_invite_only_for_assistant(self, classifier: IntentClassifier) -> None:
        """Test that invite phrases only apply to assistant text."""
        text = "anything else?"
        assert classifier.classify(text, Role.ASSISTANT) is IntentLabel.INVITE_CONTINUE
        assert classifier.classify(text, Role.USER) is IntentLabel.NONE

    def test_extend_tables(self) -> None:
        """Test adding a pattern without touching the defaults."""
        custom = IntentClassifier()
        custom.exit_patterns.append((re.compile(r"^\s*adios\b", re.IGNORECASE), IntentLabel.EXIT))

        assert custom.is_exit("adios amigo") is True
        assert IntentClassifier().is_exit("adios amigo") is False
