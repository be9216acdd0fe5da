"""Multi-turn text conversation session."""

import logging
from collections.abc import Callable

from shellpal.chat import ChatProvider
from shellpal.commands.confirmation import ConfirmationGate, GateMode, TokenSource
from shellpal.commands.extractor import CommandCandidate, extract
from shellpal.commands.intent_classifier import IntentClassifier
from shellpal.console import Reporter
from shellpal.logging_utils import log_info
from shellpal.models import ConversationHistory, Role, SessionState
from shellpal.prompts import CONVERSATION_PROMPT
from shellpal.sessions.base import NO_RESPONSE_NOTICE, SessionBase

logger = logging.getLogger(__name__)


class ConversationSession(SessionBase):
    """Text chat state machine.

    Each user utterance is checked for exit intent, sent with the full
    history, and the reply's candidate command is passed through the
    confirmation gate. A short negative reply right after the assistant
    offered more help ends the session without another backend call.
    """

    def __init__(
        self,
        chat_provider: ChatProvider,
        gate: ConfirmationGate,
        reporter: Reporter,
        classifier: IntentClassifier | None = None,
        system_prompt: str = CONVERSATION_PROMPT,
        mode: GateMode = GateMode.INTERACTIVE,
        token_source: TokenSource | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            chat_provider: Chat backend
            gate: Confirmation gate (owns the executor)
            reporter: Transcript reporter
            classifier: Intent classifier (defaults to the built-in tables)
            system_prompt: Preamble sent with every request
            mode: Gate mode for every candidate
            token_source: Confirmation token source (defaults to the gate's)
        """
        super().__init__(chat_provider, gate, reporter, classifier, mode)
        self.system_prompt = system_prompt
        self.token_source = token_source
        self.history = ConversationHistory()
        self.awaiting_more = False

    def listen(self, text: str) -> CommandCandidate | None:
        """Handle one user utterance in the LISTENING state.

        Returns:
            The candidate command awaiting confirmation, or None if the
            session ended or no reply arrived
        """
        if self.terminated:
            return None

        text = text.strip()
        if not text:
            return None

        if self.classifier.is_exit(text):
            self.terminate("exit intent")
            return None

        awaiting_more, self.awaiting_more = self.awaiting_more, False
        if awaiting_more and self.classifier.is_negative(text):
            self.terminate("declined further help")
            return None

        self.history.append(Role.USER, text)
        reply = self._send(self.history.messages(), self.system_prompt)
        if reply is None:
            self.reporter.notice(NO_RESPONSE_NOTICE)
            return None

        self.history.append(Role.ASSISTANT, reply)
        self.reporter.assistant(reply)
        self.awaiting_more = self.classifier.is_invite_to_continue(reply)

        return extract(reply)

    def step(self, text: str) -> str | None:
        """Run one full turn for an utterance.

        Returns:
            Text to handle next without reading new input (a reinterpreted
            confirmation token), or None
        """
        candidate = self.listen(text)
        if candidate is None:
            return None

        result = self._confirm(candidate, self.token_source)
        if result.is_reinterpret:
            log_info(logger, "Confirmation token treated as new request")
            return result.text
        return None

    def run(self, read_utterance: Callable[[], str | None]) -> SessionState:
        """Loop until exit intent or end of input.

        Args:
            read_utterance: Returns the next user utterance, or None at end of input

        Returns:
            Final session state (always TERMINATED)
        """
        pending: str | None = None
        try:
            while not self.terminated:
                if pending is None:
                    pending = read_utterance()
                    if pending is None:
                        self.terminate("end of input")
                        break
                pending = self.step(pending)
        except KeyboardInterrupt:
            self.reporter.notice("Interrupted.")
            self.terminate("interrupted")

        return self.state
