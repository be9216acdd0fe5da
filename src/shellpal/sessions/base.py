"""State and turn plumbing shared by the session loops."""

import logging

from shellpal.chat import ChatProvider
from shellpal.commands.confirmation import (
    ConfirmationGate,
    ConfirmationResult,
    GateMode,
    TokenSource,
)
from shellpal.commands.extractor import CommandCandidate
from shellpal.commands.intent_classifier import IntentClassifier
from shellpal.console import Reporter
from shellpal.errors import TransportError
from shellpal.execution import ExecutionOutcome
from shellpal.logging_utils import log_debug, log_info, log_warning
from shellpal.models import Message, SessionState

logger = logging.getLogger(__name__)

NO_RESPONSE_NOTICE = "No response from the assistant. Try again."


class SessionBase:
    """Owns the session state, the chat call and the confirm/execute step."""

    def __init__(
        self,
        chat_provider: ChatProvider,
        gate: ConfirmationGate,
        reporter: Reporter,
        classifier: IntentClassifier | None = None,
        mode: GateMode = GateMode.INTERACTIVE,
    ) -> None:
        self.chat_provider = chat_provider
        self.gate = gate
        self.reporter = reporter
        self.classifier = classifier or IntentClassifier()
        self.mode = mode
        self.state = SessionState.LISTENING
        self.transitions: list[SessionState] = [SessionState.LISTENING]
        self.backend_calls = 0
        self.outcomes: list[ExecutionOutcome] = []

    @property
    def terminated(self) -> bool:
        return self.state is SessionState.TERMINATED

    def _set_state(self, state: SessionState) -> None:
        if self.state is SessionState.TERMINATED:
            raise RuntimeError("Session already terminated")
        if state is not self.state:
            log_debug(logger, "Session state change", old=self.state.value, new=state.value)
            self.state = state
            self.transitions.append(state)

    def terminate(self, reason: str) -> None:
        if self.terminated:
            return
        log_info(logger, "Session terminated", reason=reason)
        self._set_state(SessionState.TERMINATED)

    def _send(self, messages: list[Message], system_prompt: str | None) -> str | None:
        """Call the chat backend; transport failures count as no reply."""
        if self.terminated:
            raise RuntimeError("No backend calls after termination")

        self.backend_calls += 1
        try:
            return self.chat_provider.invoke(messages, system_prompt)
        except TransportError as e:
            log_warning(logger, "Chat backend error", error=e)
            self.reporter.error(str(e))
            return None

    def _confirm(
        self, candidate: CommandCandidate, token_source: TokenSource | None = None
    ) -> ConfirmationResult:
        """Run the confirmation step and, on Yes, the command.

        Gate notices go through the session reporter. Leaves the session in
        LISTENING afterwards.
        """
        self._set_state(SessionState.AWAITING_CONFIRMATION)
        result = self.gate.decide(candidate, self.mode, token_source, self.reporter)

        if result.is_yes:
            self._set_state(SessionState.EXECUTING)
            result.outcome = self.gate.execute(candidate, self.reporter)
            self.outcomes.append(result.outcome)

        self._set_state(SessionState.LISTENING)
        return result
