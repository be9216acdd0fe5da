"""Deterministic replay of a prompt list through the conversation turn logic."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from shellpal.chat import ChatProvider
from shellpal.commands.confirmation import ConfirmationGate, GateMode
from shellpal.commands.intent_classifier import IntentClassifier
from shellpal.console import RecordingReporter, Reporter
from shellpal.execution import CommandExecutor
from shellpal.logging_utils import log_info
from shellpal.models import Message, SessionState
from shellpal.prompts import CONVERSATION_PROMPT
from shellpal.sessions.conversation import ConversationSession

logger = logging.getLogger(__name__)

SIMULATED_NEGATIVE = "no"


@dataclass
class ScriptedRunResult:
    """Summary of a scripted run."""

    final_state: SessionState
    prompts_consumed: int
    backend_calls: int
    executed: list[str] = field(default_factory=list)
    simulated_negative: bool = False
    history: list[Message] = field(default_factory=list)


class ScriptedRunner:
    """Replay prompts with AUTO_EXECUTE forced; no human in the loop."""

    def __init__(
        self,
        chat_provider: ChatProvider,
        executor: CommandExecutor,
        reporter: Reporter | None = None,
        simulate_negative: bool = False,
        classifier: IntentClassifier | None = None,
        system_prompt: str = CONVERSATION_PROMPT,
    ) -> None:
        """Initialize the runner.

        Args:
            chat_provider: Chat backend
            executor: Runs every extracted candidate
            reporter: Transcript reporter (defaults to an in-memory recorder)
            simulate_negative: Answer "no" right after an invite to continue
            classifier: Intent classifier (defaults to the built-in tables)
            system_prompt: Preamble sent with every request
        """
        self.chat_provider = chat_provider
        self.executor = executor
        self.reporter = reporter or RecordingReporter()
        self.simulate_negative = simulate_negative
        self.classifier = classifier
        self.system_prompt = system_prompt

    def run(self, prompts: Iterable[str]) -> ScriptedRunResult:
        gate = ConfirmationGate(self.executor, self.reporter)
        session = ConversationSession(
            self.chat_provider,
            gate,
            self.reporter,
            classifier=self.classifier,
            system_prompt=self.system_prompt,
            mode=GateMode.AUTO_EXECUTE,
        )

        consumed = 0
        simulated = False
        for prompt in prompts:
            if session.terminated:
                break
            consumed += 1
            self.reporter.user(prompt)

            pending: str | None = prompt
            while pending is not None and not session.terminated:
                pending = session.step(pending)

            if self.simulate_negative and session.awaiting_more and not session.terminated:
                self.reporter.user(SIMULATED_NEGATIVE)
                session.step(SIMULATED_NEGATIVE)
                simulated = True

        session.terminate("script finished")
        log_info(
            logger,
            "Scripted run finished",
            prompts=consumed,
            backend_calls=session.backend_calls,
            executed=len(session.outcomes),
        )

        return ScriptedRunResult(
            final_state=session.state,
            prompts_consumed=consumed,
            backend_calls=session.backend_calls,
            executed=[outcome.command for outcome in session.outcomes],
            simulated_negative=simulated,
            history=session.history.messages(),
        )
