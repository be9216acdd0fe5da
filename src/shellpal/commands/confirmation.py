"""Confirmation gate deciding whether a candidate command runs.

Execution only happens on an explicit Yes token, or when the caller sets
GateMode.AUTO_EXECUTE. Tokens that are neither yes nor no are, by default,
handed back as a Reinterpret result so the owning loop can treat them as a
new utterance.
"""

import logging
import os
import select
import sys
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TextIO

from shellpal.commands.extractor import CommandCandidate
from shellpal.console import Reporter
from shellpal.errors import ExecutionError, TranscriptionError, TransportError
from shellpal.execution import CommandExecutor, ExecutionOutcome
from shellpal.logging_utils import log_error, log_info

logger = logging.getLogger(__name__)


class GateMode(str, Enum):
    """How the gate decides on execution."""

    INTERACTIVE = "interactive"
    AUTO_EXECUTE = "auto_execute"
    DRY_RUN = "dry_run"


class ReinterpretPolicy(str, Enum):
    """What to do with a token that is neither yes nor no."""

    NEW_REQUEST = "new_request"
    REPROMPT = "reprompt"


class Confirmation(str, Enum):
    YES = "yes"
    NO = "no"
    REINTERPRET = "reinterpret"


@dataclass
class ConfirmationResult:
    """Tagged outcome of the confirmation step."""

    kind: Confirmation
    text: str | None = None
    outcome: ExecutionOutcome | None = None

    @classmethod
    def yes(cls) -> "ConfirmationResult":
        return cls(kind=Confirmation.YES)

    @classmethod
    def no(cls) -> "ConfirmationResult":
        return cls(kind=Confirmation.NO)

    @classmethod
    def reinterpret(cls, text: str) -> "ConfirmationResult":
        return cls(kind=Confirmation.REINTERPRET, text=text)

    @property
    def is_yes(self) -> bool:
        return self.kind is Confirmation.YES

    @property
    def is_no(self) -> bool:
        return self.kind is Confirmation.NO

    @property
    def is_reinterpret(self) -> bool:
        return self.kind is Confirmation.REINTERPRET


YES_TOKENS = {"y", "yes", "yeah", "sure", "run", "execute", "do it"}
NO_TOKENS = {"n", "no", "nope", "skip", "cancel"}


def normalize_token(token: str) -> str:
    """Lowercase, collapse whitespace and drop trailing punctuation."""
    return " ".join(token.strip().lower().split()).rstrip(".!?,;:")


def interpret_token(token: str | None) -> ConfirmationResult:
    """Map a raw confirmation token to Yes, No or Reinterpret.

    An absent or empty token counts as No.
    """
    if token is None or not token.strip():
        return ConfirmationResult.no()

    normalized = normalize_token(token)
    if normalized in YES_TOKENS:
        return ConfirmationResult.yes()
    if normalized in NO_TOKENS:
        return ConfirmationResult.no()
    return ConfirmationResult.reinterpret(token.strip())


class TokenSource(Protocol):
    """Protocol for confirmation token sources."""

    def read_token(self, prompt: str) -> str | None:
        """Read one confirmation token, or None if nothing was given."""
        ...


class Transcriber(Protocol):
    def transcribe(self, seconds: float, device: str | None = None) -> str | None: ...


class ConsoleTokenSource:
    """Read typed tokens from the terminal, optionally with a timeout."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.input_func = input_func
        self.stdin = stdin
        self.stdout = stdout

    def read_token(self, prompt: str, timeout: float | None = None) -> str | None:
        if timeout is None or os.name == "nt":
            try:
                return self.input_func(prompt)
            except EOFError:
                return None

        stdin = self.stdin or sys.stdin
        stdout = self.stdout or sys.stdout
        stdout.write(prompt)
        stdout.flush()
        ready, _, _ = select.select([stdin], [], [], timeout)
        if not ready:
            stdout.write("\n")
            return None
        line = stdin.readline()
        return line.rstrip("\n") if line else None


class VoiceTokenSource:
    """Offer a typed window first, then fall back to a short spoken capture."""

    MAX_CAPTURE_SECONDS = 3.0

    def __init__(
        self,
        typed: ConsoleTokenSource,
        transcriber: Transcriber,
        window_seconds: float = 3.0,
        capture_seconds: float = 3.0,
        device: str | None = None,
    ):
        self.typed = typed
        self.transcriber = transcriber
        self.window_seconds = window_seconds
        self.capture_seconds = min(capture_seconds, self.MAX_CAPTURE_SECONDS)
        self.device = device

    def read_token(self, prompt: str) -> str | None:
        token = self.typed.read_token(prompt, timeout=self.window_seconds)
        if token and token.strip():
            return token

        try:
            return self.transcriber.transcribe(self.capture_seconds, device=self.device)
        except (TranscriptionError, TransportError) as e:
            logger.warning("Spoken confirmation capture failed: %s", e)
            return None


class ScriptedTokenSource:
    """Return tokens from a fixed sequence; None once exhausted."""

    def __init__(self, tokens: Iterable[str | None]):
        self.tokens: deque[str | None] = deque(tokens)
        self.prompts: list[str] = []

    def read_token(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self.tokens:
            return None
        return self.tokens.popleft()


class ConfirmationGate:
    """Decide execute/skip/reinterpret for a candidate command."""

    DEFAULT_PROMPT = "Run this command? [y]es / [n]o, or say something else: "

    def __init__(
        self,
        executor: CommandExecutor,
        reporter: Reporter,
        token_source: TokenSource | None = None,
        reinterpret_policy: ReinterpretPolicy = ReinterpretPolicy.NEW_REQUEST,
        max_reprompts: int = 2,
        prompt: str = DEFAULT_PROMPT,
    ) -> None:
        """Initialize the gate.

        Args:
            executor: Backend that runs confirmed commands
            reporter: Transcript reporter
            token_source: Where INTERACTIVE mode reads tokens from
            reinterpret_policy: Handling of ambiguous tokens
            max_reprompts: Extra prompts allowed under ReinterpretPolicy.REPROMPT
            prompt: Prompt shown when reading a token
        """
        self.executor = executor
        self.reporter = reporter
        self.token_source = token_source
        self.reinterpret_policy = reinterpret_policy
        self.max_reprompts = max_reprompts
        self.prompt = prompt

    def gate_execute(
        self,
        candidate: CommandCandidate | None,
        mode: GateMode = GateMode.INTERACTIVE,
        token_source: TokenSource | None = None,
        reporter: Reporter | None = None,
    ) -> ConfirmationResult:
        """Confirm and possibly execute a candidate.

        Args:
            candidate: Command recovered from the reply
            mode: Gate mode chosen by the caller
            token_source: Overrides the gate's token source for this call
            reporter: Overrides the gate's reporter for this call

        Returns:
            ConfirmationResult; on Yes its outcome holds the execution result
        """
        result = self.decide(candidate, mode, token_source, reporter)
        if result.is_yes and candidate is not None:
            result.outcome = self.execute(candidate, reporter)
        return result

    def decide(
        self,
        candidate: CommandCandidate | None,
        mode: GateMode = GateMode.INTERACTIVE,
        token_source: TokenSource | None = None,
        reporter: Reporter | None = None,
    ) -> ConfirmationResult:
        """Show the candidate and decide Yes/No/Reinterpret without executing."""
        if candidate is None:
            return ConfirmationResult.no()

        reporter = reporter or self.reporter
        reporter.candidate(candidate.raw_text)

        if mode is GateMode.DRY_RUN:
            reporter.notice("Dry run: command not executed.")
            return ConfirmationResult.no()

        if mode is GateMode.AUTO_EXECUTE:
            return ConfirmationResult.yes()

        result = self._solicit(token_source or self.token_source, reporter)
        if result.is_no:
            reporter.notice("Skipped.")
        return result

    def execute(
        self, candidate: CommandCandidate, reporter: Reporter | None = None
    ) -> ExecutionOutcome:
        """Run a confirmed candidate, reporting success or failure.

        Never raises: execution errors are reported and returned in the outcome.
        """
        return self._run(candidate, reporter or self.reporter)

    def _solicit(
        self, token_source: TokenSource | None, reporter: Reporter
    ) -> ConfirmationResult:
        if token_source is None:
            # Nobody to ask: never execute without an explicit yes
            return ConfirmationResult.no()

        attempts = 0
        while True:
            result = interpret_token(token_source.read_token(self.prompt))
            if not result.is_reinterpret:
                return result
            if self.reinterpret_policy is ReinterpretPolicy.NEW_REQUEST:
                return result

            attempts += 1
            if attempts > self.max_reprompts:
                return ConfirmationResult.no()
            reporter.notice("Please answer yes or no.")

    def _run(self, candidate: CommandCandidate, reporter: Reporter) -> ExecutionOutcome:
        log_info(logger, "Running confirmed command", source=candidate.source_kind.value)
        try:
            outcome = self.executor.execute(candidate.raw_text)
        except ExecutionError as e:
            log_error(logger, "Command execution failed", error=e)
            outcome = ExecutionOutcome(command=candidate.raw_text, return_code=None, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error while executing command")
            outcome = ExecutionOutcome(command=candidate.raw_text, return_code=None, error=str(e))

        if outcome.succeeded:
            reporter.notice("Command completed.")
        elif outcome.error:
            reporter.error(f"Command failed: {outcome.error}")
        else:
            reporter.error(f"Command exited with code {outcome.return_code}.")
        return outcome
