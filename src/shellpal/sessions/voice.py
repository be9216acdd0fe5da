"""Voice-driven session loop (full and basic variants)."""

import logging
from enum import Enum
from typing import Protocol

from shellpal.chat import ChatProvider
from shellpal.commands.confirmation import ConfirmationGate, GateMode, TokenSource
from shellpal.commands.extractor import extract
from shellpal.commands.intent_classifier import IntentClassifier
from shellpal.console import Reporter, SpeakingReporter
from shellpal.errors import PrerequisiteMissing, TranscriptionError, TransportError
from shellpal.logging_utils import log_info, log_warning
from shellpal.models import Message, Role, SessionState
from shellpal.prompts import VOICE_PROMPT
from shellpal.sessions.base import NO_RESPONSE_NOTICE, SessionBase

logger = logging.getLogger(__name__)

NO_SPEECH_NOTICE = "No speech detected. Please try again."


class VoiceVariant(str, Enum):
    """FULL echoes notices through speech as well as text; BASIC is text only."""

    FULL = "full"
    BASIC = "basic"


class Transcriber(Protocol):
    def transcribe(self, seconds: float, device: str | None = None) -> str | None: ...


class Speaker(Protocol):
    def speak(self, text: str) -> None: ...


class VoiceSessionController(SessionBase):
    """Single-exchange voice turns.

    Each turn transcribes one capture window and sends it as the only
    message of a fresh request; nothing carries over between turns.
    """

    def __init__(
        self,
        variant: VoiceVariant,
        chat_provider: ChatProvider,
        transcriber: Transcriber,
        gate: ConfirmationGate,
        reporter: Reporter,
        speaker: Speaker | None = None,
        capture_seconds: float = 5.0,
        device: str | None = None,
        verbose_transcripts: bool = False,
        mode: GateMode = GateMode.INTERACTIVE,
        classifier: IntentClassifier | None = None,
        system_prompt: str = VOICE_PROMPT,
        token_source: TokenSource | None = None,
        max_turns: int | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            variant: FULL or BASIC rendering of notices
            chat_provider: Chat backend
            transcriber: Records and transcribes capture windows
            gate: Confirmation gate (owns the executor)
            reporter: Transcript reporter
            speaker: Speech output for the FULL variant
            capture_seconds: Length of each capture window
            device: Input device name passed to the transcriber
            verbose_transcripts: Print every transcript and raw reply
            mode: Gate mode for every candidate
            classifier: Intent classifier (defaults to the built-in tables)
            system_prompt: Command-only preamble
            token_source: Confirmation token source (defaults to the gate's)
            max_turns: Stop after this many completed turns

        Raises:
            ValueError: If capture_seconds is not positive
        """
        if capture_seconds <= 0:
            raise ValueError(f"Capture length must be positive, got {capture_seconds}")
        if variant is VoiceVariant.FULL and speaker is not None:
            # Gate notices (skipped, completed, failed) are spoken too
            reporter = SpeakingReporter(reporter, speaker)
        super().__init__(chat_provider, gate, reporter, classifier, mode)
        self.variant = variant
        self.transcriber = transcriber
        self.speaker = speaker
        self.capture_seconds = capture_seconds
        self.device = device
        self.verbose_transcripts = verbose_transcripts
        self.system_prompt = system_prompt
        self.token_source = token_source
        self.max_turns = max_turns
        self.completed_turns = 0
        self.last_request: list[Message] = []

    def capture(self) -> str | None:
        """Capture and transcribe one window.

        Returns:
            Transcript, or None when nothing usable was heard

        Raises:
            PrerequisiteMissing: If no recording tool is installed
        """
        self.reporter.notice(f"Listening for {self.capture_seconds:g} seconds...")
        try:
            transcript = self.transcriber.transcribe(self.capture_seconds, device=self.device)
        except (TranscriptionError, TransportError) as e:
            log_warning(logger, "Transcription failed", error=e)
            self.reporter.error(f"Could not transcribe audio: {e}")
            return None

        if not transcript or not transcript.strip():
            self.reporter.notice(NO_SPEECH_NOTICE)
            return None

        transcript = transcript.strip()
        if self.verbose_transcripts:
            self.reporter.transcript(transcript)
        return transcript

    def handle_transcript(self, transcript: str) -> str | None:
        """Run one turn for a transcript.

        Returns:
            Text to handle next without a new capture (a reinterpreted
            confirmation token), or None
        """
        if self.classifier.is_exit(transcript):
            self.terminate("exit intent")
            return None

        self.last_request = [Message(role=Role.USER, content=transcript)]
        reply = self._send(self.last_request, self.system_prompt)
        if reply is None:
            self.reporter.notice(NO_RESPONSE_NOTICE)
            return None

        if self.verbose_transcripts:
            self.reporter.assistant(reply)

        candidate = extract(reply)
        if candidate is None:
            self.reporter.notice(NO_RESPONSE_NOTICE)
            return None

        result = self._confirm(candidate, self.token_source)
        if result.is_reinterpret:
            log_info(logger, "Confirmation token treated as new voice request")
            if self.verbose_transcripts:
                self.reporter.transcript(result.text or "")
            return result.text
        return None

    def run(self) -> SessionState:
        """Loop over capture windows until exit intent or a missing prerequisite.

        Returns:
            Final session state (always TERMINATED)
        """
        pending: str | None = None
        try:
            while not self.terminated:
                if pending is None:
                    if self.max_turns is not None and self.completed_turns >= self.max_turns:
                        self.terminate("turn limit reached")
                        break
                    pending = self.capture()
                    if pending is None:
                        # Empty capture: retry without counting a turn
                        continue

                pending = self.handle_transcript(pending)
                if not self.terminated:
                    self.completed_turns += 1
        except PrerequisiteMissing as e:
            # Raised by the request capture or the spoken confirmation capture
            self.reporter.error(str(e))
            self.terminate("missing prerequisite")
        except KeyboardInterrupt:
            self.reporter.notice("Interrupted.")
            self.terminate("interrupted")

        return self.state
