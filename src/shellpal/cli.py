"""Command-line interface for shellpal.

Usage:
    shellpal text [--dry-run | --auto-execute]
    shellpal voice [--variant full|basic] [--seconds N] [--verbose] [--device NAME]
    shellpal demo [PROMPT ...] [--simulate-negative] [--dry-run]
    shellpal providers

Environment Variables:
    SHELLPAL_CONFIG: Path to the YAML configuration file
    OPENAI_API_KEY: Key for the OpenAI chat, transcription and speech providers
"""

import argparse
import dataclasses
import sys
from collections.abc import Callable

from shellpal import __version__
from shellpal.chat import default_registry, get_chat_provider
from shellpal.commands.confirmation import (
    ConfirmationGate,
    ConsoleTokenSource,
    GateMode,
    ReinterpretPolicy,
    VoiceTokenSource,
)
from shellpal.config import AppConfig, load_config
from shellpal.console import ConsoleReporter, Reporter
from shellpal.errors import ConfigError
from shellpal.execution import PreviewExecutor, ShellExecutor
from shellpal.logging_utils import clear_session_id, configure_logging, set_session_id
from shellpal.sessions import ConversationSession, ScriptedRunner, VoiceSessionController, VoiceVariant
from shellpal.stt import AudioRecorder, Transcriber, get_stt_provider
from shellpal.tts import Speaker, get_tts_provider

DEFAULT_DEMO_PROMPTS = [
    "show the five busiest processes",
    "what time is it",
]


def _read_utterance(prompt: str = "> ") -> Callable[[], str | None]:
    def read() -> str | None:
        try:
            return input(prompt)
        except EOFError:
            return None

    return read


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value}")
    return number


def _gate_mode(args: argparse.Namespace) -> GateMode:
    if getattr(args, "dry_run", False):
        return GateMode.DRY_RUN
    if getattr(args, "auto_execute", False):
        return GateMode.AUTO_EXECUTE
    return GateMode.INTERACTIVE


def _build_gate(config: AppConfig, reporter: Reporter, token_source) -> ConfirmationGate:
    executor = ShellExecutor(
        reporter,
        shell=config.execution.shell,
        timeout=config.execution.timeout,
    )
    return ConfirmationGate(
        executor,
        reporter,
        token_source=token_source,
        reinterpret_policy=ReinterpretPolicy(config.confirmation.reinterpret_policy),
        max_reprompts=config.confirmation.max_reprompts,
    )


def cmd_text(args: argparse.Namespace, config: AppConfig) -> int:
    """Start a text conversation session."""
    reporter = ConsoleReporter()
    chat = get_chat_provider(config.chat)
    gate = _build_gate(config, reporter, ConsoleTokenSource())

    session = ConversationSession(chat, gate, reporter, mode=_gate_mode(args))
    set_session_id()
    try:
        reporter.notice(f"Chatting with {config.chat.provider}. Type 'exit' to quit.")
        session.run(_read_utterance())
    finally:
        clear_session_id()
    reporter.notice("Goodbye.")
    return 0


def cmd_voice(args: argparse.Namespace, config: AppConfig) -> int:
    """Start a voice session."""
    reporter = ConsoleReporter()
    chat = get_chat_provider(config.chat)
    transcriber = Transcriber(AudioRecorder(), get_stt_provider(config.stt, config.chat.api_key))

    variant = VoiceVariant(args.variant)
    speaker = None
    if variant is VoiceVariant.FULL:
        speaker = Speaker(get_tts_provider(config.tts, config.chat.api_key), voice=config.tts.voice)

    device = args.device or config.voice.device
    token_source = VoiceTokenSource(
        ConsoleTokenSource(),
        transcriber,
        window_seconds=config.confirmation.voice_window_seconds,
        device=device,
    )
    gate = _build_gate(config, reporter, token_source)

    controller = VoiceSessionController(
        variant,
        chat,
        transcriber,
        gate,
        reporter,
        speaker=speaker,
        capture_seconds=args.seconds or config.voice.capture_seconds,
        device=device,
        verbose_transcripts=args.verbose,
        mode=_gate_mode(args),
        max_turns=args.max_turns,
    )
    set_session_id()
    try:
        reporter.notice("Voice session started. Say 'exit' to quit.")
        controller.run()
    finally:
        clear_session_id()
    reporter.notice("Goodbye.")
    return 0


def cmd_demo(args: argparse.Namespace, config: AppConfig) -> int:
    """Replay prompts with auto-execution."""
    reporter = ConsoleReporter()
    # Offline stub replies unless a provider is chosen on the command line
    chat_config = config.chat if args.provider else dataclasses.replace(config.chat, provider="stub")
    chat = get_chat_provider(chat_config)
    if args.dry_run:
        executor = PreviewExecutor(reporter)
    else:
        executor = ShellExecutor(reporter, shell=config.execution.shell, timeout=config.execution.timeout)

    runner = ScriptedRunner(chat, executor, reporter, simulate_negative=args.simulate_negative)
    set_session_id()
    try:
        result = runner.run(args.prompts or DEFAULT_DEMO_PROMPTS)
    finally:
        clear_session_id()

    print(
        f"\nDemo finished: {result.prompts_consumed} prompt(s), "
        f"{result.backend_calls} backend call(s), {len(result.executed)} command(s) run."
    )
    return 0


def cmd_providers(args: argparse.Namespace, config: AppConfig) -> int:
    """List available chat providers."""
    registry = default_registry()
    for entry in registry.entries():
        marker = "*" if entry.name == config.chat.provider else " "
        ready = "ready" if registry.is_valid(entry.name, config.chat) else "not configured"
        print(f"{marker} {entry.name:<8} {ready:<15} {entry.description}")
    return 0


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    chat = config.chat
    if args.provider:
        chat = dataclasses.replace(chat, provider=args.provider)
    if args.model:
        chat = dataclasses.replace(chat, model=args.model)
    return dataclasses.replace(config, chat=chat)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shellpal",
        description="Talk to a chat model and run the commands it suggests, with confirmation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument("--provider", choices=["openai", "ollama", "stub"], help="Chat provider")
    parser.add_argument("--model", help="Chat model name")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    def add_mode_flags(sub: argparse.ArgumentParser) -> None:
        group = sub.add_mutually_exclusive_group()
        group.add_argument("--dry-run", action="store_true", help="Show commands, never run them")
        group.add_argument(
            "--auto-execute", action="store_true", help="Run commands without asking"
        )

    text_parser = subparsers.add_parser("text", help="Start a text chat session")
    add_mode_flags(text_parser)
    text_parser.set_defaults(func=cmd_text)

    voice_parser = subparsers.add_parser("voice", help="Start a voice session")
    voice_parser.add_argument("--variant", choices=["full", "basic"], default="full")
    voice_parser.add_argument(
        "--seconds", type=_positive_float, help="Capture window in seconds"
    )
    voice_parser.add_argument("--verbose", action="store_true", help="Print transcripts")
    voice_parser.add_argument("--device", help="Audio input device name")
    voice_parser.add_argument("--max-turns", type=int, help="Stop after N turns")
    add_mode_flags(voice_parser)
    voice_parser.set_defaults(func=cmd_voice)

    demo_parser = subparsers.add_parser("demo", help="Replay prompts with auto-execution")
    demo_parser.add_argument("prompts", nargs="*", help="Prompts to replay")
    demo_parser.add_argument(
        "--simulate-negative",
        action="store_true",
        help="Answer 'no' after the assistant offers more help",
    )
    demo_parser.add_argument("--dry-run", action="store_true", help="Preview commands only")
    demo_parser.set_defaults(func=cmd_demo)

    providers_parser = subparsers.add_parser("providers", help="List chat providers")
    providers_parser.set_defaults(func=cmd_providers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.log_level)

    try:
        config = _apply_overrides(load_config(args.config), args)
        return args.func(args, config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
