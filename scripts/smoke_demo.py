#!/usr/bin/env python3
"""Smoke test script for the shellpal scripted demo.

Runs the conversation turn logic end to end against the stub chat provider
with a preview executor, so no network, API key or shell is needed.

Usage:
    python scripts/smoke_demo.py

    # Show every transcript event
    python scripts/smoke_demo.py --verbose

Exit codes:
    0 - All checks passed
    1 - One or more checks failed
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from shellpal.chat import StubChatProvider  # noqa: E402
from shellpal.commands.confirmation import (  # noqa: E402
    ConfirmationGate,
    GateMode,
    ScriptedTokenSource,
)
from shellpal.commands.extractor import SourceKind, extract  # noqa: E402
from shellpal.console import ConsoleReporter, RecordingReporter  # noqa: E402
from shellpal.execution import PreviewExecutor  # noqa: E402
from shellpal.models import SessionState  # noqa: E402
from shellpal.sessions import ScriptedRunner  # noqa: E402


class SmokeTest:
    """Smoke test runner for the scripted demo."""

    def __init__(self, verbose: bool = False):
        """Initialize smoke test runner.

        Args:
            verbose: Whether to echo transcript events
        """
        self.verbose = verbose
        self.passed = 0
        self.failed = 0

    def log(self, message: str, level: str = "info") -> None:
        if level == "success":
            print(f"✓ {message}")
        elif level == "error":
            print(f"✗ {message}")
        elif level == "info" and self.verbose:
            print(f"ℹ {message}")

    def _reporter(self) -> RecordingReporter:
        return RecordingReporter(echo=ConsoleReporter() if self.verbose else None)

    def check_extraction(self) -> bool:
        """Check that the three extraction strategies are picked correctly."""
        self.log("Checking command extraction...")
        cases = [
            ("Here:\n```powershell\nGet-Process\n```\nDone", SourceKind.FENCED_BLOCK),
            ("You can use Get-Process | Sort-Object CPU", SourceKind.HEURISTIC_LINES),
            ("I did that for you.", SourceKind.RAW_FALLBACK),
        ]
        for reply, expected in cases:
            candidate = extract(reply)
            if candidate is None or candidate.source_kind is not expected:
                self.log(f"Extraction of {reply!r} did not give {expected.value}", "error")
                return False
        self.log("Command extraction check passed", "success")
        return True

    def check_scripted_run(self) -> bool:
        """Check a scripted run with auto-execution."""
        self.log("Checking scripted run...")
        reporter = self._reporter()
        executor = PreviewExecutor(reporter)
        prompts = ["show running processes", "what time is it"]

        result = ScriptedRunner(StubChatProvider(), executor, reporter).run(prompts)

        if result.final_state is not SessionState.TERMINATED:
            self.log(f"Run ended in {result.final_state.value}, expected terminated", "error")
            return False
        if result.backend_calls != len(prompts) or len(executor.commands) != len(prompts):
            self.log(
                f"Expected {len(prompts)} calls and commands, got "
                f"{result.backend_calls} calls and {len(executor.commands)} commands",
                "error",
            )
            return False

        self.log(f"Scripted run check passed ({len(executor.commands)} commands)", "success")
        return True

    def check_simulated_negative(self) -> bool:
        """Check that 'no' after an invite ends the run without a backend call."""
        self.log("Checking simulated negative...")
        reporter = self._reporter()
        runner = ScriptedRunner(
            StubChatProvider(), PreviewExecutor(reporter), reporter, simulate_negative=True
        )

        result = runner.run(["list files", "show disk"])

        if not result.simulated_negative or result.backend_calls != 1:
            self.log(
                f"Expected one backend call before the simulated 'no', got {result.backend_calls}",
                "error",
            )
            return False

        self.log("Simulated negative check passed", "success")
        return True

    def check_dry_run_gate(self) -> bool:
        """Check that dry-run never executes, whatever the token."""
        self.log("Checking dry-run gate...")
        reporter = self._reporter()
        executor = PreviewExecutor(reporter)
        gate = ConfirmationGate(executor, reporter, token_source=ScriptedTokenSource(["yes"]))

        result = gate.gate_execute(extract("```\nGet-Date\n```"), GateMode.DRY_RUN)

        if not result.is_no or executor.commands:
            self.log("Dry-run gate executed a command", "error")
            return False

        self.log("Dry-run gate check passed", "success")
        return True

    def run_all_checks(self) -> bool:
        print("Running shellpal smoke tests")
        print("=" * 60)

        checks = [
            self.check_extraction,
            self.check_scripted_run,
            self.check_simulated_negative,
            self.check_dry_run_gate,
        ]

        for check_func in checks:
            if check_func():
                self.passed += 1
            else:
                self.failed += 1

        print("=" * 60)
        print(f"Results: {self.passed} passed, {self.failed} failed")

        if self.failed > 0:
            print("\n✗ Smoke tests FAILED")
            return False
        print("\n✓ All smoke tests PASSED")
        return True


def main() -> int:
    """Main entry point for smoke test script.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Smoke test script for the shellpal demo")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    args = parser.parse_args()

    smoke_test = SmokeTest(verbose=args.verbose)
    return 0 if smoke_test.run_all_checks() else 1


if __name__ == "__main__":
    sys.exit(main())
