"""Tests for scripted (non-interactive) runs."""

from shellpal.chat import StubChatProvider
from shellpal.models import Role, SessionState
from shellpal.sessions import ScriptedRunner


def test_runs_every_prompt(executor, reporter) -> None:
    """Test that each prompt is sent and its command auto-executed."""
    runner = ScriptedRunner(StubChatProvider(), executor, reporter)

    result = runner.run(["show running processes", "what time is it"])

    assert result.final_state is SessionState.TERMINATED
    assert result.prompts_consumed == 2
    assert result.backend_calls == 2
    assert result.executed == [
        "Get-Process | Sort-Object CPU -Descending | Select-Object -First 5",
        "Get-Date -Format HH:mm",
    ]
    assert executor.commands == result.executed
    assert result.simulated_negative is False
    assert reporter.texts("user") == ["show running processes", "what time is it"]


def test_history_is_returned(executor) -> None:
    """Test that the conversation history is part of the result."""
    result = ScriptedRunner(StubChatProvider(invite=False), executor).run(["list files"])

    assert [m.role for m in result.history] == [Role.USER, Role.ASSISTANT]


def test_simulated_negative_ends_run(executor, reporter) -> None:
    """Test that a simulated 'no' after an invite ends the run early."""
    runner = ScriptedRunner(StubChatProvider(), executor, reporter, simulate_negative=True)

    result = runner.run(["show running processes", "what time is it"])

    assert result.simulated_negative is True
    assert result.prompts_consumed == 1
    assert result.backend_calls == 1
    assert len(result.executed) == 1
    assert reporter.texts("user") == ["show running processes", "no"]


def test_simulated_negative_needs_invite(executor) -> None:
    """Test that nothing is simulated when the assistant never invites more."""
    runner = ScriptedRunner(StubChatProvider(invite=False), executor, simulate_negative=True)

    result = runner.run(["list files", "show disk"])

    assert result.simulated_negative is False
    assert result.backend_calls == 2


def test_exit_prompt_stops_run(executor) -> None:
    """Test that an exit phrase in the script ends the run."""
    result = ScriptedRunner(StubChatProvider(), executor).run(["list files", "bye", "show disk"])

    assert result.prompts_consumed == 2
    assert result.backend_calls == 1


def test_no_reply_is_not_executed(executor, reporter) -> None:
    """Test that a missing reply skips execution and the run continues."""
    chat = StubChatProvider(replies=[None, "```\nGet-Date\n```"])

    result = ScriptedRunner(chat, executor, reporter).run(["first", "second"])

    assert result.executed == ["Get-Date"]
    assert "No response from the assistant. Try again." in reporter.texts("notice")


def test_execution_failure_continues(failing_executor) -> None:
    """Test that a failing command does not stop the run."""
    result = ScriptedRunner(StubChatProvider(), failing_executor).run(["list files", "show disk"])

    assert result.backend_calls == 2
    assert len(failing_executor.commands) == 2
