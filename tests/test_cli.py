"""Tests for the command-line interface."""

import httpx
import pytest
import respx

from shellpal import __version__
from shellpal.cli import build_parser, main


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Leave the root logger to pytest."""
    monkeypatch.setattr("shellpal.cli.configure_logging", lambda level: None)


LOCAL_OLLAMA_TAGS = "http://localhost:11434/api/tags"


def feed_input(monkeypatch, lines):
    items = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(items)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


class TestParser:
    """Test argument parsing."""

    def test_no_command(self, capsys) -> None:
        """Test that running without a command prints help."""
        assert main([]) == 1
        assert "usage: shellpal" in capsys.readouterr().out

    def test_version(self, capsys) -> None:
        """Test --version."""
        with pytest.raises(SystemExit):
            main(["--version"])

        assert __version__ in capsys.readouterr().out

    def test_mode_flags_exclusive(self) -> None:
        """Test that dry-run and auto-execute cannot be combined."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["text", "--dry-run", "--auto-execute"])

    def test_voice_options(self) -> None:
        """Test voice subcommand options."""
        args = build_parser().parse_args(
            ["voice", "--variant", "basic", "--seconds", "4", "--verbose", "--max-turns", "2"]
        )

        assert args.variant == "basic"
        assert args.seconds == 4.0
        assert args.verbose is True
        assert args.max_turns == 2

    @pytest.mark.parametrize("seconds", ["0", "-1", "soon"])
    def test_voice_seconds_must_be_positive(self, capsys, seconds: str) -> None:
        """Test that a bad capture window is rejected by the parser."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["voice", "--seconds", seconds])

        assert "--seconds" in capsys.readouterr().err


class TestCommands:
    """Test subcommands end to end with offline providers."""

    def test_demo_dry_run(self, capsys) -> None:
        """Test the scripted demo with the stub provider."""
        assert main(["demo", "--dry-run", "what time is it"]) == 0

        out = capsys.readouterr().out
        assert "(preview) would run: Get-Date -Format HH:mm" in out
        assert "Demo finished: 1 prompt(s), 1 backend call(s), 1 command(s) run." in out

    def test_demo_simulated_negative(self, capsys) -> None:
        """Test that the demo stops after the simulated 'no'."""
        assert main(["demo", "--dry-run", "--simulate-negative", "list files", "show disk"]) == 0

        assert "1 prompt(s), 1 backend call(s)" in capsys.readouterr().out

    @respx.mock
    def test_providers(self, capsys) -> None:
        """Test the provider listing."""
        respx.get(LOCAL_OLLAMA_TAGS).mock(side_effect=httpx.ConnectError("refused"))

        assert main(["providers"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("* openai")
        assert "not configured" in lines[0]
        assert "not configured" in lines[1]
        assert any(line.strip().startswith("stub") and "ready" in line for line in lines)

    @respx.mock
    def test_providers_with_key(self, capsys, monkeypatch) -> None:
        """Test that a key makes OpenAI ready."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
        respx.get(LOCAL_OLLAMA_TAGS).mock(side_effect=httpx.ConnectError("refused"))

        main(["providers"])

        assert "not configured" not in capsys.readouterr().out.splitlines()[0]

    @respx.mock
    def test_providers_with_ollama_running(self, capsys) -> None:
        """Test that a reachable Ollama server is reported ready."""
        respx.get(LOCAL_OLLAMA_TAGS).mock(return_value=httpx.Response(200, json={"models": []}))

        main(["providers"])

        ollama = capsys.readouterr().out.splitlines()[1]
        assert ollama.strip().startswith("ollama")
        assert "ready" in ollama
        assert "not configured" not in ollama

    def test_text_dry_run(self, capsys, monkeypatch) -> None:
        """Test a text session in dry-run mode."""
        feed_input(monkeypatch, ["what time is it", "exit"])

        assert main(["--provider", "stub", "text", "--dry-run"]) == 0

        out = capsys.readouterr().out
        assert "Command:\n  Get-Date -Format HH:mm" in out
        assert "[*] Dry run: command not executed." in out
        assert "[*] Goodbye." in out

    def test_text_without_openai_key(self, capsys) -> None:
        """Test that the default provider needs a key."""
        assert main(["text"]) == 1

        assert "not configured" in capsys.readouterr().err

    def test_voice_without_recorder(self, capsys, monkeypatch) -> None:
        """Test that voice mode ends cleanly when no recording tool exists."""
        monkeypatch.setattr("shutil.which", lambda name: None)

        assert main(["--provider", "stub", "voice", "--variant", "basic"]) == 0

        assert "Required tool not found" in capsys.readouterr().out

    def test_bad_config_file(self, capsys, tmp_path) -> None:
        """Test that configuration errors are reported, not raised."""
        path = tmp_path / "config.yaml"
        path.write_text("execution:\n  shell: fish\n")

        assert main(["--config", str(path), "providers"]) == 1

        assert "Error:" in capsys.readouterr().err

    def test_missing_config_file(self, capsys, tmp_path) -> None:
        """Test a missing explicit config file."""
        assert main(["--config", str(tmp_path / "nope.yaml"), "providers"]) == 1

        assert "not found" in capsys.readouterr().err
