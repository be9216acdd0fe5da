"""Tests for command extraction from model replies."""

import pytest

from shellpal.commands.extractor import CommandExtractor, SourceKind, extract


class TestFencedBlocks:
    """Test fenced code block extraction."""

    def test_fenced_block_with_language(self) -> None:
        """Test a fenced block with a language tag inside prose."""
        candidate = extract("Here:\n```powershell\nGet-Process\n```\nDone")

        assert candidate is not None
        assert candidate.raw_text == "Get-Process"
        assert candidate.source_kind is SourceKind.FENCED_BLOCK

    def test_fenced_block_without_language(self) -> None:
        """Test a fenced block without a language tag."""
        candidate = extract("Try this:\n```\nls -la | grep txt\n```")

        assert candidate.raw_text == "ls -la | grep txt"
        assert candidate.source_kind is SourceKind.FENCED_BLOCK

    def test_inline_fence(self) -> None:
        """Test a single-line fenced command."""
        candidate = extract("Run ```ls -la``` to see everything")

        assert candidate.raw_text == "ls -la"
        assert candidate.source_kind is SourceKind.FENCED_BLOCK

    def test_multiline_block_kept_intact(self) -> None:
        """Test that a multi-line block keeps its inner lines."""
        reply = "```bash\ncd /tmp\nls\n```"
        candidate = extract(reply)

        assert candidate.raw_text == "cd /tmp\nls"

    def test_first_block_wins(self) -> None:
        """Test that only the first fenced block is used."""
        reply = "First:\n```\nGet-Date\n```\nOr:\n```\nGet-Process\n```"

        assert extract(reply).raw_text == "Get-Date"

    def test_empty_block_falls_through(self) -> None:
        """Test that an empty fenced block does not produce an empty command."""
        candidate = extract("```\n```\nGet-Service | Select-Object Name")

        assert candidate.source_kind is SourceKind.HEURISTIC_LINES
        assert candidate.raw_text == "Get-Service | Select-Object Name"


class TestHeuristicLines:
    """Test verb-noun and pipe line extraction."""

    def test_pipe_line(self) -> None:
        """Test a prose line containing a pipeline."""
        candidate = extract("You can use Get-Process | Sort-Object CPU")

        assert candidate.raw_text == "You can use Get-Process | Sort-Object CPU"
        assert candidate.source_kind is SourceKind.HEURISTIC_LINES

    def test_only_matching_lines_kept(self) -> None:
        """Test that prose lines without commands are dropped."""
        reply = "Sure thing.\n  Get-ChildItem -Recurse  \nThis lists files.\nps aux | head"
        candidate = extract(reply)

        assert candidate.raw_text == "Get-ChildItem -Recurse\nps aux | head"
        assert candidate.source_kind is SourceKind.HEURISTIC_LINES

    @pytest.mark.parametrize(
        "line",
        [
            "Restart-Service spooler",
            "invoke-webrequest https://example.com",
            "ForEach-Object { $_ }",
            "Out-File log.txt",
        ],
    )
    def test_whitelisted_verbs(self, line: str) -> None:
        """Test whitelisted verbs in any case."""
        candidate = extract(line)

        assert candidate.source_kind is SourceKind.HEURISTIC_LINES

    def test_unknown_verb_is_not_a_command(self) -> None:
        """Test that a hyphenated word with a non-whitelisted verb falls back."""
        candidate = extract("This is a well-known issue.")

        assert candidate.source_kind is SourceKind.RAW_FALLBACK


class TestFallback:
    """Test raw fallback and empty input."""

    def test_raw_fallback(self) -> None:
        """Test that plain prose is returned trimmed."""
        candidate = extract("  I did that for you.  ")

        assert candidate.raw_text == "I did that for you."
        assert candidate.source_kind is SourceKind.RAW_FALLBACK

    @pytest.mark.parametrize("text", [None, "", "   \n  "])
    def test_empty_input(self, text) -> None:
        """Test that empty replies produce no candidate."""
        assert extract(text) is None

    def test_extractor_object(self) -> None:
        """Test the injectable wrapper."""
        assert CommandExtractor().extract("```\nwhoami\n```").raw_text == "whoami"
