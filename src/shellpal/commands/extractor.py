"""Recover an executable command from free-form model output."""

import re
from dataclasses import dataclass
from enum import Enum


class SourceKind(str, Enum):
    """Where a candidate command was found in the reply."""

    FENCED_BLOCK = "fenced_block"
    HEURISTIC_LINES = "heuristic_lines"
    RAW_FALLBACK = "raw_fallback"


@dataclass(frozen=True)
class CommandCandidate:
    """Text recovered from a backend reply, believed directly executable."""

    raw_text: str
    source_kind: SourceKind


COMMAND_VERBS = [
    "Get",
    "Set",
    "New",
    "Remove",
    "Start",
    "Stop",
    "Restart",
    "Invoke",
    "Enable",
    "Disable",
    "Select",
    "Sort",
    "Where",
    "ForEach",
    "Import",
    "Export",
    "Test",
    "Measure",
    "Write",
    "Add",
    "Clear",
    "Copy",
    "Move",
    "Rename",
    "Join",
    "Split",
    "Out",
    "Format",
]

# ```lang\n ... ``` anywhere in the text; language tag optional
FENCED_BLOCK_PATTERN = re.compile(r"```(?:[ \t]*[\w+#.-]*[ \t]*\r?\n)?(.*?)```", re.DOTALL)

VERB_NOUN_PATTERN = re.compile(
    r"\b(?:" + "|".join(COMMAND_VERBS) + r")-[A-Za-z][\w]*",
    re.IGNORECASE,
)


def _looks_like_command(line: str) -> bool:
    return "|" in line or bool(VERB_NOUN_PATTERN.search(line))


def extract(response_text: str | None) -> CommandCandidate | None:
    """Extract a candidate command from a model reply.

    Tries, in order: the first fenced code block, lines that contain a pipe
    or a Verb-Noun cmdlet name, then the whole trimmed text.

    Args:
        response_text: Free-form reply from the chat backend

    Returns:
        CommandCandidate, or None if the reply is empty
    """
    if not response_text or not response_text.strip():
        return None

    match = FENCED_BLOCK_PATTERN.search(response_text)
    if match:
        inner = match.group(1).strip()
        if inner:
            return CommandCandidate(raw_text=inner, source_kind=SourceKind.FENCED_BLOCK)

    lines = [line.strip() for line in response_text.splitlines()]
    matching = [line for line in lines if line and _looks_like_command(line)]
    if matching:
        return CommandCandidate(
            raw_text="\n".join(matching), source_kind=SourceKind.HEURISTIC_LINES
        )

    return CommandCandidate(raw_text=response_text.strip(), source_kind=SourceKind.RAW_FALLBACK)


class CommandExtractor:
    """Object wrapper around extract() for injection into sessions."""

    def extract(self, response_text: str | None) -> CommandCandidate | None:
        return extract(response_text)
