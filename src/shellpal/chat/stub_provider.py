"""Stub chat provider that returns deterministic replies for testing.

This is the provider used by the scripted demo and the test suite. It
doesn't require any external dependencies or API keys.
"""

import logging
from collections import deque
from collections.abc import Iterable

from shellpal.chat.provider import ChatProvider
from shellpal.models import Message, Role

logger = logging.getLogger(__name__)

# (keyword, command) pairs checked against the last user message
CANNED_COMMANDS = [
    ("process", "Get-Process | Sort-Object CPU -Descending | Select-Object -First 5"),
    ("service", "Get-Service | Where-Object Status -eq 'Running'"),
    ("disk", "Get-PSDrive -PSProvider FileSystem"),
    ("date", "Get-Date"),
    ("time", "Get-Date -Format HH:mm"),
    ("file", "Get-ChildItem -File | Sort-Object Length -Descending"),
    ("list", "Get-ChildItem"),
]


class StubChatProvider(ChatProvider):
    """Stub chat provider.

    With a reply script it returns the scripted replies in order (None once
    exhausted, or for None entries). Without one it answers with a canned
    fenced command chosen from keywords in the last user message.
    """

    name = "stub"

    def __init__(self, replies: Iterable[str | None] | None = None, invite: bool = True):
        """Initialize stub chat provider.

        Args:
            replies: Optional scripted replies
            invite: Whether canned replies end with an invite to continue
        """
        self.replies: deque[str | None] | None = deque(replies) if replies is not None else None
        self.invite = invite
        self.calls: list[tuple[list[Message], str | None]] = []

    def invoke(self, messages: list[Message], system_prompt: str | None = None) -> str | None:
        self.calls.append((list(messages), system_prompt))

        if self.replies is not None:
            if not self.replies:
                return None
            return self.replies.popleft()

        last_user = next(
            (message.content for message in reversed(messages) if message.role is Role.USER),
            "",
        )
        return self._canned_reply(last_user)

    def _canned_reply(self, text: str) -> str:
        lowered = text.lower()
        command = next(
            (command for keyword, command in CANNED_COMMANDS if keyword in lowered),
            f"Write-Output '{text.replace(chr(39), chr(39) * 2)}'",
        )
        reply = f"You can run:\n```powershell\n{command}\n```"
        if self.invite:
            reply += "\nLet me know if you need anything else."
        return reply
