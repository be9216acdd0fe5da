"""Conversation data model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Author of a conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class SessionState(str, Enum):
    """States of a command-mediation session."""

    LISTENING = "listening"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"
    TERMINATED = "terminated"


class Message(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_wire(self) -> dict[str, str]:
        """Convert to the {role, content} dict chat APIs expect."""
        return {"role": self.role.value, "content": self.content}


class ConversationHistory:
    """Append-only message history for one session.

    Never persisted; the owning session drops it when it ends.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, role: Role, content: str) -> Message:
        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    def messages(self) -> list[Message]:
        return list(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(list(self._messages))
