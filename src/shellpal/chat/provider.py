"""Chat provider interface."""

from abc import ABC, abstractmethod

from shellpal.models import Message


class ChatProvider(ABC):
    """Abstract base class for chat backends."""

    name: str = "base"

    @abstractmethod
    def invoke(self, messages: list[Message], system_prompt: str | None = None) -> str | None:
        """Send an ordered message list to the backend.

        Args:
            messages: Conversation so far, oldest first
            system_prompt: Optional preamble sent ahead of the messages

        Returns:
            Reply text, or None if the backend returned nothing usable

        Raises:
            TransportError: If the backend is unreachable or rejects the request
        """
        pass

    def validate(self) -> bool:
        """Check that the provider is usable (credentials present, host reachable)."""
        return True


def build_wire_messages(messages: list[Message], system_prompt: str | None) -> list[dict[str, str]]:
    """Convert messages into the role/content dicts chat APIs expect."""
    wire = []
    if system_prompt:
        wire.append({"role": "system", "content": system_prompt})
    wire.extend(message.to_wire() for message in messages)
    return wire
