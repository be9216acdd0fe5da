"""Registry of chat providers keyed by name.

A registry is an ordinary object: build one with default_registry() (or
empty, for tests) and pass it to whoever needs to create providers.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from shellpal.chat.provider import ChatProvider
from shellpal.config import ChatConfig

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ChatConfig], ChatProvider]
ProviderValidator = Callable[[ChatConfig], bool]


@dataclass(frozen=True)
class ProviderEntry:
    """A registered chat provider."""

    name: str
    factory: ProviderFactory
    validate: ProviderValidator | None = None
    description: str = ""


class ProviderRegistry:
    """Chat providers keyed by name, in registration order."""

    def __init__(self) -> None:
        self._entries: dict[str, ProviderEntry] = {}

    def register(
        self,
        name: str,
        factory: ProviderFactory,
        validate: ProviderValidator | None = None,
        description: str = "",
    ) -> ProviderEntry:
        """Register a provider factory.

        Args:
            name: Provider name (case-insensitive)
            factory: Builds a provider from chat configuration
            validate: Optional pre-flight check on the configuration
            description: One-line description for listings

        Returns:
            The registered entry

        Raises:
            ValueError: If the name is empty or already registered
        """
        key = name.strip().lower()
        if not key:
            raise ValueError("Provider name cannot be empty")
        if key in self._entries:
            raise ValueError(f"Provider already registered: {key}")

        entry = ProviderEntry(name=key, factory=factory, validate=validate, description=description)
        self._entries[key] = entry
        return entry

    def entries(self) -> list[ProviderEntry]:
        return list(self._entries.values())

    def names(self) -> list[str]:
        return list(self._entries)

    def get(self, name: str) -> ProviderEntry:
        key = name.strip().lower()
        if key not in self._entries:
            raise ValueError(
                f"Unknown chat provider: {name}. Available: {', '.join(self.names()) or 'none'}"
            )
        return self._entries[key]

    def is_valid(self, name: str, config: ChatConfig) -> bool:
        entry = self.get(name)
        if entry.validate is None:
            return True
        return entry.validate(config)

    def create(self, name: str, config: ChatConfig) -> ChatProvider:
        """Build a provider by name.

        Raises:
            ValueError: If the name is unknown, validation fails or the factory rejects the config
        """
        entry = self.get(name)
        if entry.validate is not None and not entry.validate(config):
            raise ValueError(f"Chat provider '{entry.name}' is not configured or not reachable")
        logger.info("Creating chat provider: %s", entry.name)
        return entry.factory(config)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._entries


def _openai_factory(config: ChatConfig) -> ChatProvider:
    from shellpal.chat.openai_provider import OpenAIChatProvider

    return OpenAIChatProvider(
        api_key=config.api_key,
        model=config.model,
        timeout=config.timeout,
        base_url=config.base_url,
    )


def _ollama_factory(config: ChatConfig) -> ChatProvider:
    from shellpal.chat.ollama_provider import OllamaChatProvider

    return OllamaChatProvider(base_url=config.base_url, model=config.model, timeout=config.timeout)


def _stub_factory(config: ChatConfig) -> ChatProvider:
    from shellpal.chat.stub_provider import StubChatProvider

    return StubChatProvider()


def _ollama_reachable(config: ChatConfig) -> bool:
    from shellpal.chat.ollama_provider import OllamaChatProvider

    return OllamaChatProvider(base_url=config.base_url).validate()


def default_registry() -> ProviderRegistry:
    """Build a new registry holding the built-in providers."""
    registry = ProviderRegistry()
    registry.register(
        "openai",
        _openai_factory,
        validate=lambda config: bool(config.api_key),
        description="OpenAI Chat Completions (needs OPENAI_API_KEY)",
    )
    registry.register(
        "ollama",
        _ollama_factory,
        validate=_ollama_reachable,
        description="Ollama /api/chat over HTTP (server must be reachable)",
    )
    registry.register(
        "stub",
        _stub_factory,
        description="Deterministic canned replies, no network",
    )
    return registry
