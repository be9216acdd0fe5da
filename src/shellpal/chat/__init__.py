"""Chat backends for shellpal."""

import logging

from shellpal.chat.provider import ChatProvider
from shellpal.chat.registry import ProviderEntry, ProviderRegistry, default_registry
from shellpal.chat.stub_provider import StubChatProvider
from shellpal.config import ChatConfig
from shellpal.errors import ConfigError

logger = logging.getLogger(__name__)

__all__ = [
    "ChatProvider",
    "ProviderEntry",
    "ProviderRegistry",
    "StubChatProvider",
    "default_registry",
    "get_chat_provider",
]


def get_chat_provider(config: ChatConfig, registry: ProviderRegistry | None = None) -> ChatProvider:
    """Get the configured chat provider.

    Unlike speech providers there is no silent fallback to the stub: a chat
    session against canned replies would look like it works.

    Args:
        config: Chat configuration (provider name, model, credentials)
        registry: Registry to create from (defaults to a fresh default_registry())

    Returns:
        A ChatProvider instance

    Raises:
        ConfigError: If the provider is unknown or cannot be initialized
    """
    registry = registry or default_registry()
    try:
        return registry.create(config.provider, config)
    except ValueError as e:
        logger.error("Failed to initialize chat provider '%s': %s", config.provider, e)
        raise ConfigError(str(e)) from e
