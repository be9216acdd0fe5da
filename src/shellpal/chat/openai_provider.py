"""OpenAI chat provider implementation.

This provider uses the Chat Completions API. It requires an API key from the
configuration or the OPENAI_API_KEY environment variable.
"""

import logging
import os
from typing import Any

import openai

from shellpal.chat.provider import ChatProvider, build_wire_messages
from shellpal.errors import TransportError
from shellpal.models import Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIChatProvider(ChatProvider):
    """OpenAI chat provider with timeouts and SDK-level retries."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 2,
        base_url: str | None = None,
        client: Any | None = None,
    ):
        """Initialize OpenAI chat provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Chat model (defaults to OPENAI_CHAT_MODEL env var or gpt-4o-mini)
            timeout: Request timeout in seconds
            max_retries: Retries performed by the SDK on transient failures
            base_url: Optional OpenAI-compatible endpoint
            client: Pre-built client (tests)

        Raises:
            ValueError: If no API key is configured and no client is given
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if client is None and not self.api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is required for OpenAI chat provider"
            )

        self.model = model or os.environ.get("OPENAI_CHAT_MODEL", DEFAULT_MODEL)
        self.timeout = timeout
        self.client = client or openai.OpenAI(
            api_key=self.api_key,
            base_url=base_url,
            max_retries=max_retries,
        )

        logger.info(
            "Initialized OpenAI chat provider: model=%s, timeout=%s",
            self.model,
            self.timeout,
        )

    def invoke(self, messages: list[Message], system_prompt: str | None = None) -> str | None:
        wire = build_wire_messages(messages, system_prompt)
        logger.debug("Sending %d messages to OpenAI", len(wire))

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=wire,
                timeout=self.timeout,
            )
        except openai.OpenAIError as e:
            logger.error("OpenAI chat request failed: %s", e)
            raise TransportError(f"OpenAI chat request failed: {e}") from e

        if not response.choices:
            return None
        content = response.choices[0].message.content
        if not content or not content.strip():
            return None
        return content.strip()

    def validate(self) -> bool:
        return bool(self.api_key)
