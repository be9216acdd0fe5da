"""Ollama chat provider implementation.

Talks to a local or remote Ollama server over its /api/chat endpoint using
httpx. No API key is needed.
"""

import logging
import os

import httpx

from shellpal.chat.provider import ChatProvider, build_wire_messages
from shellpal.errors import TransportError
from shellpal.models import Message

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.1"


class OllamaChatProvider(ChatProvider):
    """Ollama chat provider."""

    name = "ollama"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize Ollama chat provider.

        Args:
            base_url: Server URL (defaults to OLLAMA_HOST env var or localhost:11434)
            model: Model name (defaults to OLLAMA_MODEL env var or llama3.1)
            timeout: Request timeout in seconds
        """
        base_url = base_url or os.environ.get("OLLAMA_HOST") or DEFAULT_BASE_URL
        if not base_url.startswith(("http://", "https://")):
            base_url = f"http://{base_url}"
        self.base_url = base_url.rstrip("/")
        self.model = model or os.environ.get("OLLAMA_MODEL", DEFAULT_MODEL)
        self.timeout = timeout

    def invoke(self, messages: list[Message], system_prompt: str | None = None) -> str | None:
        payload = {
            "model": self.model,
            "messages": build_wire_messages(messages, system_prompt),
            "stream": False,
        }
        url = f"{self.base_url}/api/chat"

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise TransportError(f"Ollama request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Ollama returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"Could not reach Ollama at {self.base_url}: {e}") from e
        except ValueError as e:
            raise TransportError(f"Ollama returned invalid JSON: {e}") from e

        content = (data.get("message") or {}).get("content") if isinstance(data, dict) else None
        if not content or not content.strip():
            return None
        return content.strip()

    def validate(self) -> bool:
        try:
            with httpx.Client(timeout=5.0) as client:
                response = client.get(f"{self.base_url}/api/tags")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Ollama server not reachable at %s: %s", self.base_url, e)
            return False
