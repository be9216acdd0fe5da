"""Configuration loader.

Loads settings from an optional YAML file with safe defaults, then applies
environment overrides. Configuration is read-only for the rest of the
package.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from shellpal.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/shellpal/config.yaml")

CHAT_PROVIDERS = ["openai", "ollama", "stub"]
STT_PROVIDERS = ["openai", "stub"]
TTS_PROVIDERS = ["openai", "stub"]
SHELLS = ["auto", "pwsh", "powershell", "sh", "bash"]
REINTERPRET_POLICIES = ["new_request", "reprompt"]


@dataclass
class ChatConfig:
    provider: str = "openai"
    model: str | None = None
    timeout: float = 60.0
    base_url: str | None = None
    api_key: str | None = field(default=None, repr=False)


@dataclass
class STTConfig:
    provider: str = "openai"
    model: str = "whisper-1"


@dataclass
class TTSConfig:
    provider: str = "openai"
    model: str = "tts-1"
    voice: str = "alloy"


@dataclass
class ExecutionConfig:
    shell: str = "auto"
    timeout: float = 120.0


@dataclass
class ConfirmationConfig:
    reinterpret_policy: str = "new_request"
    max_reprompts: int = 2
    voice_window_seconds: float = 3.0


@dataclass
class VoiceConfig:
    capture_seconds: float = 5.0
    device: str | None = None


@dataclass
class AppConfig:
    """Complete application configuration."""

    chat: ChatConfig = field(default_factory=ChatConfig)
    stt: STTConfig = field(default_factory=STTConfig)
    tts: TTSConfig = field(default_factory=TTSConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    confirmation: ConfirmationConfig = field(default_factory=ConfirmationConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    source: Path | None = None


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return value


def _choice(value: Any, allowed: list[str], name: str) -> str:
    if not isinstance(value, str) or value.lower() not in allowed:
        raise ConfigError(f"Field '{name}' must be one of: {', '.join(allowed)}")
    return value.lower()


def _number(value: Any, name: str, minimum: float = 0.0) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Field '{name}' must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Field '{name}' must be a number") from e
    if number <= minimum:
        raise ConfigError(f"Field '{name}' must be greater than {minimum:g}")
    return number


def _optional_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Field '{name}' must be a string")
    return value or None


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse a configuration dictionary into an AppConfig.

    Args:
        data: Dictionary loaded from YAML (already merged with env overrides)

    Returns:
        AppConfig with validated values

    Raises:
        ConfigError: If a field has an invalid value
    """
    chat = _section(data, "chat")
    stt = _section(data, "stt")
    tts = _section(data, "tts")
    execution = _section(data, "execution")
    confirmation = _section(data, "confirmation")
    voice = _section(data, "voice")

    max_reprompts = confirmation.get("max_reprompts", 2)
    if isinstance(max_reprompts, bool) or not isinstance(max_reprompts, int) or max_reprompts < 0:
        raise ConfigError("Field 'confirmation.max_reprompts' must be a non-negative integer")

    return AppConfig(
        chat=ChatConfig(
            provider=_choice(chat.get("provider", "openai"), CHAT_PROVIDERS, "chat.provider"),
            model=_optional_str(chat.get("model"), "chat.model"),
            timeout=_number(chat.get("timeout", 60.0), "chat.timeout"),
            base_url=_optional_str(chat.get("base_url"), "chat.base_url"),
            api_key=_optional_str(chat.get("api_key"), "chat.api_key"),
        ),
        stt=STTConfig(
            provider=_choice(stt.get("provider", "openai"), STT_PROVIDERS, "stt.provider"),
            model=_optional_str(stt.get("model"), "stt.model") or "whisper-1",
        ),
        tts=TTSConfig(
            provider=_choice(tts.get("provider", "openai"), TTS_PROVIDERS, "tts.provider"),
            model=_optional_str(tts.get("model"), "tts.model") or "tts-1",
            voice=_optional_str(tts.get("voice"), "tts.voice") or "alloy",
        ),
        execution=ExecutionConfig(
            shell=_choice(execution.get("shell", "auto"), SHELLS, "execution.shell"),
            timeout=_number(execution.get("timeout", 120.0), "execution.timeout"),
        ),
        confirmation=ConfirmationConfig(
            reinterpret_policy=_choice(
                confirmation.get("reinterpret_policy", "new_request"),
                REINTERPRET_POLICIES,
                "confirmation.reinterpret_policy",
            ),
            max_reprompts=max_reprompts,
            voice_window_seconds=_number(
                confirmation.get("voice_window_seconds", 3.0),
                "confirmation.voice_window_seconds",
            ),
        ),
        voice=VoiceConfig(
            capture_seconds=_number(voice.get("capture_seconds", 5.0), "voice.capture_seconds"),
            device=_optional_str(voice.get("device"), "voice.device"),
        ),
    )


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "SHELLPAL_CHAT_PROVIDER": ("chat", "provider"),
    "SHELLPAL_CHAT_MODEL": ("chat", "model"),
    "SHELLPAL_STT_PROVIDER": ("stt", "provider"),
    "SHELLPAL_TTS_PROVIDER": ("tts", "provider"),
    "SHELLPAL_SHELL": ("execution", "shell"),
    "SHELLPAL_EXEC_TIMEOUT": ("execution", "timeout"),
}


def _apply_env(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in data.items()}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        target = merged.setdefault(section, {})
        if not isinstance(target, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")
        target[key] = value

    # OLLAMA_HOST only applies to the ollama provider and never beats the file
    chat = merged.get("chat")
    if (
        env.get("OLLAMA_HOST")
        and isinstance(chat, dict)
        and str(chat.get("provider", "")).lower() == "ollama"
        and not chat.get("base_url")
    ):
        chat["base_url"] = env["OLLAMA_HOST"]
    return merged


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from YAML plus environment overrides.

    Args:
        path: Path to the YAML file. If None, uses SHELLPAL_CONFIG or
              ~/.config/shellpal/config.yaml; a missing default file is fine.
        env: Environment mapping (defaults to os.environ)

    Returns:
        AppConfig

    Raises:
        ConfigError: If an explicitly given file is missing, or values are invalid
    """
    if env is None:
        env = os.environ

    explicit = path is not None or bool(env.get("SHELLPAL_CONFIG"))
    config_path = Path(path or env.get("SHELLPAL_CONFIG") or DEFAULT_CONFIG_PATH).expanduser()

    data: dict[str, Any] = {}
    source = None
    if config_path.exists():
        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Configuration root in {config_path} must be a mapping")
        data = loaded
        source = config_path
    elif explicit:
        raise ConfigError(f"Configuration file not found: {config_path}")

    config = _parse_config(_apply_env(data, env))
    config.source = source

    if not config.chat.api_key:
        config.chat.api_key = env.get("OPENAI_API_KEY") or None

    return config
