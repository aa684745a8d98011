"""Runtime settings loaded from environment variables.

All credentials and storage locations are resolved here so the rest of the
package receives them as explicit values.
"""
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from memchat.errors import ConfigurationError

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_IMPORTANT_INFO_PATH = "~/important_information.txt"
DEFAULT_CONVERSATION_LOG_PATH = "~/conversations.log"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    """Application settings.

    Environment variables:
        OPENAI_API_KEY: bearer credential for the completion endpoint.
        MEMCHAT_ENDPOINT: chat completions URL.
        MEMCHAT_MODEL: model identifier sent with every request.
        MEMCHAT_IMPORTANT_INFO_PATH: seed-context file, read at startup and
            appended with the session summary at exit.
        MEMCHAT_CONVERSATION_LOG_PATH: append-only exchange log.
        MEMCHAT_TIMEOUT: request timeout in seconds; unset means no timeout.
        MEMCHAT_LOG_LEVEL: logging level name.
    """

    api_key: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    important_info_path: Path = Field(
        default_factory=lambda: _expand_path(DEFAULT_IMPORTANT_INFO_PATH)
    )
    conversation_log_path: Path = Field(
        default_factory=lambda: _expand_path(DEFAULT_CONVERSATION_LOG_PATH)
    )
    timeout: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigurationError: If MEMCHAT_TIMEOUT is not a positive number
                or MEMCHAT_LOG_LEVEL is not a logging level name.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("OPENAI_API_KEY", ""),
            endpoint=env.get("MEMCHAT_ENDPOINT") or DEFAULT_ENDPOINT,
            model=env.get("MEMCHAT_MODEL") or DEFAULT_MODEL,
            important_info_path=_expand_path(
                env.get("MEMCHAT_IMPORTANT_INFO_PATH") or DEFAULT_IMPORTANT_INFO_PATH
            ),
            conversation_log_path=_expand_path(
                env.get("MEMCHAT_CONVERSATION_LOG_PATH") or DEFAULT_CONVERSATION_LOG_PATH
            ),
            timeout=_parse_timeout(env.get("MEMCHAT_TIMEOUT")),
            log_level=_parse_log_level(env.get("MEMCHAT_LOG_LEVEL")),
        )


def _expand_path(raw: str) -> Path:
    return Path(raw).expanduser()


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as err:
        raise ConfigurationError(
            f"MEMCHAT_TIMEOUT must be a number of seconds, got {raw!r}"
        ) from err
    if value <= 0:
        raise ConfigurationError(f"MEMCHAT_TIMEOUT must be positive, got {raw!r}")
    return value



def _parse_log_level(raw: Optional[str]) -> str:
    level = (raw or "").strip().upper() or DEFAULT_LOG_LEVEL
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"MEMCHAT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw!r}"
        )
    return level
