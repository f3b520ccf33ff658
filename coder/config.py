"""Environment-driven configuration for the code generation client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

DEFAULT_MODEL = "google/gemini-2.0-flash-exp:free"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8000
DEFAULT_TIMEOUT = 60.0


class ConfigError(ValueError):
    """Missing or malformed configuration value."""


def _required(env: Mapping[str, str], name: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise ConfigError(f"{name} is not set in environment variables")
    return value


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class CoderConfig:
    api_key: str
    base_url: str
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "CoderConfig":
        """Build a config from OPENAI_* and CODER_* environment variables.

        OPENAI_API_KEY and OPENAI_BASE_URL are required.
        """
        env = os.environ if env is None else env
        return cls(
            api_key=_required(env, "OPENAI_API_KEY"),
            base_url=_required(env, "OPENAI_BASE_URL"),
            model=(env.get("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL,
            temperature=_number(env, "CODER_TEMPERATURE", DEFAULT_TEMPERATURE, float),
            max_tokens=_number(env, "CODER_MAX_TOKENS", DEFAULT_MAX_TOKENS, int),
            timeout=_number(env, "CODER_TIMEOUT", DEFAULT_TIMEOUT, float),
        )

    @property
    def completions_url(self) -> str:
        base = self.base_url.rstrip("/")
        if base.endswith("/chat/completions"):
            return base
        return f"{base}/chat/completions"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}
