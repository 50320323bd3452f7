"""Process-wide settings for the completion proxy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-2025-04-14"
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7

SYSTEM_PROMPT = (
    "You are a helpful AI assistant for ClassBridge, an education platform. "
    "Help students and teachers with their educational needs. "
    "Be concise, accurate, and supportive in your responses."
)


@dataclass(frozen=True)
class ApiKey:
    value: str

    def __repr__(self) -> str:
        return f"ApiKey(<{len(self.value)} chars>)"


@dataclass(frozen=True)
class Unconfigured:
    setting: str = "OPENAI_API_KEY"


Credential = Union[ApiKey, Unconfigured]


@dataclass(frozen=True)
class CompletionSettings:
    credential: Credential
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    system_prompt: str = SYSTEM_PROMPT
    timeout: Optional[float] = None

    @classmethod
    def from_django_settings(cls) -> "CompletionSettings":
        key = (getattr(settings, "OPENAI_API_KEY", "") or "").strip()
        credential: Credential = ApiKey(key) if key else Unconfigured()
        return cls(
            credential=credential,
            model=getattr(settings, "OPENAI_MODEL", None) or DEFAULT_MODEL,
            api_url=getattr(settings, "OPENAI_API_URL", None) or DEFAULT_API_URL,
            max_tokens=int(getattr(settings, "CHATBOT_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            temperature=float(getattr(settings, "CHATBOT_TEMPERATURE", DEFAULT_TEMPERATURE)),
            timeout=getattr(settings, "CHATBOT_UPSTREAM_TIMEOUT", None),
        )


@lru_cache(maxsize=1)
def get_completion_settings() -> CompletionSettings:
    loaded = CompletionSettings.from_django_settings()
    if isinstance(loaded.credential, Unconfigured):
        logger.warning("⚠️ %s is not set; the completion proxy will answer 500", loaded.credential.setting)
    else:
        logger.info("✅ Completion proxy configured for model %s", loaded.model)
    return loaded
