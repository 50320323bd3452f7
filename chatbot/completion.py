# chatbot/completion.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from .config import ApiKey, CompletionSettings, Unconfigured, get_completion_settings

logger = logging.getLogger(__name__)

MESSAGE_REQUIRED = "Message is required"
NOT_CONFIGURED = "OpenAI API key not configured"
UPSTREAM_FAILED = "Failed to get response from AI"
INTERNAL_ERROR = "Internal server error"


# ===== Exceptions =====
class UpstreamError(RuntimeError):
    """The completion API answered with a non-2xx status."""

    def __init__(self, status: int, body: str):
        super().__init__(f"OpenAI API returned {status}: {body}")
        self.status = status
        self.body = body


@dataclass(frozen=True)
class ProxyResult:
    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == 200


class CompletionClient:
    """Adapter over the OpenAI chat-completions HTTP endpoint."""

    def __init__(self, config: CompletionSettings, session: Optional[requests.Session] = None):
        if not isinstance(config.credential, ApiKey):
            raise ValueError("CompletionClient requires a configured API key")
        self.config = config
        self.session = session or requests.Session()

    def build_payload(self, message: str) -> Dict[str, Any]:
        # Only the new message is sent; no prior turns
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": self.config.system_prompt},
                {"role": "user", "content": message},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    def complete(self, message: str) -> str:
        resp = self.session.post(
            self.config.api_url,
            headers={
                "Authorization": f"Bearer {self.config.credential.value}",
                "Content-Type": "application/json",
            },
            json=self.build_payload(message),
            timeout=self.config.timeout,
        )
        logger.info("OpenAI response status: %s", resp.status_code)

        if not resp.ok:
            body = resp.text
            logger.error("OpenAI API error: %s %s", resp.status_code, body[:1000])
            raise UpstreamError(resp.status_code, body)

        data = resp.json()
        return data["choices"][0]["message"]["content"]


def relay(message: Any, *, config: Optional[CompletionSettings] = None,
          client: Optional[CompletionClient] = None) -> ProxyResult:
    """
    Forward one user message to the completion API.

    Never raises: every outcome is mapped to the status and JSON body the
    HTTP proxy returns. Nothing is persisted here.
    """
    if not isinstance(message, str) or not message:
        return ProxyResult(400, {"error": MESSAGE_REQUIRED})

    config = config or get_completion_settings()
    if isinstance(config.credential, Unconfigured):
        logger.error("%s not found in settings", config.credential.setting)
        return ProxyResult(500, {"error": NOT_CONFIGURED})

    logger.debug("Processing message of %d chars", len(message))

    try:
        client = client or CompletionClient(config)
        text = client.complete(message)
    except UpstreamError as e:
        return ProxyResult(500, {"error": UPSTREAM_FAILED, "details": str(e)})
    except Exception:
        logger.exception("Error in chatbot proxy")
        return ProxyResult(500, {"error": INTERNAL_ERROR})

    if not isinstance(text, str):
        logger.error("Completion API returned non-text content: %r", type(text).__name__)
        return ProxyResult(500, {"error": INTERNAL_ERROR})

    logger.info("AI response generated successfully")
    return ProxyResult(200, {"response": text})
