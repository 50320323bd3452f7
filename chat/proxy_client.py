"""Client side of the completion proxy, as seen by the conversation controller."""

import logging
from typing import Optional, Protocol

import requests
from django.conf import settings

from chatbot.completion import relay

logger = logging.getLogger(__name__)


class CompletionFailed(RuntimeError):
    """The proxy did not produce a response text."""

    def __init__(self, message: str, *, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class CompletionProxy(Protocol):
    def complete(self, message: str) -> str: ...


def _response_text(status: int, body) -> str:
    if status != 200:
        raise CompletionFailed(f"proxy returned {status}", status=status, body=str(body))
    text = body.get("response") if isinstance(body, dict) else None
    if not isinstance(text, str):
        raise CompletionFailed("proxy response has no text", status=status, body=str(body))
    return text


class LocalCompletionProxy:
    """Calls the proxy handler in-process."""

    def complete(self, message: str) -> str:
        result = relay(message)
        return _response_text(result.status, result.body)


class HttpCompletionProxy:
    """POSTs to a deployed proxy endpoint, the way the browser client invokes it."""

    def __init__(self, url: str, *, session: Optional[requests.Session] = None,
                 headers: Optional[dict] = None, timeout: Optional[float] = None):
        self.url = url
        self.session = session or requests.Session()
        self.headers = headers or {}
        self.timeout = timeout

    def complete(self, message: str) -> str:
        try:
            resp = self.session.post(
                self.url, json={"message": message}, headers=self.headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Completion proxy %s unreachable: %s", self.url, e)
            raise CompletionFailed(f"proxy unreachable: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        return _response_text(resp.status_code, body)


def _proxy_headers() -> dict:
    key = getattr(settings, "CHATBOT_PROXY_KEY", "")
    if not key:
        return {}
    return {"Authorization": f"Bearer {key}", "apikey": key}


def get_completion_proxy() -> CompletionProxy:
    url = getattr(settings, "CHATBOT_PROXY_URL", "")
    if url:
        return HttpCompletionProxy(
            url,
            headers=_proxy_headers(),
            timeout=getattr(settings, "CHATBOT_UPSTREAM_TIMEOUT", None),
        )
    return LocalCompletionProxy()
