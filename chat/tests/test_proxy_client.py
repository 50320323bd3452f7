from unittest.mock import Mock, patch

import requests
from django.test import SimpleTestCase, override_settings

from chat.proxy_client import (
    CompletionFailed,
    HttpCompletionProxy,
    LocalCompletionProxy,
    get_completion_proxy,
)
from chatbot.completion import ProxyResult


def _response(status=200, json_body=None, text=""):
    resp = Mock()
    resp.status_code = status
    resp.text = text
    if json_body is None:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = json_body
    return resp


class LocalCompletionProxyTests(SimpleTestCase):
    @patch("chat.proxy_client.relay")
    def test_returns_response_text(self, mock_relay):
        mock_relay.return_value = ProxyResult(200, {"response": "hi!"})
        self.assertEqual(LocalCompletionProxy().complete("hello"), "hi!")
        mock_relay.assert_called_once_with("hello")

    @patch("chat.proxy_client.relay")
    def test_error_status_raises_with_status(self, mock_relay):
        mock_relay.return_value = ProxyResult(500, {"error": "OpenAI API key not configured"})
        with self.assertRaises(CompletionFailed) as ctx:
            LocalCompletionProxy().complete("hello")
        self.assertEqual(ctx.exception.status, 500)
        self.assertIn("not configured", ctx.exception.body)


class HttpCompletionProxyTests(SimpleTestCase):
    def setUp(self):
        self.session = Mock()
        self.proxy = HttpCompletionProxy(
            "https://proj.supabase.co/functions/v1/chatbot",
            session=self.session,
            headers={"Authorization": "Bearer anon"},
        )

    def test_posts_message_and_returns_text(self):
        self.session.post.return_value = _response(json_body={"response": "Sure."})

        self.assertEqual(self.proxy.complete("Explain gravity"), "Sure.")

        self.session.post.assert_called_once_with(
            "https://proj.supabase.co/functions/v1/chatbot",
            json={"message": "Explain gravity"},
            headers={"Authorization": "Bearer anon"},
            timeout=None,
        )

    def test_non_200_raises(self):
        self.session.post.return_value = _response(status=500, json_body={"error": "Internal server error"})
        with self.assertRaises(CompletionFailed) as ctx:
            self.proxy.complete("hi")
        self.assertEqual(ctx.exception.status, 500)

    def test_missing_response_field_raises(self):
        self.session.post.return_value = _response(json_body={"answer": "wrong shape"})
        with self.assertRaises(CompletionFailed):
            self.proxy.complete("hi")

    def test_non_json_body_raises(self):
        self.session.post.return_value = _response(status=502, text="<html>Bad gateway</html>")
        with self.assertRaises(CompletionFailed) as ctx:
            self.proxy.complete("hi")
        self.assertIn("Bad gateway", ctx.exception.body)

    def test_network_error_raises(self):
        self.session.post.side_effect = requests.ConnectionError("down")
        with self.assertRaises(CompletionFailed) as ctx:
            self.proxy.complete("hi")
        self.assertIsNone(ctx.exception.status)


class ProxySelectionTests(SimpleTestCase):
    @override_settings(CHATBOT_PROXY_URL="")
    def test_in_process_by_default(self):
        self.assertIsInstance(get_completion_proxy(), LocalCompletionProxy)

    @override_settings(CHATBOT_PROXY_URL="http://localhost:9000/functions/v1/chatbot",
                       CHATBOT_UPSTREAM_TIMEOUT=15.0, CHATBOT_PROXY_KEY="")
    def test_http_when_url_configured(self):
        proxy = get_completion_proxy()
        self.assertIsInstance(proxy, HttpCompletionProxy)
        self.assertEqual(proxy.timeout, 15.0)
        self.assertEqual(proxy.headers, {})

    @override_settings(CHATBOT_PROXY_URL="https://proj.supabase.co/functions/v1/chatbot", CHATBOT_PROXY_KEY="anon-key")
    def test_http_proxy_sends_anon_key_headers(self):
        session = Mock()
        session.post.return_value = _response(json_body={"response": "ok"})
        proxy = get_completion_proxy()
        proxy.session = session

        proxy.complete("hi")

        headers = session.post.call_args.kwargs["headers"]
        self.assertEqual(headers, {"Authorization": "Bearer anon-key", "apikey": "anon-key"})
