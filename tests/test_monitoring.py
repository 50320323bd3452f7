from unittest.mock import MagicMock, patch

from django.http import JsonResponse
from django.test import SimpleTestCase, RequestFactory

from classbridge.monitoring import SentryMonitor, track_service_operation, track_transaction


class TrackTransactionTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    @patch("classbridge.monitoring.sentry_sdk")
    def test_tags_response_status(self, mock_sdk):
        transaction = mock_sdk.start_transaction.return_value.__enter__.return_value

        @track_transaction("probe", module="tests")
        def view(request):
            return JsonResponse({"error": "nope"}, status=404)

        request = self.factory.get("/")
        request.user_id = "5"
        resp = view(request)

        self.assertEqual(resp.status_code, 404)
        mock_sdk.start_transaction.assert_called_once_with(op="tests", name="tests.probe")
        transaction.set_tag.assert_called_once_with("http_status", 404)
        transaction.set_status.assert_called_once_with("unknown_error")
        mock_sdk.set_tag.assert_any_call("operation", "probe")

    @patch("classbridge.monitoring.sentry_sdk")
    def test_exceptions_are_captured_and_reraised(self, mock_sdk):
        @track_transaction("probe")
        def view(request):
            raise ValueError("broken")

        with self.assertRaises(ValueError):
            view(self.factory.get("/"))
        mock_sdk.capture_exception.assert_called_once()
        mock_sdk.start_transaction.return_value.__enter__.return_value.set_status.assert_called_with("internal_error")

    def test_runs_without_sentry_initialised(self):
        @track_transaction("probe")
        def view(request):
            return JsonResponse({}, status=200)

        self.assertEqual(view(self.factory.get("/")).status_code, 200)


class TrackServiceOperationTests(SimpleTestCase):
    @patch("classbridge.monitoring.sentry_sdk")
    def test_failure_leaves_breadcrumb(self, mock_sdk):
        @track_service_operation("store_write")
        def write():
            raise RuntimeError("disk full")

        with self.assertRaises(RuntimeError):
            write()
        span = mock_sdk.start_span.return_value.__enter__.return_value
        span.set_data.assert_any_call("error_type", "RuntimeError")
        self.assertEqual(mock_sdk.add_breadcrumb.call_args.kwargs["level"], "error")

    @patch("classbridge.monitoring.sentry_sdk")
    def test_success_returns_result(self, mock_sdk):
        @track_service_operation("store_read", module="user_settings")
        def read(x):
            return x * 2

        self.assertEqual(read(4), 8)
        mock_sdk.start_span.assert_called_once_with(op="service.user_settings", name="service.store_read")


class SentryMonitorTests(SimpleTestCase):
    @patch("classbridge.monitoring.logger")
    def test_slow_operations_warn(self, mock_logger):
        SentryMonitor.log_operation_result("chat", "messages", "1", 200, 3.0)
        mock_logger.warning.assert_called_once()
        SentryMonitor.log_operation_result("chat", "messages", "1", 200, 6.0)
        mock_logger.error.assert_called_once()
