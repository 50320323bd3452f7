"""
Sentry monitoring utilities shared by the chat, proxy and profile views.
Provides decorators and helpers for tracking performance and errors.

All ``sentry_sdk`` calls are no-ops until ``sentry_sdk.init`` has run, which
settings only does when ``SENTRY_DSN`` is configured.
"""

import functools
import time
from typing import Callable, Optional, Dict
import logging

import sentry_sdk

logger = logging.getLogger(__name__)

# Performance thresholds (in seconds)
SLOW_OPERATION_THRESHOLD = 2.0
CRITICAL_OPERATION_THRESHOLD = 5.0


class SentryMonitor:
    """Breadcrumb and context helpers for request/service operations."""

    COMPONENT_VIEW = "view"
    COMPONENT_SERVICE = "service"

    @staticmethod
    def set_operation_context(module: str, operation: str, user_id: str, additional_data: Optional[Dict] = None):
        """Set context for the current operation."""
        context = {"operation": operation, "user_id": user_id, "module": module,
                   "timestamp": time.time(), **(additional_data or {})}
        sentry_sdk.set_context("operation_context", context)
        sentry_sdk.set_tag("module", module)
        sentry_sdk.set_tag("operation", operation)

    @staticmethod
    def add_breadcrumb(message: str, category: str = "classbridge", level: str = "info", data: Optional[Dict] = None):
        """Add a breadcrumb to track execution flow."""
        sentry_sdk.add_breadcrumb(category=category, message=message, level=level, data=data or {})

    @staticmethod
    def capture_exception(exc: BaseException, context: Optional[Dict] = None):
        if context:
            sentry_sdk.set_context("error_context", context)
        sentry_sdk.capture_exception(exc)

    @staticmethod
    def log_operation_result(module: str, operation: str, user_id: str, status_code: int, execution_time: float):
        """Log operation result locally with performance warnings."""
        if not 200 <= status_code < 300:
            logger.warning(f"❌ {module}.{operation} returned {status_code} for {user_id} in {execution_time:.3f}s")
        elif execution_time > CRITICAL_OPERATION_THRESHOLD:
            logger.error(f"🚨 CRITICAL: {module}.{operation} took {execution_time:.3f}s for {user_id}")
        elif execution_time > SLOW_OPERATION_THRESHOLD:
            logger.warning(f"⚠️ SLOW: {module}.{operation} took {execution_time:.3f}s for {user_id}")
        else:
            logger.info(f"✅ {module}.{operation} completed in {execution_time:.3f}s for {user_id}")


def track_transaction(operation_name: str, module: str = "chat"):
    """
    Decorator to track a view with a Sentry transaction.

    Records execution time, the response status as a tag, and captures
    exceptions before re-raising them.

    Usage:
        @track_transaction("send_message")
        def send_message(request):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            request = args[0] if args else None
            user_id = getattr(request, "user_id", None) or "anonymous"

            SentryMonitor.set_operation_context(module, operation_name, user_id)
            SentryMonitor.add_breadcrumb(
                f"Starting {operation_name}",
                category=f"{module}.{SentryMonitor.COMPONENT_VIEW}",
                data={"function": func.__name__, "method": getattr(request, "method", "unknown")},
            )

            with sentry_sdk.start_transaction(op=module, name=f"{module}.{operation_name}") as transaction:
                start_time = time.time()
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    execution_time = time.time() - start_time
                    logger.error(f"❌ Exception in {operation_name}: {type(e).__name__}: {str(e)}")
                    SentryMonitor.capture_exception(e)
                    transaction.set_status("internal_error")
                    raise

                execution_time = time.time() - start_time
                status_code = getattr(result, "status_code", 200)
                transaction.set_tag("http_status", status_code)
                transaction.set_status("ok" if 200 <= status_code < 300 else "unknown_error")
                SentryMonitor.log_operation_result(module, operation_name, user_id, status_code, execution_time)
                return result
        return wrapper
    return decorator


def track_service_operation(operation_name: str, module: str = "chat"):
    """
    Decorator to wrap a service-layer call in a Sentry child span.

    Usage:
        @track_service_operation("append_message")
        def append(self, user_id, role, content):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with sentry_sdk.start_span(op=f"service.{module}", name=f"service.{operation_name}") as span:
                start_time = time.time()
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    execution_time = time.time() - start_time
                    span.set_data("error_type", type(e).__name__)
                    span.set_data("execution_time", execution_time)
                    SentryMonitor.add_breadcrumb(
                        f"Error in {operation_name}: {e}",
                        category=f"{module}.{SentryMonitor.COMPONENT_SERVICE}", level="error",
                    )
                    logger.error(
                        f"❌ Service operation '{operation_name}' failed after {execution_time:.3f}s "
                        f"[error={type(e).__name__}: {str(e)}]"
                    )
                    raise

                execution_time = time.time() - start_time
                span.set_data("execution_time", execution_time)
                is_success = getattr(result, "success", True)
                logger.debug(
                    f"{'✅' if is_success else '⚠️'} Service operation '{operation_name}' completed in {execution_time:.3f}s"
                )
                return result
        return wrapper
    return decorator
