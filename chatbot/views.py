import logging
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from authentication.helpers import parse_json_body
from classbridge.monitoring import track_transaction
from .completion import relay, INTERNAL_ERROR, MESSAGE_REQUIRED

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _with_cors(response):
    for header, value in CORS_HEADERS.items():
        response[header] = value
    return response


@csrf_exempt
@track_transaction("completion_proxy", module="chatbot")
def chatbot(request):
    """
    Completion proxy endpoint.

    POST {"message": str} -> 200 {"response": str}
    Errors: 400 missing message, 500 unconfigured key, upstream failure
    (with "details"), unreadable body or internal error. OPTIONS answers
    the CORS preflight.
    """
    if request.method == "OPTIONS":
        return _with_cors(HttpResponse(b"", status=200))

    if request.method != "POST":
        return _with_cors(JsonResponse({"error": "Method not allowed"}, status=405))

    data, error_response = parse_json_body(request)
    if error_response or not (request.body or b"").strip():
        # Body that cannot be read as JSON at all
        logger.error("Unreadable chatbot request body")
        return _with_cors(JsonResponse({"error": INTERNAL_ERROR}, status=500))
    if not isinstance(data, dict):
        return _with_cors(JsonResponse({"error": MESSAGE_REQUIRED}, status=400))

    result = relay(data.get("message"))
    return _with_cors(JsonResponse(result.body, status=result.status))
