# chat/views.py
from rest_framework.decorators import api_view
from rest_framework.response import Response
import logging

from authentication.helpers import AUTHENTICATION_REQUIRED, get_session_user_id
from classbridge.monitoring import track_transaction
from .controller import SubmitStatus, build_controller, SEND_FAILED

log = logging.getLogger(__name__)


def _payload(request):
    """DRF-parsed body; anything that is not an object counts as empty."""
    data = getattr(request, "data", None)
    return data if isinstance(data, dict) else {}


def _serialize_view(controller) -> list:
    return [m.as_dict() for m in controller.view.messages]


def _serialize_notices(controller) -> list:
    return [{"level": n.level, "text": n.text} for n in controller.drain_notices()]


@api_view(["GET", "POST"])
@track_transaction("messages")
def messages(request):
    """GET: full history + profile for the signed-in user
       POST: submit one message and return the turns it produced
    """
    user_id = get_session_user_id(request)
    if not user_id:
        return Response({"error": AUTHENTICATION_REQUIRED}, status=401)

    if request.method == "GET":
        controller = build_controller(user_id)
        controller.start()
        return Response(
            {
                "messages": _serialize_view(controller),
                "profile": controller.profile.as_dict() if controller.profile else None,
                "notices": _serialize_notices(controller),
            },
            status=200,
        )

    # POST → one round trip
    content = _payload(request).get("content")
    if not isinstance(content, str) or not content.strip():
        return Response({"error": "empty message"}, status=400)

    controller = build_controller(user_id)
    controller.start()
    result = controller.submit(content)
    new_messages = [m.as_dict() for m in result.messages]

    if result.status is SubmitStatus.SENT:
        return Response({"messages": new_messages, "notices": _serialize_notices(controller)}, status=200)

    log.warning("Submission for user %s ended with %s", user_id, result.status.value)
    return Response(
        {"error": SEND_FAILED, "messages": new_messages, "notices": _serialize_notices(controller)},
        status=502,
    )
