import json
from django.http import JsonResponse

AUTHENTICATION_REQUIRED = "Authentication required"

SESSION_USER_ID = "user_id"
SESSION_EMAIL = "email"


def parse_json_body(request):
    raw = request.body or b''
    if not raw.strip():
        return {}, None
    try:
        text = raw.decode('utf-8')
        return json.loads(text), None
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None, JsonResponse({"error": "invalid payload"}, status=400)


def set_user_session(request, user):
    request.session.cycle_key()
    request.session[SESSION_USER_ID] = str(user.pk)
    request.session[SESSION_EMAIL] = user.email


def get_session_user_id(request):
    """Identity resolved by SessionIdentityMiddleware, or None."""
    return getattr(request, "user_id", None)


def authentication_required_response():
    return JsonResponse({"error": AUTHENTICATION_REQUIRED}, status=401)


def build_success_response(user):
    return {
        "user_id": str(user.pk),
        "email": user.email,
        "message": "Welcome back!",
    }
