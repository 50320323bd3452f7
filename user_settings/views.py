import logging
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods
from authentication.helpers import parse_json_body, get_session_user_id, authentication_required_response
from classbridge.monitoring import track_transaction, SentryMonitor
from .serializers import DisplayNameSerializer
from .services.profiles import ProfileError, ProfileNotFound, get_profile_service

logger = logging.getLogger(__name__)

INVALID_PAYLOAD = "invalid payload"
PROFILE_NOT_FOUND = "Profile not found"
UPDATE_FAILED = "Failed to update display name. Please try again."

CATEGORY_VALIDATION = "user_settings.validation"


@require_GET
@track_transaction("user_profile", module="user_settings")
def user_profile(request):
    """
    Return the signed-in user's profile.

    Returns:
    - 200: {"user_id", "display_name", "email", "label"}
    - 401: not signed in
    - 404: no profile row for this user
    - 500: profile store failure
    """
    user_id = get_session_user_id(request)
    if not user_id:
        return authentication_required_response()

    try:
        profile = get_profile_service().load(user_id)
    except ProfileNotFound:
        logger.warning(f"⚠️ No profile row for user {user_id}")
        return JsonResponse({"error": PROFILE_NOT_FOUND}, status=404)
    except ProfileError as e:
        logger.error(f"❌ Error loading profile for user {user_id}: {e}")
        return JsonResponse({"error": "Failed to load profile"}, status=500)

    return JsonResponse(profile.as_dict(), status=200)


@csrf_exempt
@require_http_methods(["POST", "PATCH"])
@track_transaction("update_display_name", module="user_settings")
def update_display_name(request):
    """
    Overwrite the signed-in user's display name.

    Expected JSON payload:
    {
        "display_name": "New name"
    }

    Returns:
    - 200: {"success": true, "display_name": ..., "message": ...}
    - 400: name missing or blank after trimming
    - 401: not signed in
    - 404: no profile row for this user
    - 500: profile store failure
    """
    user_id = get_session_user_id(request)
    if not user_id:
        return authentication_required_response()

    data, error_response = parse_json_body(request)
    if error_response:
        return error_response
    if not isinstance(data, dict):
        return JsonResponse({"error": INVALID_PAYLOAD}, status=400)

    serializer = DisplayNameSerializer(data=data)
    if not serializer.is_valid():
        SentryMonitor.add_breadcrumb(
            "Display name validation failed",
            category=CATEGORY_VALIDATION,
            level="warning",
            data={"errors": serializer.errors},
        )
        return JsonResponse({
            "error": "Validation failed",
            "validation_errors": serializer.errors,
        }, status=400)

    try:
        result = get_profile_service().update_display_name(user_id, serializer.cleaned_data["display_name"])
    except ProfileNotFound:
        return JsonResponse({"error": PROFILE_NOT_FOUND}, status=404)
    except ProfileError as e:
        logger.error(f"❌ Error updating display name for user {user_id}: {e}")
        return JsonResponse({"error": UPDATE_FAILED}, status=500)

    if not result.success:
        return JsonResponse({"error": result.message}, status=400)

    return JsonResponse({
        "success": True,
        "display_name": result.display_name,
        "message": result.message,
    }, status=200)
