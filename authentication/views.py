from django.http import JsonResponse
from django.views.decorators.http import require_POST
from django.views.decorators.csrf import csrf_exempt
from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .forms import SignInForm, SignUpForm
from authentication.helpers import parse_json_body, set_user_session, build_success_response

import logging

User = get_user_model()

logger = logging.getLogger(__name__)


def _form_errors(form):
    return {field: errors[0] for field, errors in form.errors.items()}


@csrf_exempt
@require_POST
def sign_up(request):
    data, error_response = parse_json_body(request)
    if error_response:
        return error_response

    form = SignUpForm(data)
    if not form.is_valid():
        return JsonResponse({"errors": _form_errors(form)}, status=400)

    email = form.cleaned_data['email']
    try:
        with transaction.atomic():
            # The profile row is created by user_settings.signals
            user = User.objects.create_user(
                username=email,
                email=email,
                password=form.cleaned_data['password'],
            )
    except IntegrityError:
        return JsonResponse({"error": "User already registered"}, status=409)

    logger.info(f"✅ Account created for {email}")
    set_user_session(request, user)
    return JsonResponse(
        {
            "user_id": str(user.pk),
            "email": user.email,
            "message": "Account created successfully!",
        },
        status=201,
    )


@csrf_exempt
@require_POST
def sign_in(request):
    data, error_response = parse_json_body(request)
    if error_response:
        return error_response

    form = SignInForm(data)
    if not form.is_valid():
        return JsonResponse({"errors": _form_errors(form)}, status=400)

    user = form.authenticate()
    if user is None:
        logger.warning(f"⚠️ Failed sign-in for {form.cleaned_data['email']}")
        return JsonResponse({"error": "Invalid login credentials"}, status=401)

    set_user_session(request, user)
    return JsonResponse(build_success_response(user), status=200)


@csrf_exempt
@require_POST
def sign_out(request):
    request.session.flush()
    return JsonResponse({"message": "Signed out successfully"}, status=200)
