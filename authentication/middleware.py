from django.utils.deprecation import MiddlewareMixin
from django.contrib.auth import get_user_model

from authentication.helpers import SESSION_USER_ID, SESSION_EMAIL

User = get_user_model()


class SessionIdentityMiddleware(MiddlewareMixin):
    """
    Resolve the signed-in user's identifier from the session.

    Sets ``request.user_id`` to the user's primary key as a string, or None
    when the session is anonymous, stale, or belongs to a deactivated account.
    """
    def process_request(self, request):
        request.user_id = None
        user_id = request.session.get(SESSION_USER_ID)
        email = request.session.get(SESSION_EMAIL)

        if not user_id or not email:
            return

        if User.objects.filter(pk=user_id, email=email, is_active=True).exists():
            request.user_id = str(user_id)
