from django.urls import path, include

urlpatterns = [
    path("auth/", include("authentication.urls")),
    path("api/chat/", include("chat.urls")),
    path("api/user-settings/", include("user_settings.urls")),
    # Mirrors the edge-function route the browser client invokes
    path("functions/v1/", include("chatbot.urls")),
]
