from django.urls import re_path
from . import views

app_name = "chatbot"

urlpatterns = [
    # Edge-function style route; accepted with or without trailing slash
    re_path(r"^chatbot/?$", views.chatbot, name="chatbot"),
]
