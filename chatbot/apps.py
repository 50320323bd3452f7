from django.apps import AppConfig


class ChatbotConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "chatbot"

    def ready(self):
        from .config import get_completion_settings

        # Read the credential once at process start
        get_completion_settings()
