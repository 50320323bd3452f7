from django.apps import AppConfig


class UserSettingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "user_settings"

    def ready(self):
        from . import signals  # noqa: F401
