from django.db import models
from django.utils import timezone
import uuid


class Message(models.Model):
    class Role(models.TextChoices):
        USER = "user", "user"
        ASSISTANT = "assistant", "assistant"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)
    role = models.CharField(max_length=10, choices=Role.choices)
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "messages"
        ordering = ["created_at"]
        indexes = [models.Index(fields=["user_id", "created_at"], name="messages_user_created_idx")]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=["user", "assistant"]),
                name="messages_role_valid",
            ),
        ]

    def __str__(self):
        return f"{self.role}: {self.content[:40]}"
