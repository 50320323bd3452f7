import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Message",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.CharField(db_index=True, max_length=64)),
                ("role", models.CharField(choices=[("user", "user"), ("assistant", "assistant")], max_length=10)),
                ("content", models.TextField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
            ],
            options={
                "db_table": "messages",
                "ordering": ["created_at"],
                "indexes": [models.Index(fields=["user_id", "created_at"], name="messages_user_created_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("role__in", ["user", "assistant"])),
                        name="messages_role_valid",
                    )
                ],
            },
        ),
    ]
