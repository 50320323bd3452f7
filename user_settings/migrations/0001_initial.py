from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("display_name", models.CharField(blank=True, max_length=150, null=True)),
                ("email", models.EmailField(max_length=254)),
            ],
            options={
                "db_table": "profiles",
            },
        ),
    ]
