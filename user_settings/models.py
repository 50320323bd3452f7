from django.db import models


class Profile(models.Model):
    # Same value as the auth user's identifier
    id = models.CharField(primary_key=True, max_length=64)
    display_name = models.CharField(max_length=150, null=True, blank=True)
    email = models.EmailField()

    class Meta:
        db_table = "profiles"

    def __str__(self):
        return self.display_name or self.email
