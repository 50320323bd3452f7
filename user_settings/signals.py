import logging
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_profile_for_new_user(sender, instance, created, **kwargs):
    if not created:
        return

    _, made = Profile.objects.get_or_create(
        id=str(instance.pk),
        defaults={"email": instance.email},
    )
    if made:
        logger.info("Created profile for user %s", instance.pk)
