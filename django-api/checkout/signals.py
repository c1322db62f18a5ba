"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from checkout import cache as cache_keys
from checkout.models import Content, PlatformSettings


@receiver([post_save, post_delete], sender=Content)
def invalidate_content_cache(sender, instance, **kwargs):
    """Invalidate the detail entry and list pages when a content changes."""
    cache_keys.invalidate_content(instance.pk)


@receiver([post_save, post_delete], sender=PlatformSettings)
def invalidate_settings_cache(sender, instance, **kwargs):
    """Drop cached platform settings so fees and SMTP changes apply at once."""
    cache_keys.invalidate_settings()
