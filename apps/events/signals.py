"""Signals for the events app."""

from django.db.models.signals import pre_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.text import slugify

from .models import Event


@receiver(pre_save, sender=Event)
def create_event_slug(sender, instance, **kwargs):
    """Create a slug for the event if not set."""
    if not instance.slug:
        base_slug = slugify(instance.title) or 'event'

        counter = 1
        slug = base_slug
        while Event.objects.filter(slug=slug).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1

        instance.slug = slug


@receiver(pre_save, sender=Event)
def mark_past_events(sender, instance, **kwargs):
    """Flip upcoming events whose date has passed to 'past'."""
    if instance.status == 'upcoming' and instance.date and instance.date < timezone.now():
        instance.status = 'past'
