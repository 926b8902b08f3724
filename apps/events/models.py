"""Models for the events app."""

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Event(BaseModel):
    """An organizer's event with its ticket inventory."""

    STATUS_CHOICES = (
        ('upcoming', _('Upcoming')),
        ('past', _('Past')),
        ('cancelled', _('Cancelled')),
    )

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='events',
        verbose_name=_("organizer")
    )
    title = models.CharField(_("title"), max_length=255)
    slug = models.SlugField(_("slug"), max_length=255, unique=True, blank=True)
    description = models.TextField(_("description"), blank=True)
    category = models.CharField(_("category"), max_length=100, db_index=True)
    date = models.DateTimeField(_("date"), db_index=True)
    location = models.CharField(_("location"), max_length=255)
    price = models.DecimalField(_("price"), max_digits=10, decimal_places=2)
    image_url = models.URLField(_("image URL"), max_length=500, blank=True)
    total_tickets = models.PositiveIntegerField(_("total tickets"), default=0)
    # Not clamped: confirmations may drive it below zero when pending bookings oversell
    available_tickets = models.IntegerField(_("available tickets"), default=0)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default='upcoming',
        db_index=True
    )
    booking_expiry = models.DateTimeField(
        _("booking expiry"),
        help_text=_("New bookings are rejected after this instant.")
    )

    class Meta:
        verbose_name = _("event")
        verbose_name_plural = _("events")
        ordering = ['date']

    def __str__(self):
        return self.title

    @property
    def is_past(self):
        """Check if the event date has passed."""
        return self.date < timezone.now()

    @property
    def is_booking_open(self):
        """Check if the event still accepts new bookings."""
        return self.status != 'cancelled' and timezone.now() <= self.booking_expiry

    @classmethod
    def adjust_inventory(cls, event_id, delta):
        """
        Move available_tickets by `delta` in a single UPDATE and return the new value.

        The increment runs in the database, so concurrent adjustments never
        overwrite each other.
        """
        updated = cls.objects.filter(pk=event_id).update(
            available_tickets=F('available_tickets') + delta
        )
        if not updated:
            raise cls.DoesNotExist(f"Event {event_id} not found")
        return cls.objects.values_list('available_tickets', flat=True).get(pk=event_id)
