"""Models for the bookings app."""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from core.utils import generate_unique_code

from . import lifecycle


def generate_booking_reference():
    """Generate a human-readable booking reference."""
    return generate_unique_code(prefix='BKG-', length=8)


class Booking(BaseModel):
    """
    One purchase attempt for an event.

    Tickets live in ``ticket_details`` (see ``apps.bookings.lifecycle``).
    ``cancelled_tickets`` is a read-only projection of it, rewritten on every
    save for clients that still read the old list.
    """

    STATUS_CHOICES = (
        ('pending', _('Pending')),
        ('confirmed', _('Confirmed')),
        ('cancelled', _('Cancelled')),
    )

    PAYMENT_STATUS_CHOICES = (
        ('pending', _('Pending')),
        ('completed', _('Completed')),
        ('failed', _('Failed')),
    )

    booking_id = models.CharField(
        _("booking reference"),
        max_length=20,
        unique=True,
        default=generate_booking_reference,
        editable=False
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bookings',
        verbose_name=_("user")
    )
    event = models.ForeignKey(
        'events.Event',
        on_delete=models.PROTECT,
        related_name='bookings',
        verbose_name=_("event")
    )
    quantity = models.PositiveIntegerField(_("quantity"), validators=[MinValueValidator(1)])
    total_price = models.DecimalField(_("total price"), max_digits=12, decimal_places=2)
    attendee_details = models.JSONField(_("attendee details"), default=list)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending',
        db_index=True
    )
    payment_status = models.CharField(
        _("payment status"),
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default='pending'
    )

    # Payment gateway linkage
    razorpay_order_id = models.CharField(
        _("Razorpay order ID"), max_length=100, unique=True, null=True, blank=True
    )
    razorpay_payment_id = models.CharField(
        _("Razorpay payment ID"), max_length=100, unique=True, null=True, blank=True
    )
    razorpay_signature = models.CharField(_("Razorpay signature"), max_length=255, blank=True)

    # Tickets
    ticket_numbers = models.JSONField(_("ticket numbers"), default=list, blank=True)
    ticket_details = models.JSONField(_("ticket details"), default=list, blank=True)
    cancelled_tickets = models.JSONField(_("cancelled tickets"), default=list, blank=True)
    verified_tickets = models.JSONField(_("verified tickets"), default=list, blank=True)

    # Expiry
    is_expired = models.BooleanField(_("expired"), default=False, db_index=True)
    expiry_checked_at = models.DateTimeField(_("expiry checked at"), null=True, blank=True)

    # Booking-level cancellation
    cancelled_at = models.DateTimeField(_("cancelled at"), null=True, blank=True)
    cancellation_reason = models.TextField(_("cancellation reason"), blank=True)

    needs_reconciliation = models.BooleanField(
        _("needs reconciliation"),
        default=False,
        help_text=_("A follow-up write (such as inventory) failed after this booking was saved.")
    )
    reconciliation_note = models.TextField(_("reconciliation note"), blank=True)

    class Meta:
        verbose_name = _("booking")
        verbose_name_plural = _("bookings")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
            models.Index(fields=['event', 'status'], name='booking_event_status_idx'),
        ]

    def __str__(self):
        return f"{self.booking_id} - {self.event_id} ({self.status})"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        deferred = instance.get_deferred_fields()
        if not deferred & {'ticket_details', 'ticket_numbers', 'attendee_details', 'cancelled_tickets', 'is_expired'}:
            lifecycle.materialize_ticket_details(instance)
        return instance

    def save(self, *args, **kwargs):
        self.cancelled_tickets = lifecycle.cancelled_ticket_numbers(self)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'ticket_details' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'cancelled_tickets'}
        super().save(*args, **kwargs)

    @property
    def is_pending(self):
        return self.status == 'pending'

    @property
    def is_confirmed(self):
        return self.status == 'confirmed'

    @property
    def is_cancelled(self):
        return self.status == 'cancelled'

    @property
    def active_ticket_count(self):
        return sum(1 for t in self.ticket_details or [] if t.get('status') == lifecycle.TICKET_ACTIVE)

    def mark_for_reconciliation(self, note):
        """Flag the booking after a failed follow-up write. Saves only the flag fields."""
        self.needs_reconciliation = True
        self.reconciliation_note = note
        self.save(update_fields=['needs_reconciliation', 'reconciliation_note', 'updated_at'])
