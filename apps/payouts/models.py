"""Models for payouts and platform-wide settings."""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class SystemSettings(BaseModel):
    """
    Platform-wide runtime settings, edited by superadmins.

    A single row keyed by settings_type='global'. Always read it through
    ``SystemSettings.load()``.
    """

    PAYOUT_CYCLE_CHOICES = (
        ('weekly', _('Weekly')),
        ('bi-weekly', _('Bi-weekly')),
        ('monthly', _('Monthly')),
    )

    settings_type = models.CharField(_("settings type"), max_length=20, unique=True, default='global')

    maintenance_mode = models.BooleanField(_("maintenance mode"), default=False)
    maintenance_message = models.TextField(
        _("maintenance message"),
        default='We are currently under maintenance. Please check back soon.'
    )

    commission_rate = models.DecimalField(
        _("commission rate (%)"),
        max_digits=5,
        decimal_places=2,
        default=Decimal('10.00'),
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    platform_fee = models.DecimalField(
        _("platform fee"), max_digits=10, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(0)]
    )
    minimum_payout = models.DecimalField(
        _("minimum payout"), max_digits=12, decimal_places=2, default=Decimal('1000.00')
    )
    payout_cycle = models.CharField(
        _("payout cycle"), max_length=20, choices=PAYOUT_CYCLE_CHOICES, default='monthly'
    )

    allow_new_registrations = models.BooleanField(_("allow new registrations"), default=True)
    allow_new_bookings = models.BooleanField(_("allow new bookings"), default=True)
    allow_new_events = models.BooleanField(_("allow new events"), default=True)

    contact_email = models.EmailField(_("contact email"), default='support@gettogether.in')
    contact_phone = models.CharField(_("contact phone"), max_length=30, blank=True)

    class Meta:
        verbose_name = _("system settings")
        verbose_name_plural = _("system settings")

    def __str__(self):
        return f"System settings ({self.settings_type})"

    @classmethod
    def load(cls):
        """Return the global settings row, creating it with defaults on first use."""
        settings_obj, _ = cls.objects.get_or_create(settings_type='global')
        return settings_obj


class Payout(BaseModel):
    """Organizer earnings owed or paid out, net of platform commission."""

    STATUS_CHOICES = (
        ('pending', _('Pending')),
        ('processing', _('Processing')),
        ('completed', _('Completed')),
        ('failed', _('Failed')),
        ('cancelled', _('Cancelled')),
    )

    PAYOUT_METHOD_CHOICES = (
        ('bank_transfer', _('Bank transfer')),
        ('upi', _('UPI')),
        ('paypal', _('PayPal')),
        ('other', _('Other')),
    )

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payouts',
        verbose_name=_("organizer")
    )
    event = models.ForeignKey(
        'events.Event',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payouts',
        verbose_name=_("event")
    )
    amount = models.DecimalField(_("gross amount"), max_digits=12, decimal_places=2)
    commission_rate = models.DecimalField(_("commission rate (%)"), max_digits=5, decimal_places=2)
    commission_amount = models.DecimalField(_("commission amount"), max_digits=12, decimal_places=2)
    net_amount = models.DecimalField(_("net amount"), max_digits=12, decimal_places=2)
    status = models.CharField(
        _("status"), max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True
    )
    payout_method = models.CharField(
        _("payout method"), max_length=20, choices=PAYOUT_METHOD_CHOICES, default='bank_transfer'
    )
    payout_details = models.JSONField(
        _("payout details"), default=dict, blank=True,
        help_text=_("accountNumber, ifscCode, accountHolderName, upiId")
    )
    transaction_id = models.CharField(_("transaction ID"), max_length=100, blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_payouts',
        verbose_name=_("processed by")
    )
    processed_at = models.DateTimeField(_("processed at"), null=True, blank=True)
    notes = models.TextField(_("notes"), blank=True)
    period_start = models.DateTimeField(_("period start"), null=True, blank=True)
    period_end = models.DateTimeField(_("period end"), null=True, blank=True)

    class Meta:
        verbose_name = _("payout")
        verbose_name_plural = _("payouts")
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organizer', 'status'], name='payout_organizer_status_idx'),
        ]

    def __str__(self):
        return f"Payout {self.net_amount} to {self.organizer} ({self.status})"
