"""
Payment processor models.
Audit log of every call made to the payment gateway.
"""

from django.db import models
from core.models import BaseModel


class PaymentTransaction(BaseModel):
    """
    Individual gateway call, kept for audit and debugging.
    Secrets and signatures are never stored here.
    """
    TRANSACTION_TYPES = [
        ('create_order', 'Create Order'),
        ('verify_signature', 'Verify Signature'),
    ]

    PROVIDER_CHOICES = [
        ('razorpay', 'Razorpay'),
    ]

    booking = models.ForeignKey(
        'bookings.Booking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payment_transactions'
    )
    provider = models.CharField(max_length=30, choices=PROVIDER_CHOICES, default='razorpay')
    transaction_type = models.CharField(max_length=30, choices=TRANSACTION_TYPES)
    gateway_order_id = models.CharField(max_length=100, blank=True, db_index=True)

    # Request/Response data for debugging
    request_data = models.JSONField(default=dict)
    response_data = models.JSONField(default=dict)

    # Status
    is_successful = models.BooleanField(default=False)
    error_message = models.TextField(blank=True)

    # Timing
    duration_ms = models.IntegerField(null=True, help_text="Request duration in milliseconds")

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['booking', 'created_at'], name='paytx_booking_created_idx'),
            models.Index(fields=['transaction_type', 'created_at'], name='paytx_type_created_idx'),
        ]

    def __str__(self):
        status = "✅" if self.is_successful else "❌"
        return f"{status} {self.transaction_type} - {self.gateway_order_id or self.booking_id}"
