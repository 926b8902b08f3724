"""App configuration for the payment processor."""

from django.apps import AppConfig


class PaymentProcessorConfig(AppConfig):
    """Payment gateway bridge and its audit log."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'payment_processor'
    verbose_name = 'Payment Processor'
