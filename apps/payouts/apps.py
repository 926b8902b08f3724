"""App configuration for the payouts app."""

from django.apps import AppConfig


class PayoutsConfig(AppConfig):
    """Organizer payouts and platform settings."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.payouts'
    verbose_name = 'Payouts'
