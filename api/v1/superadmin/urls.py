"""URL Configuration for Super Admin API."""

from django.urls import path
from .views import (
    payouts,
    calculate_pending_payout,
    update_payout_status,
    generate_bulk_payouts,
    system_settings,
    toggle_maintenance_mode,
)

urlpatterns = [
    # Payouts
    path('payouts/', payouts, name='superadmin-payouts'),
    # IMPORTANT: Specific paths must come before generic ones
    path('payouts/bulk/', generate_bulk_payouts, name='superadmin-payouts-bulk'),
    path('payouts/calculate/<int:organizer_id>/', calculate_pending_payout, name='superadmin-payouts-calculate'),
    path('payouts/<uuid:payout_id>/status/', update_payout_status, name='superadmin-payout-status'),

    # Platform settings
    path('settings/', system_settings, name='superadmin-settings'),
    path('settings/maintenance/', toggle_maintenance_mode, name='superadmin-maintenance'),
]
