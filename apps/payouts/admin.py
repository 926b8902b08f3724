from django.contrib import admin
from .models import Payout, SystemSettings


@admin.register(SystemSettings)
class SystemSettingsAdmin(admin.ModelAdmin):
    list_display = (
        'settings_type', 'maintenance_mode', 'commission_rate', 'minimum_payout',
        'allow_new_bookings', 'allow_new_events', 'updated_at'
    )
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = (
        'organizer', 'event', 'amount', 'commission_amount', 'net_amount',
        'status', 'payout_method', 'processed_at', 'created_at'
    )
    list_filter = ('status', 'payout_method')
    search_fields = ('organizer__email', 'organizer__organization_name', 'transaction_id')
    readonly_fields = ('created_at', 'updated_at', 'processed_at', 'processed_by')
    ordering = ('-created_at',)
