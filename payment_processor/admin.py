from django.contrib import admin
from .models import PaymentTransaction


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = (
        'transaction_type', 'provider', 'gateway_order_id', 'booking',
        'is_successful', 'duration_ms', 'created_at'
    )
    list_filter = ('transaction_type', 'provider', 'is_successful')
    search_fields = ('gateway_order_id', 'booking__booking_id', 'error_message')
    readonly_fields = ('created_at', 'updated_at', 'request_data', 'response_data')
    ordering = ('-created_at',)
