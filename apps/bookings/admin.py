from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        'booking_id', 'event', 'user', 'quantity', 'total_price', 'status',
        'payment_status', 'is_expired', 'needs_reconciliation', 'created_at'
    )
    search_fields = (
        'booking_id', 'user__email', 'event__title',
        'razorpay_order_id', 'razorpay_payment_id'
    )
    list_filter = ('status', 'payment_status', 'is_expired', 'needs_reconciliation')
    readonly_fields = (
        'booking_id', 'razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature',
        'ticket_numbers', 'cancelled_tickets', 'created_at', 'updated_at'
    )
    raw_id_fields = ('user', 'event')
    ordering = ('-created_at',)
