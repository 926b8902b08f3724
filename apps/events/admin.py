from django.contrib import admin
from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = (
        'title', 'organizer', 'status', 'date', 'location', 'category',
        'price', 'total_tickets', 'available_tickets', 'booking_expiry', 'created_at'
    )
    search_fields = ('title', 'organizer__email', 'category', 'location', 'description')
    list_filter = ('status', 'category', 'date')
    readonly_fields = ('created_at', 'updated_at', 'slug')
    ordering = ('-date',)
