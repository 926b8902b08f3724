"""Serializers for events API."""

from rest_framework import serializers

from apps.events.models import Event


class EventSerializer(serializers.ModelSerializer):
    """
    Event with camelCase keys.

    ``availableTickets`` is read-only: it starts equal to ``totalTickets``
    and afterwards only moves through bookings or a change of
    ``totalTickets``.
    """
    _id = serializers.UUIDField(source='id', read_only=True)
    imageUrl = serializers.URLField(source='image_url', required=False, allow_blank=True, max_length=500)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, coerce_to_string=False)
    totalTickets = serializers.IntegerField(source='total_tickets', min_value=0, required=False, default=0)
    availableTickets = serializers.IntegerField(source='available_tickets', read_only=True)
    bookingExpiry = serializers.DateTimeField(source='booking_expiry')
    organizerId = serializers.IntegerField(source='organizer_id', read_only=True)
    organizerName = serializers.CharField(source='organizer.get_full_name', read_only=True)
    organizationName = serializers.CharField(source='organizer.organization_name', read_only=True)
    isBookingOpen = serializers.BooleanField(source='is_booking_open', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Event
        fields = [
            '_id', 'title', 'slug', 'description', 'category', 'date', 'location', 'price',
            'imageUrl', 'totalTickets', 'availableTickets', 'status', 'bookingExpiry',
            'organizerId', 'organizerName', 'organizationName', 'isBookingOpen', 'createdAt',
        ]
        read_only_fields = ['slug', 'status']

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title is required')
        return value

    def validate_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Category is required')
        return value

    def create(self, validated_data):
        validated_data['available_tickets'] = validated_data.get('total_tickets', 0)
        return super().create(validated_data)

    def update(self, instance, validated_data):
        """Apply changes; a new ticket total shifts available tickets by the same delta."""
        delta = 0
        if 'total_tickets' in validated_data:
            delta = validated_data['total_tickets'] - instance.total_tickets

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        # available_tickets is left out so concurrent bookings are not overwritten
        instance.save(update_fields=list(validated_data.keys()) + ['status', 'updated_at'])

        if delta:
            instance.available_tickets = Event.adjust_inventory(instance.pk, delta)
        return instance
