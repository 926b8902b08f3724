"""Serializers for bookings API."""

from rest_framework import serializers
from django.contrib.auth import get_user_model

from apps.bookings.lifecycle import VERIFICATION_APPROVED, VERIFICATION_STATUSES
from apps.bookings.models import Booking
from apps.events.models import Event
from core.phone_utils import normalize_phone_e164

User = get_user_model()


class AttendeeSerializer(serializers.Serializer):
    """One attendee of a booking. The phone is stored normalized."""
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30)

    def validate_email(self, value):
        return value.lower().strip()

    def validate_phone(self, value):
        normalized = normalize_phone_e164(value)
        if not normalized:
            raise serializers.ValidationError(f'Invalid phone number: {value}')
        return normalized


class CreateBookingSerializer(serializers.Serializer):
    eventId = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    attendeeDetails = AttendeeSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        if attrs['quantity'] != len(attrs['attendeeDetails']):
            raise serializers.ValidationError('Quantity must match attendee details count')
        return attrs


class VerifyPaymentSerializer(serializers.Serializer):
    razorpayOrderId = serializers.CharField(max_length=100)
    razorpayPaymentId = serializers.CharField(max_length=100)
    razorpaySignature = serializers.CharField(max_length=255)
    bookingId = serializers.CharField()


class VerifyTicketSerializer(serializers.Serializer):
    ticketNumber = serializers.CharField(max_length=64)
    bookingId = serializers.CharField()
    verificationStatus = serializers.ChoiceField(
        choices=VERIFICATION_STATUSES,
        default=VERIFICATION_APPROVED,
        error_messages={'invalid_choice': 'Verification status must be "approved" or "denied"'}
    )


class CancelTicketSerializer(serializers.Serializer):
    bookingId = serializers.CharField()
    ticketNumber = serializers.CharField(max_length=64)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class TicketStatusQuerySerializer(serializers.Serializer):
    ticketNumber = serializers.CharField(max_length=64)
    bookingId = serializers.CharField()


class BookingEventSerializer(serializers.ModelSerializer):
    """Event summary embedded in booking responses."""
    _id = serializers.UUIDField(source='id', read_only=True)
    imageUrl = serializers.CharField(source='image_url', read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    organizationName = serializers.CharField(source='organizer.organization_name', read_only=True)

    class Meta:
        model = Event
        fields = ['_id', 'title', 'date', 'location', 'price', 'category', 'imageUrl', 'status', 'organizationName']


class BookingUserSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='id', read_only=True)
    name = serializers.CharField(source='get_full_name', read_only=True)
    phone = serializers.CharField(source='phone_number', read_only=True)

    class Meta:
        model = User
        fields = ['_id', 'name', 'email', 'phone']


class BookingSerializer(serializers.ModelSerializer):
    """Read representation of a booking, camelCase for API clients."""
    _id = serializers.UUIDField(source='id', read_only=True)
    bookingId = serializers.CharField(source='booking_id', read_only=True)
    event = BookingEventSerializer(read_only=True)
    totalPrice = serializers.DecimalField(
        source='total_price', max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    attendeeDetails = serializers.JSONField(source='attendee_details', read_only=True)
    paymentStatus = serializers.CharField(source='payment_status', read_only=True)
    razorpayOrderId = serializers.CharField(source='razorpay_order_id', read_only=True)
    ticketNumbers = serializers.JSONField(source='ticket_numbers', read_only=True)
    ticketDetails = serializers.JSONField(source='ticket_details', read_only=True)
    cancelledTickets = serializers.JSONField(source='cancelled_tickets', read_only=True)
    verifiedTickets = serializers.JSONField(source='verified_tickets', read_only=True)
    isExpired = serializers.BooleanField(source='is_expired', read_only=True)
    expiryCheckedAt = serializers.DateTimeField(source='expiry_checked_at', read_only=True)
    cancelledAt = serializers.DateTimeField(source='cancelled_at', read_only=True)
    cancellationReason = serializers.CharField(source='cancellation_reason', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Booking
        fields = [
            '_id', 'bookingId', 'event', 'quantity', 'totalPrice', 'attendeeDetails',
            'status', 'paymentStatus', 'razorpayOrderId', 'ticketNumbers', 'ticketDetails',
            'cancelledTickets', 'verifiedTickets', 'isExpired', 'expiryCheckedAt',
            'cancelledAt', 'cancellationReason', 'createdAt',
        ]


class OrganizerBookingSerializer(BookingSerializer):
    """Booking as seen by the event organizer, with the buyer's contact details."""
    user = BookingUserSerializer(read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ['user']
