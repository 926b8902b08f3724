"""Serializers for the SuperAdmin API."""

from rest_framework import serializers
from django.contrib.auth import get_user_model

from apps.events.models import Event
from apps.payouts.models import Payout, SystemSettings

User = get_user_model()


class PayoutOrganizerSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='get_full_name', read_only=True)
    organizationName = serializers.CharField(source='organization_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'organizationName']


class PayoutSerializer(serializers.ModelSerializer):
    """Read representation of a payout."""
    _id = serializers.UUIDField(source='id', read_only=True)
    organizer = PayoutOrganizerSerializer(read_only=True)
    eventId = serializers.UUIDField(source='event_id', read_only=True)
    eventTitle = serializers.CharField(source='event.title', read_only=True, default=None)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, coerce_to_string=False)
    commissionRate = serializers.DecimalField(source='commission_rate', max_digits=5, decimal_places=2, coerce_to_string=False)
    commissionAmount = serializers.DecimalField(source='commission_amount', max_digits=12, decimal_places=2, coerce_to_string=False)
    netAmount = serializers.DecimalField(source='net_amount', max_digits=12, decimal_places=2, coerce_to_string=False)
    payoutMethod = serializers.CharField(source='payout_method')
    payoutDetails = serializers.JSONField(source='payout_details')
    transactionId = serializers.CharField(source='transaction_id')
    processedBy = serializers.EmailField(source='processed_by.email', read_only=True, default=None)
    processedAt = serializers.DateTimeField(source='processed_at')
    periodStart = serializers.DateTimeField(source='period_start')
    periodEnd = serializers.DateTimeField(source='period_end')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Payout
        fields = [
            '_id', 'organizer', 'eventId', 'eventTitle', 'amount', 'commissionRate',
            'commissionAmount', 'netAmount', 'status', 'payoutMethod', 'payoutDetails',
            'transactionId', 'processedBy', 'processedAt', 'notes', 'periodStart',
            'periodEnd', 'createdAt',
        ]
        read_only_fields = fields


class CreatePayoutSerializer(serializers.Serializer):
    organizerId = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_organizer=True))
    eventId = serializers.PrimaryKeyRelatedField(queryset=Event.objects.all(), required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    payoutMethod = serializers.ChoiceField(choices=Payout.PAYOUT_METHOD_CHOICES, default='bank_transfer')
    payoutDetails = serializers.JSONField(required=False, default=dict)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        event = attrs.get('eventId')
        if event is not None and event.organizer_id != attrs['organizerId'].id:
            raise serializers.ValidationError({'eventId': 'Event does not belong to this organizer'})
        return attrs


class PayoutStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payout.STATUS_CHOICES)
    transactionId = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class BulkPayoutSerializer(serializers.Serializer):
    periodStart = serializers.DateTimeField()
    periodEnd = serializers.DateTimeField()

    def validate(self, attrs):
        if attrs['periodStart'] >= attrs['periodEnd']:
            raise serializers.ValidationError('periodStart must be before periodEnd')
        return attrs


class SystemSettingsSerializer(serializers.ModelSerializer):
    maintenanceMode = serializers.BooleanField(source='maintenance_mode', required=False)
    maintenanceMessage = serializers.CharField(source='maintenance_message', required=False)
    commissionRate = serializers.DecimalField(
        source='commission_rate', max_digits=5, decimal_places=2,
        min_value=0, max_value=100, coerce_to_string=False, required=False
    )
    platformFee = serializers.DecimalField(
        source='platform_fee', max_digits=10, decimal_places=2, min_value=0, coerce_to_string=False, required=False
    )
    minimumPayout = serializers.DecimalField(
        source='minimum_payout', max_digits=12, decimal_places=2, min_value=0, coerce_to_string=False, required=False
    )
    payoutCycle = serializers.ChoiceField(source='payout_cycle', choices=SystemSettings.PAYOUT_CYCLE_CHOICES, required=False)
    allowNewRegistrations = serializers.BooleanField(source='allow_new_registrations', required=False)
    allowNewBookings = serializers.BooleanField(source='allow_new_bookings', required=False)
    allowNewEvents = serializers.BooleanField(source='allow_new_events', required=False)
    contactEmail = serializers.EmailField(source='contact_email', required=False)
    contactPhone = serializers.CharField(source='contact_phone', required=False, allow_blank=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = SystemSettings
        fields = [
            'maintenanceMode', 'maintenanceMessage', 'commissionRate', 'platformFee',
            'minimumPayout', 'payoutCycle', 'allowNewRegistrations', 'allowNewBookings',
            'allowNewEvents', 'contactEmail', 'contactPhone', 'updatedAt',
        ]


class MaintenanceToggleSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()
    message = serializers.CharField(required=False, allow_blank=True)
