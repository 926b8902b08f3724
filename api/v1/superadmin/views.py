"""
SuperAdmin views.
Payout bookkeeping and platform-wide settings.
"""

import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.payouts.models import Payout, SystemSettings
from apps.payouts.services import PayoutService

from .permissions import IsSuperUser
from .serializers import (
    BulkPayoutSerializer,
    CreatePayoutSerializer,
    MaintenanceToggleSerializer,
    PayoutSerializer,
    PayoutStatusSerializer,
    SystemSettingsSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


@api_view(['GET', 'POST'])
@permission_classes([IsSuperUser])
def payouts(request):
    """
    GET: list payouts, optionally filtered by ?status= and ?organizerId=.
    POST: create a pending payout for an organizer.
    """
    if request.method == 'GET':
        queryset = Payout.objects.select_related('organizer', 'event', 'processed_by')
        payout_status = request.query_params.get('status')
        if payout_status:
            queryset = queryset.filter(status=payout_status)
        organizer_id = request.query_params.get('organizerId')
        if organizer_id:
            queryset = queryset.filter(organizer_id=organizer_id)
        return Response({'payouts': PayoutSerializer(queryset, many=True).data})

    serializer = CreatePayoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    payout = PayoutService().create_payout(
        organizer=data['organizerId'],
        amount=data['amount'],
        event=data.get('eventId'),
        payout_method=data['payoutMethod'],
        payout_details=data['payoutDetails'],
        notes=data['notes'],
    )
    return Response(
        {'message': 'Payout created successfully', 'payout': PayoutSerializer(payout).data},
        status=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@permission_classes([IsSuperUser])
def calculate_pending_payout(request, organizer_id):
    organizer = get_object_or_404(User, pk=organizer_id, is_organizer=True)
    return Response(PayoutService().calculate_pending(organizer))


@api_view(['PUT', 'PATCH'])
@permission_classes([IsSuperUser])
def update_payout_status(request, payout_id):
    payout = get_object_or_404(Payout, pk=payout_id)
    serializer = PayoutStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    payout = PayoutService().update_status(
        payout,
        data['status'],
        request.user,
        transaction_id=data.get('transactionId'),
        notes=data.get('notes'),
    )
    return Response({'message': 'Payout status updated successfully', 'payout': PayoutSerializer(payout).data})


@api_view(['POST'])
@permission_classes([IsSuperUser])
def generate_bulk_payouts(request):
    serializer = BulkPayoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    result = PayoutService().generate_bulk_payouts(data['periodStart'], data['periodEnd'])
    return Response({
        'message': f"Generated {result['summary']['totalCreated']} payouts",
        **result,
    })


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsSuperUser])
def system_settings(request):
    settings_obj = SystemSettings.load()
    if request.method == 'GET':
        return Response({'settings': SystemSettingsSerializer(settings_obj).data})

    serializer = SystemSettingsSerializer(settings_obj, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    settings_obj = serializer.save()
    logger.info(f"⚙️ [SETTINGS] System settings updated by {request.user.email}: {sorted(request.data.keys())}")
    return Response({
        'message': 'System settings updated successfully',
        'settings': SystemSettingsSerializer(settings_obj).data,
    })


@api_view(['POST'])
@permission_classes([IsSuperUser])
def toggle_maintenance_mode(request):
    serializer = MaintenanceToggleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    enabled = serializer.validated_data['enabled']
    message = serializer.validated_data.get('message')

    settings_obj = SystemSettings.load()
    settings_obj.maintenance_mode = enabled
    if message:
        settings_obj.maintenance_message = message
    settings_obj.save()

    logger.warning(f"🔧 [SETTINGS] Maintenance mode {'ENABLED' if enabled else 'DISABLED'} by {request.user.email}")
    return Response({
        'message': f"Maintenance mode {'enabled' if enabled else 'disabled'}",
        'maintenanceMode': settings_obj.maintenance_mode,
        'maintenanceMessage': settings_obj.maintenance_message,
    })
