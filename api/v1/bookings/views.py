"""Views for bookings API."""

import logging

from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.bookings.lifecycle import CANCELLED_BY_ORGANIZER, CANCELLED_BY_USER
from apps.bookings.services import BookingService
from core.permissions import IsEndUser, IsOrganizer

from .serializers import (
    BookingSerializer,
    CancelTicketSerializer,
    CreateBookingSerializer,
    OrganizerBookingSerializer,
    TicketStatusQuerySerializer,
    VerifyPaymentSerializer,
    VerifyTicketSerializer,
)

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.GenericViewSet):
    """
    Booking lifecycle endpoints.

    Users create, pay for, list and cancel their bookings; organizers list
    bookings for their events, check tickets in at the door and cancel
    individual tickets.
    """

    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]

    ORGANIZER_ACTIONS = (
        'organizer_bookings', 'verify_ticket', 'cancel_ticket', 'ticket_status', 'event_bookings',
    )

    def get_permissions(self):
        if self.action == 'create':
            return [IsEndUser()]
        if self.action in self.ORGANIZER_ACTIONS:
            return [IsOrganizer()]
        return super().get_permissions()

    def get_service(self):
        return BookingService()

    @extend_schema(request=CreateBookingSerializer)
    def create(self, request):
        """Start a booking and open a payment order for it."""
        serializer = CreateBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().create_booking(
            user=request.user,
            event_id=data['eventId'],
            quantity=data['quantity'],
            attendee_details=[dict(attendee) for attendee in data['attendeeDetails']],
        )
        return Response(result, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        booking = self.get_service().get_booking_for_user(request.user, pk)
        return Response({'booking': BookingSerializer(booking).data})

    def destroy(self, request, pk=None):
        """Cancel a booking that has not been paid yet."""
        booking = self.get_service().cancel_pending_booking(request.user, pk)
        return Response({
            'message': 'Booking cancelled successfully',
            'booking': BookingSerializer(booking).data,
        })

    @extend_schema(request=VerifyPaymentSerializer)
    @action(detail=False, methods=['post'], url_path='verify-payment')
    def verify_payment(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().verify_payment(
            user=request.user,
            booking_id=data['bookingId'],
            order_id=data['razorpayOrderId'],
            payment_id=data['razorpayPaymentId'],
            signature=data['razorpaySignature'],
        )
        return Response(result)

    @action(detail=False, methods=['get'], url_path='my-bookings')
    def my_bookings(self, request):
        bookings = self.get_service().user_bookings(request.user)
        return Response({'bookings': BookingSerializer(bookings, many=True).data})

    @action(detail=False, methods=['get'], url_path='organizer/all-bookings')
    def organizer_bookings(self, request):
        result = self.get_service().organizer_bookings(request.user)
        return Response({
            'bookings': OrganizerBookingSerializer(result['bookings'], many=True).data,
            'totalBookings': result['totalBookings'],
            'totalTickets': result['totalTickets'],
        })

    @action(detail=False, methods=['get'], url_path=r'event/(?P<event_id>[^/.]+)/bookings')
    def event_bookings(self, request, event_id=None):
        result = self.get_service().event_bookings(request.user, event_id)
        return Response({
            'bookings': OrganizerBookingSerializer(result['bookings'], many=True).data,
            'analytics': result['analytics'],
        })

    @extend_schema(request=VerifyTicketSerializer)
    @action(detail=False, methods=['post'], url_path='verify-ticket')
    def verify_ticket(self, request):
        serializer = VerifyTicketSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().verify_ticket(
            organizer=request.user,
            booking_id=data['bookingId'],
            ticket_number=data['ticketNumber'],
            verification_status=data['verificationStatus'],
        )
        return Response(result)

    @extend_schema(parameters=[
        OpenApiParameter('ticketNumber', str, required=True),
        OpenApiParameter('bookingId', str, required=True),
    ])
    @action(detail=False, methods=['get'], url_path='ticket-status')
    def ticket_status(self, request):
        serializer = TicketStatusQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().ticket_status(request.user, data['bookingId'], data['ticketNumber'])
        return Response(result)

    @extend_schema(request=CancelTicketSerializer)
    @action(detail=False, methods=['post'], url_path='cancel-ticket')
    def cancel_ticket(self, request):
        """Organizer cancels one ticket of a booking for their event."""
        return self._cancel_ticket(request, CANCELLED_BY_ORGANIZER)

    @extend_schema(request=CancelTicketSerializer)
    @action(detail=False, methods=['post'], url_path='cancel-user-ticket')
    def cancel_user_ticket(self, request):
        """Booking owner cancels one of their own tickets."""
        return self._cancel_ticket(request, CANCELLED_BY_USER)

    def _cancel_ticket(self, request, initiated_by):
        serializer = CancelTicketSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.get_service().cancel_ticket(
            actor=request.user,
            booking_id=data['bookingId'],
            ticket_number=data['ticketNumber'],
            reason=data.get('reason'),
            initiated_by=initiated_by,
        )
        return Response(result)

    @action(detail=False, methods=['get'], url_path='check-expired')
    def check_expired(self, request):
        """Run the expiry sweep across all bookings."""
        updated = self.get_service().sweep_expired_bookings()
        logger.info(f"⏰ [EXPIRY] Manual sweep requested by user {request.user.id}: {updated} updated")
        return Response({
            'message': f'Checked expired tickets. {updated} booking(s) updated.',
            'updatedCount': updated,
        })
