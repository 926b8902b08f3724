"""Views for events API."""

import logging

from django.db.models import ProtectedError
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from apps.events.models import Event
from apps.payouts.models import SystemSettings
from core.permissions import IsOrganizer, IsOrganizerOrReadOnly

from .serializers import EventSerializer

logger = logging.getLogger(__name__)


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Event model.

    Listing and detail are public. Organizers create events and manage
    their own.
    """

    queryset = Event.objects.select_related('organizer')
    serializer_class = EventSerializer
    permission_classes = [IsOrganizerOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['category', 'organizer']
    search_fields = ['title', 'location', 'description']
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action == 'mine':
            return [IsOrganizer()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        # upcoming / past are decided by date, not the stored status
        when = self.request.query_params.get('status')
        now = timezone.now()
        if when == 'upcoming':
            queryset = queryset.filter(date__gte=now).exclude(status='cancelled')
        elif when == 'past':
            queryset = queryset.filter(date__lt=now)
        return queryset.order_by('date')

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return Response({'events': self.get_serializer(queryset, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        return Response({'event': self.get_serializer(self.get_object()).data})

    def create(self, request, *args, **kwargs):
        if not SystemSettings.load().allow_new_events:
            raise PermissionDenied('New event creation is temporarily disabled')

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = serializer.save(organizer=request.user)
        logger.info(f"📅 [EVENT] Organizer {request.user.id} created event {event.id} ({event.total_tickets} tickets)")
        return Response(
            {'message': 'Event created successfully', 'event': self.get_serializer(event).data},
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        event = serializer.save()
        logger.info(f"📅 [EVENT] Event {event.id} updated by organizer {request.user.id}")
        return Response({'message': 'Event updated successfully', 'event': self.get_serializer(event).data})

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        try:
            event.delete()
        except ProtectedError:
            raise ValidationError('Cannot delete an event that already has bookings')
        logger.info(f"📅 [EVENT] Event {kwargs.get('pk')} deleted by organizer {request.user.id}")
        return Response({'message': 'Event deleted successfully'})

    @action(detail=False, methods=['get'], url_path='organizer/my-events')
    def mine(self, request):
        """Events owned by the calling organizer, newest first."""
        events = self.get_queryset().filter(organizer=request.user).order_by('-date')
        return Response({'events': self.get_serializer(events, many=True).data})
