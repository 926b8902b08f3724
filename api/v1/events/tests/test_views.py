from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.tests.helpers import create_confirmed_booking, create_event, create_organizer, create_user
from apps.events.models import Event
from apps.payouts.models import SystemSettings


class EventAPITests(APITestCase):
    def setUp(self):
        self.organizer = create_organizer()
        self.other_organizer = create_organizer('rival@test.com')
        self.user = create_user()

    def event_payload(self, **overrides):
        date = timezone.now() + timedelta(days=10)
        payload = {
            'title': 'Comedy Hour',
            'description': 'Stand-up',
            'category': 'comedy',
            'date': date.isoformat(),
            'location': 'Pune',
            'price': '299.00',
            'totalTickets': 50,
            'bookingExpiry': (date - timedelta(hours=3)).isoformat(),
        }
        payload.update(overrides)
        return payload

    def test_list_is_public(self):
        create_event(self.organizer)

        response = self.client.get(reverse('event-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['events']), 1)
        self.assertEqual(response.data['events'][0]['availableTickets'], 10)

    def test_status_filter_uses_event_date(self):
        create_event(self.organizer, title='Soon')
        create_event(self.organizer, title='Gone', days_ahead=-5)

        upcoming = self.client.get(reverse('event-list'), {'status': 'upcoming'})
        past = self.client.get(reverse('event-list'), {'status': 'past'})

        self.assertEqual([e['title'] for e in upcoming.data['events']], ['Soon'])
        self.assertEqual([e['title'] for e in past.data['events']], ['Gone'])

    def test_organizer_creates_event_with_full_inventory(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(reverse('event-list'), self.event_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Event created successfully')
        self.assertEqual(response.data['event']['availableTickets'], 50)
        self.assertEqual(response.data['event']['organizerId'], self.organizer.id)

    def test_available_tickets_cannot_be_written(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(
            reverse('event-list'), self.event_payload(availableTickets=999), format='json'
        )

        self.assertEqual(response.data['event']['availableTickets'], 50)

    def test_buyers_cannot_create_events(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse('event-list'), self.event_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_event_creation_can_be_disabled(self):
        settings_obj = SystemSettings.load()
        settings_obj.allow_new_events = False
        settings_obj.save()
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(reverse('event-list'), self.event_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_ticket_total_change_shifts_available(self):
        event = create_event(self.organizer, tickets=10)
        create_confirmed_booking(self.user, event, quantity=2)
        Event.adjust_inventory(event.pk, -2)
        self.client.force_authenticate(user=self.organizer)

        response = self.client.patch(
            reverse('event-detail', args=[event.id]), {'totalTickets': 15}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['event']['totalTickets'], 15)
        self.assertEqual(response.data['event']['availableTickets'], 13)

    def test_only_owner_may_edit(self):
        event = create_event(self.organizer)
        self.client.force_authenticate(user=self.other_organizer)

        response = self.client.patch(reverse('event-detail', args=[event.id]), {'title': 'Mine now'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_event_with_bookings_cannot_be_deleted(self):
        event = create_event(self.organizer)
        create_confirmed_booking(self.user, event, quantity=1)
        self.client.force_authenticate(user=self.organizer)

        response = self.client.delete(reverse('event-detail', args=[event.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Event.objects.filter(pk=event.pk).exists())

    def test_event_without_bookings_is_deleted(self):
        event = create_event(self.organizer)
        self.client.force_authenticate(user=self.organizer)

        response = self.client.delete(reverse('event-detail', args=[event.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Event.objects.filter(pk=event.pk).exists())

    def test_my_events(self):
        create_event(self.organizer, title='Mine')
        create_event(self.other_organizer, title='Theirs')
        self.client.force_authenticate(user=self.organizer)

        response = self.client.get(reverse('event-mine'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['title'] for e in response.data['events']], ['Mine'])

    def test_blank_title_is_rejected(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(reverse('event-list'), self.event_payload(title='   '), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
