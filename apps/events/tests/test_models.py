from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from apps.bookings.tests.helpers import create_event, create_organizer
from apps.events.models import Event


class EventInventoryTests(TestCase):
    def setUp(self):
        self.event = create_event(create_organizer(), tickets=5)

    def test_adjust_inventory_returns_new_value(self):
        self.assertEqual(Event.adjust_inventory(self.event.pk, -2), 3)
        self.assertEqual(Event.adjust_inventory(self.event.pk, 1), 4)

    def test_adjust_inventory_is_not_clamped(self):
        self.assertEqual(Event.adjust_inventory(self.event.pk, -7), -2)

    def test_adjust_inventory_for_missing_event(self):
        self.event.delete()

        with self.assertRaises(Event.DoesNotExist):
            Event.adjust_inventory(self.event.pk, 1)

    def test_adjust_inventory_ignores_stale_instances(self):
        stale = Event.objects.get(pk=self.event.pk)
        Event.adjust_inventory(self.event.pk, -1)
        stale.title = 'Renamed'
        stale.save(update_fields=['title'])

        self.assertEqual(Event.adjust_inventory(self.event.pk, -1), 3)


class EventSignalTests(TestCase):
    def setUp(self):
        self.organizer = create_organizer()

    def test_slug_is_generated_and_unique(self):
        first = create_event(self.organizer, title='Sunday Brunch')
        second = create_event(self.organizer, title='Sunday Brunch')

        self.assertEqual(first.slug, 'sunday-brunch')
        self.assertEqual(second.slug, 'sunday-brunch-1')

    def test_past_events_are_marked_on_save(self):
        event = create_event(self.organizer, days_ahead=-3)

        self.assertEqual(event.status, 'past')
        self.assertTrue(event.is_past)
        self.assertFalse(event.is_booking_open)

    def test_cancelled_events_keep_their_status(self):
        event = create_event(self.organizer, days_ahead=-3, status='cancelled')

        self.assertEqual(event.status, 'cancelled')

    def test_booking_window(self):
        event = create_event(self.organizer, booking_expiry=timezone.now() + timedelta(hours=1))

        self.assertTrue(event.is_booking_open)
