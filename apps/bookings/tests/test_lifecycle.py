from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from apps.bookings import lifecycle
from apps.bookings.exceptions import InvalidTicketTransition
from apps.bookings.models import Booking

from .helpers import create_confirmed_booking, create_event, create_organizer, create_user


class TicketTransitionTests(TestCase):
    """The per-ticket state machine."""

    def test_active_ticket_can_expire_or_be_cancelled(self):
        self.assertTrue(lifecycle.can_transition('active', 'expired'))
        self.assertTrue(lifecycle.can_transition('active', 'cancelled'))

    def test_terminal_states_do_not_move(self):
        for current in ('expired', 'cancelled', 'used'):
            for new in lifecycle.TICKET_STATUSES:
                self.assertFalse(lifecycle.can_transition(current, new), f'{current} -> {new}')

    def test_cancelling_a_cancelled_ticket_raises(self):
        ticket = lifecycle.build_ticket_record('TKT-1', status='cancelled')

        with self.assertRaisesMessage(InvalidTicketTransition, 'Ticket is already cancelled'):
            lifecycle.transition_ticket(ticket, 'cancelled')

    def test_cancelling_an_expired_ticket_raises(self):
        ticket = lifecycle.build_ticket_record('TKT-1', status='expired')

        with self.assertRaisesMessage(InvalidTicketTransition, 'Ticket has expired'):
            lifecycle.transition_ticket(ticket, 'cancelled')


class TicketCancellationTests(TestCase):
    def setUp(self):
        self.organizer = create_organizer()
        self.user = create_user()
        self.event = create_event(self.organizer, price='100.00')
        self.booking = create_confirmed_booking(self.user, self.event, quantity=3)

    def test_refund_is_an_even_split_of_the_total(self):
        ticket_number = self.booking.ticket_numbers[0]

        ticket = lifecycle.cancel_ticket(self.booking, ticket_number, 'plans changed', 'user')

        self.assertEqual(ticket['status'], 'cancelled')
        self.assertEqual(ticket['refundAmount'], '100.00')
        self.assertEqual(ticket['refundStatus'], 'pending')
        self.assertEqual(ticket['cancellationReason'], 'plans changed')
        self.assertEqual(ticket['cancelledBy'], 'user')
        self.assertIsNotNone(ticket['cancelledAt'])
        self.assertEqual(self.booking.status, 'confirmed')

    def test_refund_rounds_half_up_to_cents(self):
        self.booking.total_price = Decimal('100.00')

        self.assertEqual(lifecycle.per_ticket_refund(self.booking), Decimal('33.33'))

    def test_booking_is_cancelled_with_its_last_ticket(self):
        for ticket_number in self.booking.ticket_numbers:
            lifecycle.cancel_ticket(self.booking, ticket_number, 'venue closed', 'organizer')

        self.assertEqual(self.booking.status, 'cancelled')
        self.assertIsNotNone(self.booking.cancelled_at)
        self.assertEqual(self.booking.cancellation_reason, 'venue closed')

    def test_unknown_ticket_raises(self):
        with self.assertRaises(InvalidTicketTransition):
            lifecycle.cancel_ticket(self.booking, 'TKT-NOPE', 'x', 'user')

    def test_save_rewrites_cancelled_tickets_projection(self):
        ticket_number = self.booking.ticket_numbers[1]
        lifecycle.cancel_ticket(self.booking, ticket_number, 'plans changed', 'user')

        self.booking.save()
        self.booking.refresh_from_db()

        self.assertEqual(self.booking.cancelled_tickets, [ticket_number])

    def test_ticket_count_matches_quantity(self):
        self.assertEqual(len(self.booking.ticket_numbers), self.booking.quantity)
        self.assertEqual(len(self.booking.ticket_details), self.booking.quantity)
        self.assertEqual(len(set(self.booking.ticket_numbers)), self.booking.quantity)


class ExpiryTests(TestCase):
    def setUp(self):
        self.organizer = create_organizer()
        self.user = create_user()
        self.event = create_event(self.organizer)
        self.booking = create_confirmed_booking(self.user, self.event, quantity=2)

    def test_future_event_is_left_alone(self):
        self.assertFalse(lifecycle.expire_booking(self.booking))
        self.assertFalse(self.booking.is_expired)

    def test_active_tickets_expire_and_cancelled_ones_stay(self):
        cancelled = self.booking.ticket_numbers[0]
        lifecycle.cancel_ticket(self.booking, cancelled, 'plans changed', 'user')
        later = self.event.date + timedelta(days=1)

        self.assertTrue(lifecycle.expire_booking(self.booking, now=later))

        statuses = {t['ticketNumber']: t['status'] for t in self.booking.ticket_details}
        self.assertEqual(statuses[cancelled], 'cancelled')
        self.assertEqual(statuses[self.booking.ticket_numbers[1]], 'expired')
        self.assertTrue(self.booking.is_expired)
        self.assertEqual(self.booking.expiry_checked_at, later)

    def test_second_pass_changes_nothing(self):
        later = self.event.date + timedelta(days=1)
        lifecycle.expire_booking(self.booking, now=later)
        snapshot = [dict(t) for t in self.booking.ticket_details]

        self.assertFalse(lifecycle.expire_booking(self.booking, now=later + timedelta(days=1)))
        self.assertEqual(self.booking.ticket_details, snapshot)
        self.assertEqual(self.booking.expiry_checked_at, later)

    def test_cancelled_booking_is_not_swept(self):
        self.booking.status = 'cancelled'

        self.assertFalse(lifecycle.expire_booking(self.booking, now=self.event.date + timedelta(days=1)))


class LegacyStorageTests(TestCase):
    """Bookings stored before ticket_details existed are rebuilt on load."""

    def setUp(self):
        self.organizer = create_organizer()
        self.user = create_user()
        self.event = create_event(self.organizer)
        self.booking = create_confirmed_booking(self.user, self.event, quantity=3)

    def _strip_to_legacy(self, cancelled, is_expired=False):
        Booking.objects.filter(pk=self.booking.pk).update(
            ticket_details=[], cancelled_tickets=cancelled, is_expired=is_expired
        )
        return Booking.objects.get(pk=self.booking.pk)

    def test_details_are_built_from_attendees_and_legacy_cancellations(self):
        first, second, third = self.booking.ticket_numbers

        loaded = self._strip_to_legacy([second])

        statuses = [t['status'] for t in loaded.ticket_details]
        self.assertEqual(statuses, ['active', 'cancelled', 'active'])
        self.assertEqual(loaded.ticket_details[0]['ticketNumber'], first)
        self.assertEqual(loaded.ticket_details[0]['attendeeName'], 'Guest 0')
        self.assertEqual(loaded.ticket_details[2]['attendeeEmail'], 'guest2@test.com')

    def test_swept_legacy_booking_loads_expired(self):
        loaded = self._strip_to_legacy([], is_expired=True)

        self.assertEqual({t['status'] for t in loaded.ticket_details}, {'expired'})

    def test_materialization_is_persisted_on_next_save(self):
        loaded = self._strip_to_legacy([self.booking.ticket_numbers[0]])
        loaded.save()

        raw = Booking.objects.filter(pk=self.booking.pk).values_list('ticket_details', flat=True).get()
        self.assertEqual(len(raw), 3)
        self.assertEqual(raw[0]['status'], 'cancelled')

    def test_pending_booking_without_tickets_stays_empty(self):
        pending = Booking.objects.create(
            user=self.user, event=self.event, quantity=1, total_price=self.event.price,
            attendee_details=[{'name': 'A', 'email': 'a@test.com', 'phone': '+919876543210'}],
        )

        loaded = Booking.objects.get(pk=pending.pk)

        self.assertEqual(loaded.ticket_details, [])


class VerificationRecordTests(TestCase):
    def test_record_is_appended_and_found(self):
        organizer = create_organizer()
        booking = create_confirmed_booking(create_user(), create_event(organizer), quantity=1)
        ticket_number = booking.ticket_numbers[0]
        now = timezone.now()

        record = lifecycle.record_verification(booking, ticket_number, organizer.id, 'approved', now=now)

        self.assertEqual(record['verifiedAt'], now.isoformat())
        self.assertEqual(lifecycle.find_verification(booking, ticket_number), record)
        self.assertIsNone(lifecycle.find_verification(booking, 'TKT-OTHER'))
