from datetime import timedelta
from unittest.mock import patch

from django.core import mail
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.bookings.tests.helpers import (
    attendees,
    create_confirmed_booking,
    create_event,
    create_organizer,
    create_user,
    razorpay_signature,
)
from apps.events.models import Event
from apps.payouts.models import SystemSettings
from payment_processor.services import RazorpayPaymentService


def mock_order(order_id='order_E2E1'):
    return patch.object(RazorpayPaymentService, 'create_order', return_value={'id': order_id})


class BookingFlowTests(APITestCase):
    """A buyer books two tickets, pays, then cancels them one at a time."""

    def setUp(self):
        self.organizer = create_organizer()
        self.user = create_user()
        self.event = create_event(self.organizer, price='500.00', tickets=10)
        self.client.force_authenticate(user=self.user)

    def available(self):
        return Event.objects.values_list('available_tickets', flat=True).get(pk=self.event.pk)

    def test_book_pay_and_cancel_each_ticket(self):
        payload = {
            'eventId': str(self.event.id),
            'quantity': 2,
            'attendeeDetails': [
                {'name': 'Asha', 'email': 'Asha@Test.com', 'phone': '98765 43210'},
                {'name': 'Ravi', 'email': 'ravi@test.com', 'phone': '+91 91234 56789'},
            ],
        }
        with mock_order('order_E2E1'):
            response = self.client.post(reverse('booking-list'), payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['booking']['razorpayOrderId'], 'order_E2E1')
        self.assertEqual(response.data['razorpayKey'], 'rzp_test_key')
        booking_id = response.data['booking']['_id']

        booking = Booking.objects.get(pk=booking_id)
        self.assertEqual(booking.attendee_details[0]['phone'], '+919876543210')
        self.assertEqual(booking.attendee_details[0]['email'], 'asha@test.com')

        response = self.client.post(reverse('booking-verify-payment'), {
            'razorpayOrderId': 'order_E2E1',
            'razorpayPaymentId': 'pay_E2E1',
            'razorpaySignature': razorpay_signature('order_E2E1', 'pay_E2E1'),
            'bookingId': booking_id,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['booking']['status'], 'confirmed')
        self.assertEqual(response.data['booking']['totalPrice'], 1000)
        first, second = response.data['booking']['ticketNumbers']
        self.assertEqual(self.available(), 8)
        self.assertEqual(len(mail.outbox), 3)

        response = self.client.post(reverse('booking-cancel-user-ticket'), {
            'bookingId': booking_id, 'ticketNumber': first, 'reason': 'plans changed',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ticket']['refundAmount'], '500.00')
        self.assertEqual(response.data['ticket']['refundStatus'], 'pending')
        self.assertEqual(response.data['bookingStatus'], 'confirmed')
        self.assertEqual(self.available(), 9)

        response = self.client.post(reverse('booking-cancel-user-ticket'), {
            'bookingId': booking_id, 'ticketNumber': second,
        }, format='json')

        self.assertEqual(response.data['bookingStatus'], 'cancelled')
        self.assertEqual(self.available(), 10)

        response = self.client.get(reverse('booking-detail', args=[booking_id]))
        self.assertEqual(response.data['booking']['status'], 'cancelled')
        self.assertEqual(sorted(response.data['booking']['cancelledTickets']), sorted([first, second]))

    def test_forged_signature_is_rejected(self):
        with mock_order('order_E2E2'):
            response = self.client.post(reverse('booking-list'), {
                'eventId': str(self.event.id), 'quantity': 1, 'attendeeDetails': attendees(1),
            }, format='json')
        booking_id = response.data['booking']['_id']

        response = self.client.post(reverse('booking-verify-payment'), {
            'razorpayOrderId': 'order_E2E2',
            'razorpayPaymentId': 'pay_E2E2',
            'razorpaySignature': 'deadbeef',
            'bookingId': booking_id,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Payment verification failed')
        self.assertEqual(Booking.objects.get(pk=booking_id).status, 'pending')

    def test_quantity_mismatch_is_a_validation_error(self):
        response = self.client.post(reverse('booking-list'), {
            'eventId': str(self.event.id), 'quantity': 3, 'attendeeDetails': attendees(2),
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Quantity must match attendee details count')

    def test_bad_attendee_phone(self):
        details = attendees(1)
        details[0]['phone'] = '12'

        response = self.client.post(reverse('booking-list'), {
            'eventId': str(self.event.id), 'quantity': 1, 'attendeeDetails': details,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid phone number: 12')

    def test_organizers_cannot_book(self):
        self.client.force_authenticate(user=self.organizer)

        response = self.client.post(reverse('booking-list'), {
            'eventId': str(self.event.id), 'quantity': 1, 'attendeeDetails': attendees(1),
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_requests_are_rejected(self):
        self.client.force_authenticate(user=None)

        response = self.client.get(reverse('booking-my-bookings'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_cancels_pending_booking(self):
        with mock_order('order_E2E3'):
            response = self.client.post(reverse('booking-list'), {
                'eventId': str(self.event.id), 'quantity': 1, 'attendeeDetails': attendees(1),
            }, format='json')
        booking_id = response.data['booking']['_id']

        response = self.client.delete(reverse('booking-detail', args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['booking']['status'], 'cancelled')

    def test_other_users_booking_is_forbidden(self):
        booking = create_confirmed_booking(create_user('other@test.com'), self.event)

        response = self.client.get(reverse('booking-detail', args=[booking.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Not authorized to view this booking')

    def test_unknown_booking(self):
        response = self.client.get(reverse('booking-detail', args=['00000000-0000-0000-0000-000000000000']))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_my_bookings_lists_confirmed_only(self):
        create_confirmed_booking(self.user, self.event, quantity=1)
        Booking.objects.create(
            user=self.user, event=self.event, quantity=1, total_price=self.event.price,
            attendee_details=attendees(1),
        )

        response = self.client.get(reverse('booking-my-bookings'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['bookings']), 1)
        self.assertEqual(response.data['bookings'][0]['event']['title'], 'Indie Night')

    def test_check_expired(self):
        past_event = create_event(self.organizer, days_ahead=-1, title='Yesterday')
        create_confirmed_booking(self.user, past_event, quantity=1)

        response = self.client.get(reverse('booking-check-expired'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updatedCount'], 1)
        self.assertEqual(response.data['message'], 'Checked expired tickets. 1 booking(s) updated.')


class OrganizerBookingViewTests(APITestCase):
    def setUp(self):
        self.organizer = create_organizer()
        self.user = create_user()
        self.event = create_event(self.organizer)
        self.booking = create_confirmed_booking(self.user, self.event, quantity=2)
        self.ticket_number = self.booking.ticket_numbers[0]
        self.client.force_authenticate(user=self.organizer)

    def test_verify_ticket_twice(self):
        url = reverse('booking-verify-ticket')
        data = {'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number}

        first = self.client.post(url, data, format='json')
        second = self.client.post(url, data, format='json')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertFalse(first.data['alreadyVerified'])
        self.assertTrue(second.data['alreadyVerified'])
        self.assertEqual(second.data['verifiedAt'], first.data['verifiedAt'])

    def test_verify_ticket_rejects_unknown_status(self):
        response = self.client.post(reverse('booking-verify-ticket'), {
            'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number, 'verificationStatus': 'maybe',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_ticket_status(self):
        response = self.client.get(reverse('booking-ticket-status'), {
            'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['isVerified'])
        self.assertEqual(response.data['ticketStatus'], 'active')

    def test_organizer_cancel_requires_reason(self):
        response = self.client.post(reverse('booking-cancel-ticket'), {
            'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cancellation reason is required')

    def test_organizer_cancels_with_reason(self):
        response = self.client.post(reverse('booking-cancel-ticket'), {
            'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number, 'reason': 'venue change',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ticket']['status'], 'cancelled')
        self.assertTrue(any('Organizer' in m.subject for m in mail.outbox))

    def test_buyers_cannot_use_organizer_endpoints(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse('booking-verify-ticket'), {
            'bookingId': str(self.booking.id), 'ticketNumber': self.ticket_number,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_event_bookings(self):
        response = self.client.get(reverse('booking-event-bookings', kwargs={'event_id': self.event.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['analytics']['totalTickets'], 2)
        self.assertEqual(response.data['bookings'][0]['user']['email'], 'buyer@test.com')

    def test_all_bookings(self):
        response = self.client.get(reverse('booking-organizer-bookings'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalBookings'], 1)
        self.assertEqual(response.data['totalTickets'], 2)


class MaintenanceModeTests(APITestCase):
    def setUp(self):
        self.user = create_user()
        self.client.force_authenticate(user=self.user)
        settings_obj = SystemSettings.load()
        settings_obj.maintenance_mode = True
        settings_obj.maintenance_message = 'Back at noon'
        settings_obj.save()

    def test_api_requests_get_503(self):
        response = self.client.get(reverse('booking-my-bookings'))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.json()['maintenanceMessage'], 'Back at noon')

    def test_auth_endpoints_stay_reachable(self):
        response = self.client.get(reverse('user_profile'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class BookingWindowTests(APITestCase):
    def test_expired_booking_window(self):
        organizer = create_organizer()
        event = create_event(organizer, booking_expiry=timezone.now() - timedelta(hours=1))
        self.client.force_authenticate(user=create_user())

        response = self.client.post(reverse('booking-list'), {
            'eventId': str(event.id), 'quantity': 1, 'attendeeDetails': attendees(1),
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Booking period has expired for this event')
