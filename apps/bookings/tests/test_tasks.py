from smtplib import SMTPException
from unittest.mock import patch
import uuid

from django.core import mail
from django.test import TestCase, override_settings

from apps.bookings import lifecycle
from apps.bookings.email_sender import ticket_qr_payload
from apps.bookings.tasks import (
    send_booking_confirmation_email,
    send_ticket_cancellation_emails,
    sweep_expired_tickets,
)

from .helpers import create_confirmed_booking, create_event, create_organizer, create_user


@override_settings(ADMIN_NOTIFICATION_EMAIL='admin@gettogether.in', FRONTEND_URL='https://gettogether.in')
class BookingEmailTaskTests(TestCase):
    def setUp(self):
        self.organizer = create_organizer(first_name='Olga')
        self.user = create_user(first_name='Bea')
        self.event = create_event(self.organizer, title='Jazz Evening')
        self.booking = create_confirmed_booking(self.user, self.event, quantity=2)

    def test_confirmation_goes_to_buyer_and_each_attendee(self):
        result = send_booking_confirmation_email(str(self.booking.id))

        self.assertEqual(result, {'status': 'sent', 'emails_sent': 3})
        self.assertEqual(len(mail.outbox), 3)

        buyer_mail = mail.outbox[0]
        self.assertEqual(buyer_mail.to, ['buyer@test.com'])
        self.assertEqual(buyer_mail.subject, '🎫 Booking Confirmed - Jazz Evening')
        for ticket_number in self.booking.ticket_numbers:
            self.assertIn(ticket_number, buyer_mail.body)
        self.assertEqual(len(buyer_mail.attachments), 3)

        self.assertEqual(mail.outbox[1].to, ['guest0@test.com'])
        self.assertEqual(mail.outbox[1].subject, '🎫 Your Ticket - Jazz Evening')
        self.assertIn(self.booking.ticket_numbers[0], mail.outbox[1].body)
        self.assertNotIn(self.booking.ticket_numbers[1], mail.outbox[1].body)

    def pdf_attachments(self, message):
        return [a for a in message.attachments if isinstance(a, tuple)]

    def test_confirmation_carries_pdf_tickets(self):
        send_booking_confirmation_email(str(self.booking.id))

        reference = str(self.booking.id).replace('-', '')[-8:].upper()
        (buyer_pdf,) = self.pdf_attachments(mail.outbox[0])
        self.assertEqual(buyer_pdf[0], f'tickets-{reference}.pdf')
        self.assertEqual(buyer_pdf[2], 'application/pdf')
        self.assertTrue(buyer_pdf[1].startswith(b'%PDF'))

        (attendee_pdf,) = self.pdf_attachments(mail.outbox[1])
        self.assertEqual(attendee_pdf[0], f'ticket-{self.booking.ticket_numbers[0]}.pdf')

    def test_pdf_failure_still_sends_confirmation(self):
        with patch('apps.bookings.email_sender.generate_ticket_pdf', side_effect=RuntimeError('font missing')):
            result = send_booking_confirmation_email(str(self.booking.id))

        self.assertEqual(result, {'status': 'sent', 'emails_sent': 3})
        self.assertEqual(len(mail.outbox), 3)
        for message in mail.outbox:
            self.assertEqual(self.pdf_attachments(message), [])

    def test_attendee_sharing_buyer_address_gets_no_extra_mail(self):
        self.booking.attendee_details[0]['email'] = 'BUYER@test.com'
        self.booking.ticket_details = lifecycle.build_ticket_details(self.booking)
        self.booking.save()

        send_booking_confirmation_email(str(self.booking.id))

        self.assertEqual([m.to for m in mail.outbox], [['buyer@test.com'], ['guest1@test.com']])

    def test_confirmation_skips_unconfirmed_bookings(self):
        self.booking.status = 'pending'
        self.booking.save()

        result = send_booking_confirmation_email(str(self.booking.id))

        self.assertEqual(result['status'], 'skipped')
        self.assertEqual(len(mail.outbox), 0)

    def test_confirmation_for_missing_booking(self):
        result = send_booking_confirmation_email(str(uuid.uuid4()))

        self.assertEqual(result, {'status': 'skipped', 'reason': 'booking_not_found'})

    def test_smtp_failure_is_raised_for_retry(self):
        with patch('apps.bookings.email_sender.send_booking_confirmation', side_effect=SMTPException('down')):
            with self.assertRaises(SMTPException):
                send_booking_confirmation_email(str(self.booking.id))

    def test_user_cancellation_notifies_user_organizer_and_admin(self):
        ticket_number = self.booking.ticket_numbers[0]
        lifecycle.cancel_ticket(self.booking, ticket_number, 'plans changed', 'user')
        self.booking.save()

        result = send_ticket_cancellation_emails(str(self.booking.id), ticket_number, 'user')

        self.assertEqual(result['emails_sent'], 3)
        by_recipient = {m.to[0]: m for m in mail.outbox}
        self.assertEqual(by_recipient['buyer@test.com'].subject, 'Ticket Cancellation Confirmed - Jazz Evening')
        self.assertEqual(by_recipient['organizer@test.com'].subject, 'Ticket Cancelled - Jazz Evening')
        self.assertEqual(by_recipient['admin@gettogether.in'].subject, '[Admin Alert] Ticket Cancellation - Jazz Evening')
        self.assertIn('500.00', by_recipient['buyer@test.com'].body)
        self.assertIn('plans changed', by_recipient['buyer@test.com'].body)

    def test_organizer_cancellation_subjects(self):
        ticket_number = self.booking.ticket_numbers[1]
        lifecycle.cancel_ticket(self.booking, ticket_number, 'Organizer cancelled: venue change', 'organizer')
        self.booking.save()

        send_ticket_cancellation_emails(str(self.booking.id), ticket_number, 'organizer')

        subjects = sorted(m.subject for m in mail.outbox)
        self.assertEqual(subjects, [
            'Ticket Cancelled - Jazz Evening',
            'Ticket Cancelled by Organizer - Jazz Evening',
            '[Admin Alert] Organizer Cancelled Ticket - Jazz Evening',
        ])

    def test_cancellation_of_unknown_ticket_sends_nothing(self):
        result = send_ticket_cancellation_emails(str(self.booking.id), 'TKT-NOPE', 'user')

        self.assertEqual(result['emails_sent'], 0)
        self.assertEqual(len(mail.outbox), 0)

    def test_qr_payload_points_at_check_in_page(self):
        payload = ticket_qr_payload(self.booking, 'TKT-ABC')

        self.assertEqual(
            payload,
            f'https://gettogether.in/verify-ticket?ticketNumber=TKT-ABC&bookingId={self.booking.id}'
        )


class SweepTaskTests(TestCase):
    def test_sweep_reports_updated_count(self):
        organizer = create_organizer()
        past_event = create_event(organizer, days_ahead=-1)
        create_confirmed_booking(create_user(), past_event, quantity=1)

        self.assertEqual(sweep_expired_tickets(), {'updated_count': 1})
        self.assertEqual(sweep_expired_tickets(), {'updated_count': 0})
