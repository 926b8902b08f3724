from decimal import Decimal
from unittest.mock import patch

import razorpay
import requests
from django.test import TestCase, override_settings

from apps.bookings.models import Booking
from apps.bookings.tests.helpers import attendees, create_event, create_organizer, create_user, razorpay_signature
from payment_processor.models import PaymentTransaction
from payment_processor.services import PaymentServiceException, RazorpayPaymentService


class RazorpayPaymentServiceTests(TestCase):
    def setUp(self):
        self.service = RazorpayPaymentService()
        event = create_event(create_organizer(), price='249.50')
        self.booking = Booking.objects.create(
            user=create_user(), event=event, quantity=2, total_price=Decimal('499.00'),
            attendee_details=attendees(2),
        )

    def test_minor_units(self):
        self.assertEqual(RazorpayPaymentService.to_minor_units(Decimal('499.00')), 49900)
        self.assertEqual(RazorpayPaymentService.to_minor_units('0.005'), 1)

    @override_settings(RAZORPAY_KEY_ID='', RAZORPAY_KEY_SECRET='')
    def test_missing_keys(self):
        with self.assertRaises(PaymentServiceException):
            RazorpayPaymentService()

    def test_create_order_sends_paise_and_logs(self):
        with patch.object(self.service.client.order, 'create', return_value={'id': 'order_P1', 'amount': 49900}) as create:
            order = self.service.create_order(self.booking)

        self.assertEqual(order['id'], 'order_P1')
        data = create.call_args.kwargs['data']
        self.assertEqual(data['amount'], 49900)
        self.assertEqual(data['notes']['bookingId'], str(self.booking.id))

        transaction = PaymentTransaction.objects.get()
        self.assertTrue(transaction.is_successful)
        self.assertEqual(transaction.gateway_order_id, 'order_P1')
        self.assertEqual(transaction.booking, self.booking)

    def test_gateway_errors_are_wrapped(self):
        for error in (razorpay.errors.BadRequestError('bad amount'), requests.exceptions.ConnectionError('offline')):
            with patch.object(self.service.client.order, 'create', side_effect=error):
                with self.assertRaises(PaymentServiceException):
                    self.service.create_order(self.booking)

        self.assertEqual(PaymentTransaction.objects.filter(is_successful=False).count(), 2)

    def test_response_without_order_id(self):
        with patch.object(self.service.client.order, 'create', return_value={'error': 'nope'}):
            with self.assertRaisesMessage(PaymentServiceException, 'Razorpay returned no order id'):
                self.service.create_order(self.booking)

    def test_signature_round_trip(self):
        signature = razorpay_signature('order_P1', 'pay_P1')

        self.assertTrue(self.service.verify_signature('order_P1', 'pay_P1', signature))
        self.assertFalse(self.service.verify_signature('order_P1', 'pay_P2', signature))
        self.assertFalse(self.service.verify_signature('order_P1', 'pay_P1', razorpay_signature('order_P1', 'pay_P1', 'wrong')))

    def test_signature_checks_are_audited_without_secrets(self):
        self.service.verify_signature('order_P1', 'pay_P1', 'forged')

        transaction = PaymentTransaction.objects.get()
        self.assertEqual(transaction.transaction_type, 'verify_signature')
        self.assertFalse(transaction.is_successful)
        self.assertNotIn('razorpay_signature', transaction.request_data)
        self.assertIsNone(transaction.booking)
