"""
Payment services.
Bridge to the Razorpay gateway: order creation and callback signature checks.
"""

import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

import razorpay
import requests
from django.conf import settings

from .models import PaymentTransaction
import logging

logger = logging.getLogger(__name__)


class PaymentServiceException(Exception):
    """Custom exception for payment service errors"""
    pass


class RazorpayPaymentService:
    """
    Razorpay order and signature service.

    Amounts are sent in minor units (paise for INR). The order receipt is the
    booking's primary key, so a gateway order always points back to exactly
    one booking.
    """

    provider = 'razorpay'

    def __init__(self, key_id: Optional[str] = None, key_secret: Optional[str] = None,
                 currency: Optional[str] = None, client: Optional[razorpay.Client] = None):
        self.key_id = key_id or settings.RAZORPAY_KEY_ID
        self.key_secret = key_secret or settings.RAZORPAY_KEY_SECRET
        self.currency = currency or getattr(settings, 'RAZORPAY_CURRENCY', 'INR')

        if not self.key_id or not self.key_secret:
            raise PaymentServiceException("Razorpay configuration missing: key_id or key_secret")

        self.client = client or razorpay.Client(auth=(self.key_id, self.key_secret))

    @staticmethod
    def to_minor_units(amount) -> int:
        """Convert a major-unit amount (rupees) to an integer of minor units (paise)."""
        return int((Decimal(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    def log_transaction(self, booking, transaction_type: str, request_data: Dict,
                        response_data: Dict, is_successful: bool, error_message: str = "",
                        duration_ms: Optional[int] = None, gateway_order_id: str = ""):
        """Log transaction for audit and debugging"""
        PaymentTransaction.objects.create(
            booking=booking,
            provider=self.provider,
            transaction_type=transaction_type,
            gateway_order_id=gateway_order_id or "",
            request_data=request_data,
            response_data=response_data,
            is_successful=is_successful,
            error_message=error_message,
            duration_ms=duration_ms
        )

    def create_order(self, booking) -> Dict[str, Any]:
        """
        Create a gateway order for the booking total.

        Raises PaymentServiceException when the gateway rejects the request or
        cannot be reached.
        """
        request_data = {
            'amount': self.to_minor_units(booking.total_price),
            'currency': self.currency,
            'receipt': str(booking.id),
            'notes': {
                'bookingId': str(booking.id),
                'eventId': str(booking.event_id),
                'userId': str(booking.user_id),
            },
        }

        start_time = time.time()
        logger.info(f"💳 [PAYMENT] Creating Razorpay order for booking {booking.id} ({request_data['amount']} {self.currency})")
        try:
            order = self.client.order.create(data=request_data)
        except (razorpay.errors.BadRequestError,
                razorpay.errors.GatewayError,
                razorpay.errors.ServerError,
                requests.exceptions.RequestException) as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(f"❌ [PAYMENT] Razorpay order creation failed for booking {booking.id}: {e}")
            self.log_transaction(booking, 'create_order', request_data, {}, False,
                                 error_message=str(e), duration_ms=duration_ms)
            raise PaymentServiceException(f"Razorpay order creation failed: {e}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        order_id = order.get('id') if isinstance(order, dict) else None
        if not order_id:
            logger.error(f"❌ [PAYMENT] Razorpay returned no order id for booking {booking.id}: {order}")
            self.log_transaction(booking, 'create_order', request_data, order or {}, False,
                                 error_message='Missing order id in gateway response',
                                 duration_ms=duration_ms)
            raise PaymentServiceException("Razorpay returned no order id")

        self.log_transaction(booking, 'create_order', request_data, order, True,
                             duration_ms=duration_ms, gateway_order_id=order_id)
        logger.info(f"✅ [PAYMENT] Razorpay order {order_id} created in {duration_ms}ms")
        return order

    def verify_signature(self, order_id: str, payment_id: str, signature: str, booking=None) -> bool:
        """
        Check the callback signature: HMAC-SHA256(key_secret, "<order_id>|<payment_id>").

        Returns False on mismatch instead of raising. Every attempt is audited.
        """
        request_data = {
            'razorpay_order_id': order_id,
            'razorpay_payment_id': payment_id,
        }
        start_time = time.time()
        try:
            self.client.utility.verify_payment_signature({
                'razorpay_order_id': order_id,
                'razorpay_payment_id': payment_id,
                'razorpay_signature': signature,
            })
            is_valid = True
        except razorpay.errors.SignatureVerificationError:
            is_valid = False

        duration_ms = int((time.time() - start_time) * 1000)
        self.log_transaction(
            booking, 'verify_signature', request_data, {'valid': is_valid}, is_valid,
            error_message='' if is_valid else 'Signature mismatch',
            duration_ms=duration_ms, gateway_order_id=order_id
        )
        if is_valid:
            logger.info(f"✅ [PAYMENT] Signature verified for order {order_id}, payment {payment_id}")
        else:
            logger.warning(f"⚠️ [PAYMENT] Signature mismatch for order {order_id}, payment {payment_id}")
        return is_valid
