"""
Booking services.

Multi-step booking operations. Each one writes the booking first, then
adjusts event inventory, then queues notifications. There is no
transaction across those steps: if the inventory write fails after the
booking write succeeded, the booking keeps its new state and is flagged
with ``needs_reconciliation`` for manual follow-up. Notification failures
are logged and never change the outcome.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from apps.events.models import Event
from apps.payouts.models import SystemSettings
from core.utils import generate_ticket_numbers
from payment_processor.services import PaymentServiceException, RazorpayPaymentService

from . import lifecycle, tasks
from .exceptions import (
    BookingNotFound,
    BookingPermissionDenied,
    BookingsClosed,
    BookingValidationError,
    PaymentGatewayError,
    PaymentVerificationFailed,
)
from .models import Booking

logger = logging.getLogger(__name__)

DEFAULT_USER_CANCELLATION_REASON = 'Cancelled by user'
ORGANIZER_REASON_PREFIX = 'Organizer cancelled: '


class BookingService:
    """Booking lifecycle operations used by the bookings API and Celery tasks."""

    def __init__(self, payment_service=None):
        self._payment_service = payment_service

    @property
    def payment_service(self):
        if self._payment_service is None:
            try:
                self._payment_service = RazorpayPaymentService()
            except PaymentServiceException as e:
                logger.error(f"❌ [PAYMENT] Payment service unavailable: {e}")
                raise PaymentGatewayError('Payment gateway is not configured') from e
        return self._payment_service

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_booking(self, booking_id):
        try:
            return Booking.objects.select_related('event', 'event__organizer', 'user').get(pk=booking_id)
        except Booking.DoesNotExist:
            raise BookingNotFound()
        except (DjangoValidationError, ValueError):
            raise BookingValidationError('Invalid booking ID')

    def get_event(self, event_id):
        try:
            return Event.objects.get(pk=event_id)
        except Event.DoesNotExist:
            raise BookingNotFound('Event not found')
        except (DjangoValidationError, ValueError):
            raise BookingValidationError('Invalid event ID')

    def get_booking_for_user(self, user, booking_id):
        booking = self.get_booking(booking_id)
        if booking.user_id != user.id:
            raise BookingPermissionDenied('Not authorized to view this booking')
        return booking

    # ------------------------------------------------------------------
    # Creation and payment
    # ------------------------------------------------------------------

    def create_booking(self, user, event_id, quantity, attendee_details):
        """
        Create a pending booking and a gateway order for its total.

        Inventory is not touched here; it moves on payment verification.
        If the gateway call fails the booking stays pending with no order id.
        """
        event = self.get_event(event_id)

        if not SystemSettings.load().allow_new_bookings:
            raise BookingsClosed()
        if quantity != len(attendee_details):
            raise BookingValidationError('Quantity must match attendee details count')
        if timezone.now() > event.booking_expiry:
            raise BookingValidationError('Booking period has expired for this event')
        if event.available_tickets < quantity:
            raise BookingValidationError(f'Only {event.available_tickets} tickets available')

        payment_service = self.payment_service

        booking = Booking.objects.create(
            user=user,
            event=event,
            quantity=quantity,
            total_price=event.price * quantity,
            attendee_details=attendee_details,
            status='pending',
        )
        logger.info(f"🎟️ [BOOKING] Created pending booking {booking.booking_id} for event {event.id} ({quantity} ticket(s))")

        try:
            order = payment_service.create_order(booking)
        except PaymentServiceException as e:
            logger.error(f"❌ [BOOKING] Order creation failed for booking {booking.booking_id}: {e}")
            raise PaymentGatewayError() from e

        booking.razorpay_order_id = order['id']
        booking.save(update_fields=['razorpay_order_id', 'updated_at'])

        return {
            'message': 'Booking initiated',
            'booking': {
                '_id': str(booking.id),
                'bookingId': booking.booking_id,
                'razorpayOrderId': booking.razorpay_order_id,
                'amount': booking.total_price,
                'quantity': booking.quantity,
                'eventId': str(event.id),
            },
            'razorpayKey': payment_service.key_id,
        }

    def verify_payment(self, user, booking_id, order_id, payment_id, signature):
        """
        Confirm a booking from a signed gateway callback.

        A repeated callback for an already confirmed booking with the same
        payment id returns the existing tickets without minting or touching
        inventory again.
        """
        if not self.payment_service.verify_signature(order_id, payment_id, signature):
            raise PaymentVerificationFailed()

        booking = self.get_booking(booking_id)
        if booking.user_id != user.id:
            raise BookingPermissionDenied('Not authorized to confirm this booking')
        if booking.razorpay_order_id and booking.razorpay_order_id != order_id:
            raise BookingValidationError('Payment order does not match this booking')

        if booking.is_confirmed and booking.razorpay_payment_id == payment_id:
            logger.warning(f"⚠️ [BOOKING] Duplicate verification for booking {booking.booking_id} (payment {payment_id}), returning existing tickets")
            return self._confirmation_payload(booking)
        if booking.is_cancelled:
            self._record_orphaned_payment(booking, order_id, payment_id, signature)
            raise BookingValidationError('Booking has been cancelled')
        if booking.is_confirmed:
            raise BookingValidationError('Booking is already confirmed')

        # Step 1: confirm and mint tickets
        booking.status = 'confirmed'
        booking.payment_status = 'completed'
        booking.razorpay_order_id = order_id
        booking.razorpay_payment_id = payment_id
        booking.razorpay_signature = signature
        booking.ticket_numbers = generate_ticket_numbers(booking.quantity)
        booking.ticket_details = lifecycle.build_ticket_details(booking)
        try:
            with transaction.atomic():
                booking.save()
        except IntegrityError:
            logger.error(f"❌ [BOOKING] Payment {payment_id} is already attached to another booking")
            raise BookingValidationError('Payment has already been used for another booking')
        logger.info(f"✅ [BOOKING] Booking {booking.booking_id} confirmed with tickets {booking.ticket_numbers}")

        # Step 2: take the tickets out of inventory
        self._adjust_inventory(booking, -booking.quantity, 'confirmation')

        # Step 3: notify
        self._enqueue(tasks.send_booking_confirmation_email, str(booking.id))

        return self._confirmation_payload(booking)

    def _record_orphaned_payment(self, booking, order_id, payment_id, signature):
        """Keep a verified payment that arrived after the booking was cancelled, flagged for refund."""
        if booking.razorpay_payment_id == payment_id and booking.needs_reconciliation:
            return
        booking.razorpay_order_id = order_id
        booking.razorpay_payment_id = payment_id
        booking.razorpay_signature = signature
        booking.payment_status = 'completed'
        try:
            with transaction.atomic():
                booking.save(update_fields=[
                    'razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature',
                    'payment_status', 'updated_at',
                ])
        except IntegrityError:
            logger.error(f"❌ [BOOKING] Payment {payment_id} is already attached to another booking")
            raise BookingValidationError('Payment has already been used for another booking')
        booking.mark_for_reconciliation('Payment captured for a cancelled booking; refund required')
        logger.error(
            f"🧾 [RECONCILE] Payment {payment_id} captured for cancelled booking {booking.booking_id}; refund required"
        )

    @staticmethod
    def _confirmation_payload(booking):
        return {
            'message': 'Payment verified and booking confirmed',
            'booking': {
                '_id': str(booking.id),
                'bookingId': booking.booking_id,
                'ticketNumbers': booking.ticket_numbers,
                'eventId': str(booking.event_id),
                'quantity': booking.quantity,
                'totalPrice': booking.total_price,
                'status': booking.status,
            },
        }

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel_pending_booking(self, user, booking_id):
        """Cancel the caller's booking before payment. Inventory is untouched."""
        booking = self.get_booking(booking_id)
        if booking.user_id != user.id:
            raise BookingPermissionDenied('Not authorized to cancel this booking')
        if not booking.is_pending:
            raise BookingValidationError('Only pending bookings can be cancelled')

        booking.status = 'cancelled'
        booking.payment_status = 'failed'
        booking.cancelled_at = timezone.now()
        booking.cancellation_reason = DEFAULT_USER_CANCELLATION_REASON
        booking.save()
        logger.info(f"🎟️ [BOOKING] Pending booking {booking.booking_id} cancelled by owner")
        return booking

    def cancel_ticket(self, actor, booking_id, ticket_number, reason=None,
                      initiated_by=lifecycle.CANCELLED_BY_USER):
        """
        Cancel one ticket, return it to inventory and queue notifications.

        Organizers must own the event and give a reason; users must own the
        booking and may omit it.
        """
        booking = self.get_booking(booking_id)

        if initiated_by == lifecycle.CANCELLED_BY_ORGANIZER:
            if booking.event.organizer_id != actor.id:
                raise BookingPermissionDenied('Not authorized to cancel this ticket')
            reason = (reason or '').strip()
            if not reason:
                raise BookingValidationError('Cancellation reason is required')
            reason = f'{ORGANIZER_REASON_PREFIX}{reason}'
        else:
            if booking.user_id != actor.id:
                raise BookingPermissionDenied('Not authorized to cancel this ticket')
            reason = (reason or '').strip() or DEFAULT_USER_CANCELLATION_REASON

        ticket = lifecycle.find_ticket(booking, ticket_number)
        if ticket is None:
            raise BookingNotFound('Ticket not found in this booking')
        if ticket.get('status') == lifecycle.TICKET_ACTIVE and not booking.is_confirmed:
            raise BookingValidationError('Only confirmed bookings can have tickets cancelled')

        # Step 1: ticket state and refund bookkeeping
        ticket = lifecycle.cancel_ticket(booking, ticket_number, reason, initiated_by)
        booking.save()
        logger.info(
            f"🎫 [TICKET] Ticket {ticket_number} of booking {booking.booking_id} cancelled by "
            f"{initiated_by}; refund Rs {ticket['refundAmount']} pending, booking now {booking.status}"
        )

        # Step 2: return the seat
        self._adjust_inventory(booking, 1, f'cancellation of {ticket_number}')

        # Step 3: notify
        self._enqueue(tasks.send_ticket_cancellation_emails, str(booking.id), ticket_number, initiated_by)

        return {
            'message': 'Ticket cancelled successfully',
            'ticket': {
                'ticketNumber': ticket['ticketNumber'],
                'status': ticket['status'],
                'refundAmount': ticket['refundAmount'],
                'refundStatus': ticket['refundStatus'],
                'cancelledAt': ticket['cancelledAt'],
            },
            'bookingStatus': booking.status,
        }

    # ------------------------------------------------------------------
    # Check-in
    # ------------------------------------------------------------------

    def _get_booking_for_organizer(self, organizer, booking_id, message):
        booking = self.get_booking(booking_id)
        if booking.event.organizer_id != organizer.id:
            raise BookingPermissionDenied(message)
        return booking

    def verify_ticket(self, organizer, booking_id, ticket_number,
                      verification_status=lifecycle.VERIFICATION_APPROVED):
        """Record an entry check-in. Repeat calls return the first record unchanged."""
        if verification_status not in lifecycle.VERIFICATION_STATUSES:
            raise BookingValidationError('Verification status must be "approved" or "denied"')

        booking = self._get_booking_for_organizer(organizer, booking_id, 'Not authorized to verify this ticket')
        if ticket_number not in (booking.ticket_numbers or []):
            raise BookingNotFound('Ticket not found in this booking')

        existing = lifecycle.find_verification(booking, ticket_number)
        if existing:
            return {
                'message': f"Ticket already {existing['status']}",
                'verified': True,
                'alreadyVerified': True,
                'status': existing['status'],
                'verifiedAt': existing['verifiedAt'],
            }

        ticket = lifecycle.find_ticket(booking, ticket_number)
        if ticket and ticket.get('status') == lifecycle.TICKET_CANCELLED:
            raise BookingValidationError('Cancelled tickets cannot be verified')

        record = lifecycle.record_verification(booking, ticket_number, organizer.id, verification_status)
        booking.save()
        logger.info(f"🎫 [TICKET] Ticket {ticket_number} {verification_status} at entry by organizer {organizer.id}")

        return {
            'message': f'Ticket {verification_status} successfully',
            'verified': True,
            'alreadyVerified': False,
            'status': verification_status,
            'verifiedAt': record['verifiedAt'],
        }

    def ticket_status(self, organizer, booking_id, ticket_number):
        booking = self._get_booking_for_organizer(organizer, booking_id, 'Not authorized to view this ticket')
        ticket = lifecycle.find_ticket(booking, ticket_number)
        if ticket is None:
            raise BookingNotFound('Ticket not found in this booking')

        record = lifecycle.find_verification(booking, ticket_number)
        return {
            'ticketNumber': ticket_number,
            'isVerified': record is not None,
            'verificationStatus': record['status'] if record else None,
            'verifiedAt': record['verifiedAt'] if record else None,
            'ticketStatus': ticket.get('status'),
        }

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def user_bookings(self, user, now=None):
        """The user's confirmed and cancelled bookings, newest first, after an inline expiry pass."""
        self._sweep(Booking.objects.filter(user=user), now)
        return (
            Booking.objects.filter(user=user, status__in=['confirmed', 'cancelled'])
            .select_related('event', 'event__organizer')
            .order_by('-created_at')
        )

    def organizer_bookings(self, organizer):
        bookings = (
            Booking.objects.filter(event__organizer=organizer, status='confirmed')
            .select_related('event', 'event__organizer', 'user')
            .order_by('-created_at')
        )
        return {
            'bookings': bookings,
            'totalBookings': bookings.count(),
            'totalTickets': bookings.aggregate(total=Sum('quantity'))['total'] or 0,
        }

    def event_bookings(self, organizer, event_id):
        event = self.get_event(event_id)
        if event.organizer_id != organizer.id:
            raise BookingPermissionDenied('Not authorized to view this event')

        bookings = (
            Booking.objects.filter(event=event, status='confirmed')
            .select_related('event', 'event__organizer', 'user')
            .order_by('-created_at')
        )
        totals = bookings.aggregate(tickets=Sum('quantity'), revenue=Sum('total_price'))
        return {
            'bookings': bookings,
            'analytics': {
                'totalBookings': bookings.count(),
                'totalTickets': totals['tickets'] or 0,
                'totalRevenue': totals['revenue'] or Decimal('0'),
            },
        }

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def sweep_expired_bookings(self, now=None):
        """Expire active tickets for every booking whose event has passed. Returns the count updated."""
        now = now or timezone.now()
        updated = self._sweep(Booking.objects.all(), now)
        logger.info(f"⏰ [EXPIRY] Sweep at {now.isoformat()} updated {updated} booking(s)")
        return updated

    def _sweep(self, queryset, now=None):
        now = now or timezone.now()
        candidates = queryset.filter(
            status__in=lifecycle.SWEEPABLE_BOOKING_STATUSES,
            is_expired=False,
            event__date__lt=now,
        ).select_related('event')

        updated = 0
        for booking in list(candidates):
            if lifecycle.expire_booking(booking, now):
                booking.save()
                updated += 1
                logger.debug(f"⏰ [EXPIRY] Booking {booking.booking_id} expired")
        return updated

    # ------------------------------------------------------------------
    # Saga helpers
    # ------------------------------------------------------------------

    def _adjust_inventory(self, booking, delta, reason):
        """Apply an inventory change; flag the booking for reconciliation if it fails."""
        try:
            with transaction.atomic():
                available = Event.adjust_inventory(booking.event_id, delta)
        except (DatabaseError, Event.DoesNotExist) as e:
            logger.error(
                f"🧾 [RECONCILE] Inventory change of {delta:+d} for event {booking.event_id} failed after "
                f"{reason} of booking {booking.booking_id}: {e}",
                exc_info=True
            )
            booking.mark_for_reconciliation(f"Inventory change of {delta:+d} failed after {reason}: {e}")
            return None
        logger.info(f"🎟️ [BOOKING] Event {booking.event_id} inventory {delta:+d}, now {available} available")
        return available

    @staticmethod
    def _enqueue(task, *args):
        """Queue a notification task; enqueue errors are logged, never raised."""
        try:
            task.delay(*args)
        except Exception as e:
            logger.error(f"📧 [EMAIL] Could not queue {task.name} for {args}: {e}", exc_info=True)
