"""
Celery tasks for bookings: notification emails and the expiry sweep.
"""

import logging

from celery import shared_task

from .models import Booking

logger = logging.getLogger(__name__)


def _load_booking(booking_id):
    return Booking.objects.select_related('event', 'event__organizer', 'user').get(id=booking_id)


@shared_task(bind=True, max_retries=3)
def send_booking_confirmation_email(self, booking_id):
    """Email the booking user (and attendees) their tickets after payment."""
    from .email_sender import send_booking_confirmation

    try:
        booking = _load_booking(booking_id)
    except Booking.DoesNotExist:
        logger.error(f"📧 [EMAIL] Booking {booking_id} not found, skipping confirmation email")
        return {'status': 'skipped', 'reason': 'booking_not_found'}

    if not booking.is_confirmed:
        logger.warning(f"📧 [EMAIL] Booking {booking.booking_id} not confirmed (status: {booking.status}), skipping")
        return {'status': 'skipped', 'reason': 'booking_not_confirmed'}

    try:
        sent = send_booking_confirmation(booking)
    except Exception as exc:
        logger.error(f"📧 [EMAIL] Confirmation email for booking {booking.booking_id} failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    return {'status': 'sent', 'emails_sent': sent}


@shared_task(bind=True, max_retries=3)
def send_ticket_cancellation_emails(self, booking_id, ticket_number, initiated_by):
    """Notify user, organizer and admin about a cancelled ticket."""
    from .email_sender import send_ticket_cancellation

    try:
        booking = _load_booking(booking_id)
    except Booking.DoesNotExist:
        logger.error(f"📧 [EMAIL] Booking {booking_id} not found, skipping cancellation emails")
        return {'status': 'skipped', 'reason': 'booking_not_found'}

    try:
        sent = send_ticket_cancellation(booking, ticket_number, initiated_by)
    except Exception as exc:
        logger.error(f"📧 [EMAIL] Cancellation emails for ticket {ticket_number} failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

    return {'status': 'sent', 'emails_sent': sent}


@shared_task
def sweep_expired_tickets():
    """Expire active tickets of events that already happened. Scheduled hourly by beat."""
    from .services import BookingService

    updated = BookingService().sweep_expired_bookings()
    logger.info(f"⏰ [EXPIRY] Scheduled sweep finished: {updated} booking(s) updated")
    return {'updated_count': updated}
