"""
Booking email sender.

Builds multipart emails (text + HTML with inline QR codes) for booking
confirmations and ticket cancellations. Confirmations also carry a PDF ticket
from ``apps.bookings.pdf_tickets``. Called from Celery tasks in
``apps.bookings.tasks``; SMTP errors propagate so the task can retry.

Usage:
    from apps.bookings.email_sender import send_booking_confirmation

    sent = send_booking_confirmation(booking)
"""

import logging
from email.mime.image import MIMEImage
from urllib.parse import urlencode

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string

from apps.payouts.models import SystemSettings
from core.phone_utils import format_phone_display
from core.utils import generate_qr_code_png

from .lifecycle import CANCELLED_BY_ORGANIZER, TICKET_CANCELLED, find_ticket
from .pdf_tickets import booking_reference, generate_ticket_pdf

logger = logging.getLogger(__name__)

CONFIRMATION_TEMPLATE = 'bookings/emails/booking_confirmation'
CANCELLED_USER_TEMPLATE = 'bookings/emails/ticket_cancelled_user'
CANCELLED_ORGANIZER_TEMPLATE = 'bookings/emails/ticket_cancelled_organizer'
CANCELLED_ADMIN_TEMPLATE = 'bookings/emails/ticket_cancelled_admin'


def ticket_qr_payload(booking, ticket_number):
    """URL encoded into a ticket's QR code; it opens the organizer check-in page."""
    frontend_url = getattr(settings, 'FRONTEND_URL', 'http://localhost:5173').rstrip('/')
    query = urlencode({'ticketNumber': ticket_number, 'bookingId': str(booking.id)})
    return f"{frontend_url}/verify-ticket?{query}"


def _event_context(event):
    return {
        'title': event.title,
        'date': event.date,
        'location': event.location,
        'organization_name': getattr(event.organizer, 'organization_name', '') or 'GetTogether',
    }


def _ticket_rows(booking):
    """Template rows for the tickets that are still valid."""
    rows = []
    for ticket in booking.ticket_details or []:
        if ticket.get('status') == TICKET_CANCELLED:
            continue
        rows.append({
            'ticket_number': ticket['ticketNumber'],
            'attendee_name': ticket.get('attendeeName', ''),
            'attendee_email': ticket.get('attendeeEmail', ''),
            'attendee_phone': format_phone_display(ticket.get('attendeePhone', '')),
            'qr_cid': f"qr_code_{ticket['ticketNumber']}",
        })
    return rows


def _build_message(subject, template, context, to_email, inline_qr=None):
    """Render `template` (.txt and .html) into a message with optional inline QR images."""
    text_body = render_to_string(f'{template}.txt', context)
    html_body = render_to_string(f'{template}.html', context)

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to_email],
    )
    msg.attach_alternative(html_body, 'text/html')

    if inline_qr:
        # Images referenced by cid: must sit in the same multipart/related part as the HTML
        msg.mixed_subtype = 'related'
        for content_id, payload in inline_qr:
            qr_image = MIMEImage(generate_qr_code_png(payload))
            qr_image.add_header('Content-ID', f'<{content_id}>')
            qr_image.add_header('Content-Disposition', 'inline')
            msg.attach(qr_image)
    return msg


def _ticket_pdf(booking, rows):
    """PDF with the given tickets, or None if it cannot be rendered; the email goes out either way."""
    try:
        return generate_ticket_pdf(booking, rows, lambda number: ticket_qr_payload(booking, number))
    except Exception as e:
        logger.error(f"❌ [EMAIL] PDF ticket generation failed for booking {booking.booking_id}: {e}", exc_info=True)
        return None


def _send_all(messages):
    """Send messages over one SMTP connection and return how many went out."""
    if not messages:
        return 0
    connection = get_connection()
    return connection.send_messages(messages) or 0


def send_booking_confirmation(booking):
    """
    Send the confirmation to the booking user with every ticket, plus one
    email to each attendee (with a different address) holding just their ticket.

    Returns the number of emails sent.
    """
    event = booking.event
    user = booking.user
    messages = []

    rows = _ticket_rows(booking)
    context = {
        'user_name': user.get_full_name() or user.email,
        'booking': booking,
        'event': _event_context(event),
        'tickets': rows,
        'frontend_url': getattr(settings, 'FRONTEND_URL', ''),
        'support_email': SystemSettings.load().contact_email,
    }
    inline_qr = [(row['qr_cid'], ticket_qr_payload(booking, row['ticket_number'])) for row in rows]
    buyer_message = _build_message(
        f"🎫 Booking Confirmed - {event.title}", CONFIRMATION_TEMPLATE, context, user.email, inline_qr
    )
    pdf = _ticket_pdf(booking, rows)
    if pdf:
        buyer_message.attach(f"tickets-{booking_reference(booking)}.pdf", pdf, "application/pdf")
    messages.append(buyer_message)

    for row in rows:
        attendee_email = row['attendee_email']
        if not attendee_email or attendee_email.lower() == user.email.lower():
            continue
        attendee_context = dict(context, user_name=row['attendee_name'] or attendee_email, tickets=[row])
        attendee_message = _build_message(
            f"🎫 Your Ticket - {event.title}",
            CONFIRMATION_TEMPLATE,
            attendee_context,
            attendee_email,
            [(row['qr_cid'], ticket_qr_payload(booking, row['ticket_number']))],
        )
        attendee_pdf = _ticket_pdf(booking, [row])
        if attendee_pdf:
            attendee_message.attach(f"ticket-{row['ticket_number']}.pdf", attendee_pdf, "application/pdf")
        messages.append(attendee_message)

    sent = _send_all(messages)
    logger.info(f"📧 [EMAIL] Booking {booking.booking_id}: sent {sent} confirmation email(s)")
    return sent


def send_ticket_cancellation(booking, ticket_number, initiated_by):
    """
    Notify the booking user, the organizer and the platform admin that a
    ticket was cancelled. Returns the number of emails sent.
    """
    ticket = find_ticket(booking, ticket_number)
    if ticket is None:
        logger.warning(f"📧 [EMAIL] Ticket {ticket_number} not found in booking {booking.booking_id}, skipping")
        return 0

    event = booking.event
    user = booking.user
    organizer = event.organizer
    by_organizer = initiated_by == CANCELLED_BY_ORGANIZER

    context = {
        'user_name': user.get_full_name() or user.email,
        'user_email': user.email,
        'organizer_name': organizer.get_full_name() or organizer.email,
        'booking': booking,
        'event': _event_context(event),
        'ticket': {
            'ticket_number': ticket['ticketNumber'],
            'attendee_name': ticket.get('attendeeName', ''),
            'reason': ticket.get('cancellationReason') or '',
            'refund_amount': ticket.get('refundAmount') or '0.00',
            'cancelled_at': ticket.get('cancelledAt'),
        },
        'by_organizer': by_organizer,
    }

    messages = []
    user_subject = (
        f"Ticket Cancelled by Organizer - {event.title}" if by_organizer
        else f"Ticket Cancellation Confirmed - {event.title}"
    )
    messages.append(_build_message(user_subject, CANCELLED_USER_TEMPLATE, context, user.email))

    if organizer.email:
        messages.append(_build_message(
            f"Ticket Cancelled - {event.title}", CANCELLED_ORGANIZER_TEMPLATE, context, organizer.email
        ))

    admin_email = getattr(settings, 'ADMIN_NOTIFICATION_EMAIL', '')
    if admin_email:
        admin_subject = (
            f"[Admin Alert] Organizer Cancelled Ticket - {event.title}" if by_organizer
            else f"[Admin Alert] Ticket Cancellation - {event.title}"
        )
        messages.append(_build_message(admin_subject, CANCELLED_ADMIN_TEMPLATE, context, admin_email))

    sent = _send_all(messages)
    logger.info(f"📧 [EMAIL] Ticket {ticket_number}: sent {sent} cancellation email(s)")
    return sent
