"""
Ticket lifecycle engine.

Each ticket in a booking lives in ``Booking.ticket_details`` as a dict and
moves through a small state machine:

    active --(event date passes)--> expired
    active --(cancellation)-------> cancelled

``expired`` and ``cancelled`` are terminal. ``used`` is accepted when read
back from storage but is never produced here; check-in is recorded in
``Booking.verified_tickets`` instead.

The booking-level status follows from the tickets: a confirmed booking whose
tickets are all cancelled becomes cancelled.

Functions here only mutate the in-memory booking. Persisting it, adjusting
event inventory and notifying people is left to ``BookingService``.
"""

from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from .exceptions import InvalidTicketTransition

TICKET_ACTIVE = 'active'
TICKET_EXPIRED = 'expired'
TICKET_CANCELLED = 'cancelled'
TICKET_USED = 'used'

TICKET_STATUSES = (TICKET_ACTIVE, TICKET_EXPIRED, TICKET_CANCELLED, TICKET_USED)

ALLOWED_TRANSITIONS = {
    TICKET_ACTIVE: {TICKET_EXPIRED, TICKET_CANCELLED},
}

REFUND_NOT_INITIATED = 'not_initiated'
REFUND_PENDING = 'pending'
REFUND_COMPLETED = 'completed'

VERIFICATION_APPROVED = 'approved'
VERIFICATION_DENIED = 'denied'
VERIFICATION_STATUSES = (VERIFICATION_APPROVED, VERIFICATION_DENIED)

CANCELLED_BY_USER = 'user'
CANCELLED_BY_ORGANIZER = 'organizer'

SWEEPABLE_BOOKING_STATUSES = ('pending', 'confirmed')

CENT = Decimal('0.01')


def build_ticket_record(ticket_number, attendee=None, status=TICKET_ACTIVE):
    """Return a fresh ticket sub-record for `ticket_number`."""
    attendee = attendee or {}
    return {
        'ticketNumber': ticket_number,
        'attendeeName': attendee.get('name', ''),
        'attendeeEmail': attendee.get('email', ''),
        'attendeePhone': attendee.get('phone', ''),
        'status': status,
        'cancelledAt': None,
        'cancellationReason': None,
        'cancelledBy': None,
        'refundStatus': REFUND_NOT_INITIATED,
        'refundAmount': None,
    }


def build_ticket_details(booking, legacy_cancelled=()):
    """
    Build ticket sub-records from the attendee list and ticket numbers.

    Ticket numbers found in `legacy_cancelled` come back as cancelled. If the
    booking was already swept, the rest come back expired.
    """
    attendees = booking.attendee_details or []
    default_status = TICKET_EXPIRED if booking.is_expired else TICKET_ACTIVE
    details = []
    for index, ticket_number in enumerate(booking.ticket_numbers or []):
        attendee = attendees[index] if index < len(attendees) else {}
        if ticket_number in legacy_cancelled:
            record = build_ticket_record(ticket_number, attendee, TICKET_CANCELLED)
        else:
            record = build_ticket_record(ticket_number, attendee, default_status)
        details.append(record)
    return details


def materialize_ticket_details(booking):
    """
    Populate ``ticket_details`` from older storage shapes when it is missing.

    Runs once per load through ``Booking.from_db``. The result stays in
    memory until the booking is next saved. Returns True when anything was
    built.
    """
    if booking.ticket_details or not booking.ticket_numbers:
        return False
    booking.ticket_details = build_ticket_details(
        booking, legacy_cancelled=set(booking.cancelled_tickets or [])
    )
    return True


def cancelled_ticket_numbers(booking):
    """The legacy ``cancelled_tickets`` projection of ``ticket_details``."""
    return [
        ticket['ticketNumber']
        for ticket in booking.ticket_details or []
        if ticket.get('status') == TICKET_CANCELLED
    ]


def find_ticket(booking, ticket_number):
    """Return the sub-record for `ticket_number`, or None."""
    for ticket in booking.ticket_details or []:
        if ticket.get('ticketNumber') == ticket_number:
            return ticket
    return None


def can_transition(current, new):
    return new in ALLOWED_TRANSITIONS.get(current, set())


def transition_ticket(ticket, new_status):
    """Move one ticket to `new_status` or raise InvalidTicketTransition."""
    current = ticket.get('status', TICKET_ACTIVE)
    if not can_transition(current, new_status):
        if current == TICKET_CANCELLED:
            message = 'Ticket is already cancelled'
        elif current == TICKET_EXPIRED:
            message = 'Ticket has expired'
        else:
            message = f'Ticket cannot move from {current} to {new_status}'
        raise InvalidTicketTransition(message)
    ticket['status'] = new_status
    return ticket


def per_ticket_refund(booking):
    """Even split of the booking total, rounded to 2 places."""
    return (Decimal(booking.total_price) / booking.quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def all_tickets_cancelled(booking):
    tickets = booking.ticket_details or []
    return bool(tickets) and all(t.get('status') == TICKET_CANCELLED for t in tickets)


def cancel_ticket(booking, ticket_number, reason, cancelled_by, now=None):
    """
    Cancel one active ticket and record its pending refund.

    Marks the whole booking cancelled once its last ticket is cancelled.
    Returns the updated ticket record.
    """
    now = now or timezone.now()
    ticket = find_ticket(booking, ticket_number)
    if ticket is None:
        raise InvalidTicketTransition('Ticket not found in this booking')

    transition_ticket(ticket, TICKET_CANCELLED)
    ticket['cancelledAt'] = now.isoformat()
    ticket['cancellationReason'] = reason
    ticket['cancelledBy'] = cancelled_by
    ticket['refundStatus'] = REFUND_PENDING
    ticket['refundAmount'] = str(per_ticket_refund(booking))

    if all_tickets_cancelled(booking):
        booking.status = 'cancelled'
        booking.cancelled_at = now
        booking.cancellation_reason = reason
    return ticket


def expire_booking(booking, now=None):
    """
    Expire the active tickets of a booking whose event has already happened.

    Cancelled tickets are left alone. Returns True when the booking changed
    and needs saving.
    """
    now = now or timezone.now()
    if booking.status not in SWEEPABLE_BOOKING_STATUSES or booking.is_expired:
        return False
    if booking.event.date >= now:
        return False

    materialize_ticket_details(booking)
    for ticket in booking.ticket_details or []:
        if ticket.get('status') == TICKET_ACTIVE:
            transition_ticket(ticket, TICKET_EXPIRED)

    booking.is_expired = True
    booking.expiry_checked_at = now
    return True


def find_verification(booking, ticket_number):
    for record in booking.verified_tickets or []:
        if record.get('ticketNumber') == ticket_number:
            return record
    return None


def record_verification(booking, ticket_number, verified_by, verification_status, now=None):
    """Append a check-in record for `ticket_number` and return it."""
    now = now or timezone.now()
    record = {
        'ticketNumber': ticket_number,
        'verifiedAt': now.isoformat(),
        'verifiedBy': verified_by,
        'status': verification_status,
    }
    booking.verified_tickets = list(booking.verified_tickets or []) + [record]
    return record
