"""Shared fixtures for booking tests."""

import hashlib
import hmac
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.bookings import lifecycle
from apps.bookings.models import Booking
from apps.events.models import Event
from core.utils import generate_ticket_numbers


def create_user(email='buyer@test.com', **extra):
    User = get_user_model()
    return User.objects.create_user(
        email=email,
        username=email.split('@')[0],
        password='password123',
        **extra
    )


def create_organizer(email='organizer@test.com', **extra):
    extra.setdefault('organization_name', 'Test Events Co')
    return create_user(email=email, is_organizer=True, **extra)


def create_event(organizer, price='500.00', tickets=10, days_ahead=7, **extra):
    date = timezone.now() + timedelta(days=days_ahead)
    defaults = {
        'title': 'Indie Night',
        'description': 'Live music',
        'category': 'music',
        'location': 'Bengaluru',
        'date': date,
        'booking_expiry': date - timedelta(hours=2),
    }
    defaults.update(extra)
    return Event.objects.create(
        organizer=organizer,
        price=Decimal(price),
        total_tickets=tickets,
        available_tickets=tickets,
        **defaults
    )


def attendees(count):
    return [
        {'name': f'Guest {i}', 'email': f'guest{i}@test.com', 'phone': f'+9198765432{i:02d}'}
        for i in range(count)
    ]


def create_confirmed_booking(user, event, quantity=2, **extra):
    """A paid booking with minted tickets, as verify_payment leaves it."""
    fields = {
        'total_price': event.price * quantity,
        'attendee_details': attendees(quantity),
        'status': 'confirmed',
        'payment_status': 'completed',
    }
    fields.update(extra)
    booking = Booking(user=user, event=event, quantity=quantity, **fields)
    booking.ticket_numbers = generate_ticket_numbers(quantity)
    booking.ticket_details = lifecycle.build_ticket_details(booking)
    booking.save()
    return booking


def razorpay_signature(order_id, payment_id, secret=None):
    secret = secret or settings.RAZORPAY_KEY_SECRET
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()
