"""
Expire active tickets of events that already took place.

Celery beat runs the same sweep hourly; this command is for cron setups and
manual catch-up.

Usage:
    python manage.py sweep_expired_tickets
    python manage.py sweep_expired_tickets --dry-run  # Preview what would be expired
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.bookings import lifecycle
from apps.bookings.models import Booking
from apps.bookings.services import BookingService


class Command(BaseCommand):
    help = 'Expire active tickets for bookings whose event date has passed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without saving anything',
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options['dry_run']:
            candidates = Booking.objects.filter(
                status__in=lifecycle.SWEEPABLE_BOOKING_STATUSES,
                is_expired=False,
                event__date__lt=now,
            ).select_related('event')
            total = candidates.count()
            self.stdout.write(self.style.WARNING(f'🔍 DRY RUN: {total} booking(s) would be expired'))
            for booking in candidates[:10]:
                self.stdout.write(f'  - {booking.booking_id}: {booking.event.title} ({booking.event.date:%Y-%m-%d})')
            if total > 10:
                self.stdout.write(f'  ... and {total - 10} more')
            return

        updated = BookingService().sweep_expired_bookings(now=now)
        self.stdout.write(self.style.SUCCESS(f'✅ Expired tickets on {updated} booking(s)'))
