"""
Payout calculations for organizers.

Revenue counts bookings whose payment completed. Refunds owed on cancelled
tickets are subtracted, so an organizer is never paid for a ticket the buyer
gets back.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.utils import timezone

from apps.bookings.lifecycle import TICKET_CANCELLED
from apps.bookings.models import Booking

from .models import Payout, SystemSettings

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

PROCESSED_STATUSES = ('processing', 'completed')


def _money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def refunded_amount(booking):
    """Sum of refunds recorded on the booking's cancelled tickets."""
    total = Decimal('0')
    for ticket in booking.ticket_details or []:
        if ticket.get('status') == TICKET_CANCELLED and ticket.get('refundAmount'):
            total += Decimal(ticket['refundAmount'])
    return total


def organizer_revenue(organizer, period_start=None, period_end=None):
    """Net ticket revenue for an organizer's events, optionally bounded by booking date."""
    bookings = Booking.objects.filter(event__organizer=organizer, payment_status='completed')
    if period_start:
        bookings = bookings.filter(created_at__gte=period_start)
    if period_end:
        bookings = bookings.filter(created_at__lte=period_end)

    revenue = Decimal('0')
    for booking in bookings:
        revenue += Decimal(booking.total_price) - refunded_amount(booking)
    return _money(revenue)


def split_commission(amount, commission_rate):
    """Return (commission_amount, net_amount) for a gross amount."""
    commission = _money(Decimal(amount) * Decimal(commission_rate) / 100)
    return commission, _money(Decimal(amount) - commission)


class PayoutService:
    """Payout bookkeeping for superadmins."""

    def __init__(self, system_settings=None):
        self.settings = system_settings or SystemSettings.load()

    def calculate_pending(self, organizer):
        """Earnings owed to `organizer` that have not been paid out yet."""
        commission_rate = self.settings.commission_rate
        total_revenue = organizer_revenue(organizer)
        platform_commission, total_earnings = split_commission(total_revenue, commission_rate)

        already_paid_out = Payout.objects.filter(
            organizer=organizer, status='completed'
        ).aggregate(total=Sum('net_amount'))['total'] or Decimal('0')
        pending_amount = _money(total_earnings - already_paid_out)

        return {
            'organizerId': organizer.id,
            'totalRevenue': total_revenue,
            'platformCommission': platform_commission,
            'commissionRate': commission_rate,
            'totalEarnings': total_earnings,
            'alreadyPaidOut': _money(already_paid_out),
            'pendingAmount': pending_amount,
            'canPayout': pending_amount >= self.settings.minimum_payout,
            'minimumPayout': self.settings.minimum_payout,
        }

    def create_payout(self, organizer, amount, event=None, payout_method='bank_transfer',
                      payout_details=None, notes='', period_start=None, period_end=None):
        """Create a pending payout, splitting commission at the current rate."""
        commission_rate = self.settings.commission_rate
        commission_amount, net_amount = split_commission(amount, commission_rate)

        payout = Payout.objects.create(
            organizer=organizer,
            event=event,
            amount=_money(amount),
            commission_rate=commission_rate,
            commission_amount=commission_amount,
            net_amount=net_amount,
            payout_method=payout_method,
            payout_details=payout_details or {},
            notes=notes or '',
            period_start=period_start,
            period_end=period_end,
            status='pending',
        )
        logger.info(f"💸 [PAYOUT] Created payout {payout.id} for {organizer.email}: Rs {net_amount}")
        return payout

    def update_status(self, payout, status, admin, transaction_id=None, notes=None):
        """Move a payout to `status`, stamping who processed it when relevant."""
        payout.status = status
        if transaction_id:
            payout.transaction_id = transaction_id
        if notes:
            payout.notes = notes
        if status in PROCESSED_STATUSES:
            payout.processed_by = admin
            payout.processed_at = timezone.now()
        payout.save()
        logger.info(f"💸 [PAYOUT] Payout {payout.id} status updated to {status} by {admin.email}")
        return payout

    def generate_bulk_payouts(self, period_start, period_end):
        """Create one pending payout per organizer with enough revenue in the period."""
        User = get_user_model()
        commission_rate = self.settings.commission_rate
        minimum_payout = self.settings.minimum_payout

        created = []
        skipped = []
        for organizer in User.objects.filter(is_organizer=True).order_by('email'):
            revenue = organizer_revenue(organizer, period_start, period_end)
            if revenue <= 0:
                skipped.append({'organizer': organizer.email, 'reason': 'No revenue in period'})
                continue

            commission_amount, net_amount = split_commission(revenue, commission_rate)
            if net_amount < minimum_payout:
                skipped.append({
                    'organizer': organizer.email,
                    'reason': f'Below minimum payout (Rs {minimum_payout})',
                    'amount': net_amount,
                })
                continue

            payout = Payout.objects.create(
                organizer=organizer,
                amount=revenue,
                commission_rate=commission_rate,
                commission_amount=commission_amount,
                net_amount=net_amount,
                status='pending',
                period_start=period_start,
                period_end=period_end,
                notes=f'Bulk payout for period {period_start:%Y-%m-%d} to {period_end:%Y-%m-%d}',
            )
            created.append({'organizer': organizer.email, 'amount': net_amount, 'payoutId': payout.id})

        logger.info(f"💸 [PAYOUT] Bulk payouts generated: {len(created)} created, {len(skipped)} skipped")
        return {
            'created': created,
            'skipped': skipped,
            'summary': {
                'totalCreated': len(created),
                'totalSkipped': len(skipped),
                'totalAmount': sum((p['amount'] for p in created), Decimal('0')),
            },
        }
