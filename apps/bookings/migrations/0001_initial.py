# Generated manually for GetTogether bookings

import uuid
import apps.bookings.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('events', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('booking_id', models.CharField(default=apps.bookings.models.generate_booking_reference, editable=False, max_length=20, unique=True, verbose_name='booking reference')),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='quantity')),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='total price')),
                ('attendee_details', models.JSONField(default=list, verbose_name='attendee details')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], db_index=True, default='pending', max_length=20, verbose_name='status')),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed')], default='pending', max_length=20, verbose_name='payment status')),
                ('razorpay_order_id', models.CharField(blank=True, max_length=100, null=True, unique=True, verbose_name='Razorpay order ID')),
                ('razorpay_payment_id', models.CharField(blank=True, max_length=100, null=True, unique=True, verbose_name='Razorpay payment ID')),
                ('razorpay_signature', models.CharField(blank=True, max_length=255, verbose_name='Razorpay signature')),
                ('ticket_numbers', models.JSONField(blank=True, default=list, verbose_name='ticket numbers')),
                ('ticket_details', models.JSONField(blank=True, default=list, verbose_name='ticket details')),
                ('cancelled_tickets', models.JSONField(blank=True, default=list, verbose_name='cancelled tickets')),
                ('verified_tickets', models.JSONField(blank=True, default=list, verbose_name='verified tickets')),
                ('is_expired', models.BooleanField(db_index=True, default=False, verbose_name='expired')),
                ('expiry_checked_at', models.DateTimeField(blank=True, null=True, verbose_name='expiry checked at')),
                ('cancelled_at', models.DateTimeField(blank=True, null=True, verbose_name='cancelled at')),
                ('cancellation_reason', models.TextField(blank=True, verbose_name='cancellation reason')),
                ('needs_reconciliation', models.BooleanField(default=False, help_text='A follow-up write (such as inventory) failed after this booking was saved.', verbose_name='needs reconciliation')),
                ('reconciliation_note', models.TextField(blank=True, verbose_name='reconciliation note')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='events.event', verbose_name='event')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'booking',
                'verbose_name_plural': 'bookings',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
                    models.Index(fields=['event', 'status'], name='booking_event_status_idx'),
                ],
            },
        ),
    ]
