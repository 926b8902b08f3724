# Generated manually for GetTogether payouts

import uuid
from decimal import Decimal
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
            name='SystemSettings',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('settings_type', models.CharField(default='global', max_length=20, unique=True, verbose_name='settings type')),
                ('maintenance_mode', models.BooleanField(default=False, verbose_name='maintenance mode')),
                ('maintenance_message', models.TextField(default='We are currently under maintenance. Please check back soon.', verbose_name='maintenance message')),
                ('commission_rate', models.DecimalField(decimal_places=2, default=Decimal('10.00'), max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name='commission rate (%)')),
                ('platform_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(0)], verbose_name='platform fee')),
                ('minimum_payout', models.DecimalField(decimal_places=2, default=Decimal('1000.00'), max_digits=12, verbose_name='minimum payout')),
                ('payout_cycle', models.CharField(choices=[('weekly', 'Weekly'), ('bi-weekly', 'Bi-weekly'), ('monthly', 'Monthly')], default='monthly', max_length=20, verbose_name='payout cycle')),
                ('allow_new_registrations', models.BooleanField(default=True, verbose_name='allow new registrations')),
                ('allow_new_bookings', models.BooleanField(default=True, verbose_name='allow new bookings')),
                ('allow_new_events', models.BooleanField(default=True, verbose_name='allow new events')),
                ('contact_email', models.EmailField(default='support@gettogether.in', max_length=254, verbose_name='contact email')),
                ('contact_phone', models.CharField(blank=True, max_length=30, verbose_name='contact phone')),
            ],
            options={
                'verbose_name': 'system settings',
                'verbose_name_plural': 'system settings',
            },
        ),
        migrations.CreateModel(
            name='Payout',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='gross amount')),
                ('commission_rate', models.DecimalField(decimal_places=2, max_digits=5, verbose_name='commission rate (%)')),
                ('commission_amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='commission amount')),
                ('net_amount', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='net amount')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed'), ('cancelled', 'Cancelled')], db_index=True, default='pending', max_length=20, verbose_name='status')),
                ('payout_method', models.CharField(choices=[('bank_transfer', 'Bank transfer'), ('upi', 'UPI'), ('paypal', 'PayPal'), ('other', 'Other')], default='bank_transfer', max_length=20, verbose_name='payout method')),
                ('payout_details', models.JSONField(blank=True, default=dict, help_text='accountNumber, ifscCode, accountHolderName, upiId', verbose_name='payout details')),
                ('transaction_id', models.CharField(blank=True, max_length=100, verbose_name='transaction ID')),
                ('processed_at', models.DateTimeField(blank=True, null=True, verbose_name='processed at')),
                ('notes', models.TextField(blank=True, verbose_name='notes')),
                ('period_start', models.DateTimeField(blank=True, null=True, verbose_name='period start')),
                ('period_end', models.DateTimeField(blank=True, null=True, verbose_name='period end')),
                ('event', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payouts', to='events.event', verbose_name='event')),
                ('organizer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payouts', to=settings.AUTH_USER_MODEL, verbose_name='organizer')),
                ('processed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='processed_payouts', to=settings.AUTH_USER_MODEL, verbose_name='processed by')),
            ],
            options={
                'verbose_name': 'payout',
                'verbose_name_plural': 'payouts',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['organizer', 'status'], name='payout_organizer_status_idx')],
            },
        ),
    ]
