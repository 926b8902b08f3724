# Generated manually for GetTogether events

import uuid
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Event',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255, verbose_name='title')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True, verbose_name='slug')),
                ('description', models.TextField(blank=True, verbose_name='description')),
                ('category', models.CharField(db_index=True, max_length=100, verbose_name='category')),
                ('date', models.DateTimeField(db_index=True, verbose_name='date')),
                ('location', models.CharField(max_length=255, verbose_name='location')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='price')),
                ('image_url', models.URLField(blank=True, max_length=500, verbose_name='image URL')),
                ('total_tickets', models.PositiveIntegerField(default=0, verbose_name='total tickets')),
                ('available_tickets', models.IntegerField(default=0, verbose_name='available tickets')),
                ('status', models.CharField(choices=[('upcoming', 'Upcoming'), ('past', 'Past'), ('cancelled', 'Cancelled')], db_index=True, default='upcoming', max_length=20, verbose_name='status')),
                ('booking_expiry', models.DateTimeField(help_text='New bookings are rejected after this instant.', verbose_name='booking expiry')),
                ('organizer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to=settings.AUTH_USER_MODEL, verbose_name='organizer')),
            ],
            options={
                'verbose_name': 'event',
                'verbose_name_plural': 'events',
                'ordering': ['date'],
            },
        ),
    ]
