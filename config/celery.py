"""
Celery configuration for GetTogether.

Handles booking notification emails and the periodic ticket expiry sweep.
"""

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('gettogether')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

# Periodic tasks
app.conf.beat_schedule = {
    # Mark tickets of past events as expired
    'sweep-expired-tickets': {
        'task': 'apps.bookings.tasks.sweep_expired_tickets',
        'schedule': crontab(minute=0),  # Every hour
        'options': {
            'queue': 'maintenance',
            'routing_key': 'maintenance.sweep_expired',
        }
    },
}

app.conf.task_routes = {
    'apps.bookings.tasks.send_booking_confirmation_email': {'queue': 'emails'},
    'apps.bookings.tasks.send_ticket_cancellation_emails': {'queue': 'emails'},
    'apps.bookings.tasks.sweep_expired_tickets': {'queue': 'maintenance'},
}

app.conf.update(
    enable_utc=True,

    # Task execution settings
    task_soft_time_limit=300,
    task_time_limit=360,
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    # Result backend settings
    result_expires=3600,

    worker_max_tasks_per_child=1000,

    task_default_queue='default',
    task_default_exchange='default',
    task_default_exchange_type='direct',
    task_default_routing_key='default',
)
