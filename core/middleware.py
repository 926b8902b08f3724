"""
Maintenance mode middleware.

While SystemSettings.maintenance_mode is on, API requests receive a 503 with
the configured maintenance message. Admin and superadmin paths stay reachable
so the flag can be switched off again.
"""

import logging

from django.db import DatabaseError
from django.http import JsonResponse

logger = logging.getLogger(__name__)


class MaintenanceModeMiddleware:
    """Short-circuits API traffic during platform maintenance."""

    EXEMPT_PREFIXES = (
        '/admin/',
        '/api/v1/superadmin/',
        '/api/v1/auth/',
        '/healthz',
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith('/api/') and not request.path.startswith(self.EXEMPT_PREFIXES):
            from apps.payouts.models import SystemSettings

            try:
                system_settings = SystemSettings.load()
            except DatabaseError as e:
                logger.error(f"🛠️ [MAINTENANCE] Could not load system settings, letting request through: {e}")
                return self.get_response(request)

            if system_settings.maintenance_mode:
                return JsonResponse({
                    'message': 'Service temporarily unavailable',
                    'maintenanceMessage': system_settings.maintenance_message,
                    'contactEmail': system_settings.contact_email,
                    'isMaintenanceMode': True,
                }, status=503)

            request.system_settings = system_settings

        return self.get_response(request)
