"""
Centralized API error handling.

Every error leaves the API as {"message": ..., "errors": {...}} so clients
have one shape to parse. Unexpected exceptions are logged with traceback and
answered with a generic 500; the raw error text never reaches the client.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull a human-readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        if 'message' in detail:
            return _first_message(detail['message'])
        detail = list(detail.values())
    if isinstance(detail, (list, tuple)):
        # Nested list serializers report {} for items that passed
        for value in detail:
            if value:
                return _first_message(value)
        return 'Invalid request'
    return str(detail)


def api_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER producing the GetTogether error body."""
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown'

    response = exception_handler(exc, context)

    if response is None:
        logger.error(
            f"🔴 [API_ERROR] Unhandled {type(exc).__name__} in {view_name}: {exc}",
            exc_info=exc,
        )
        return Response({'message': 'Server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        body = {'message': _first_message(exc.detail)}
        if isinstance(exc.detail, dict):
            body['errors'] = exc.detail
        logger.info(f"🟡 [API_ERROR] Validation error in {view_name}: {body['message']}")
        response.data = body
        return response

    if isinstance(exc, (APIException, Http404, DjangoPermissionDenied)):
        detail = getattr(exc, 'detail', None) or str(exc) or response.data.get('detail', '')
        response.data = {'message': _first_message(detail)}
        if response.status_code >= 500:
            logger.error(f"🔴 [API_ERROR] {view_name} returned {response.status_code}: {response.data['message']}")
        else:
            logger.info(f"🟡 [API_ERROR] {view_name} returned {response.status_code}: {response.data['message']}")
    return response
