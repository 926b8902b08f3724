"""Booking domain errors, each mapped to its HTTP status."""

from rest_framework import status
from rest_framework.exceptions import APIException


class BookingError(APIException):
    """Base class for booking lifecycle errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking request could not be processed'
    default_code = 'booking_error'


class BookingValidationError(BookingError):
    default_detail = 'Invalid booking request'
    default_code = 'invalid_booking'


class BookingPermissionDenied(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized to access this booking'
    default_code = 'booking_forbidden'


class BookingNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Booking not found'
    default_code = 'booking_not_found'


class PaymentVerificationFailed(BookingError):
    default_detail = 'Payment verification failed'
    default_code = 'payment_verification_failed'


class InvalidTicketTransition(BookingError):
    default_detail = 'Ticket cannot change to the requested status'
    default_code = 'invalid_ticket_transition'


class PaymentGatewayError(BookingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Failed to create payment order'
    default_code = 'payment_gateway_error'


class BookingsClosed(BookingError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'New bookings are temporarily disabled'
    default_code = 'bookings_closed'
