"""
Error taxonomy for trip matching and the API-wide exception handler.

Matching operations raise the MatchingError subclasses below; views let them
propagate and ``api_exception_handler`` renders every failure as
``{"error": "<message>"}`` with the matching HTTP status.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Base class for errors raised by the matching operations."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid request'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DeliveryRequestNotFound(MatchingError):
    """Raised when a delivery request id does not resolve."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Delivery request not found'


class TripNotFound(MatchingError):
    """Raised when a trip id does not resolve."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Trip not found'


class NotTripOwner(MatchingError):
    """Raised when the caller is not the trip's traveler."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'Only the trip traveler can perform this action'


class DeliveryUpdateForbidden(MatchingError):
    """Raised when the caller may not change a delivery request's status."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'You do not have permission to modify this delivery request.'


class MatchingConflict(MatchingError):
    """Raised when a state-machine precondition does not hold."""
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Request conflicts with the current state'


class TripFullError(MatchingConflict):
    """Raised when a trip has no free slot left."""
    default_message = 'Trip is full'


def _first_message(detail):
    """Pull the first human readable message out of a DRF error structure."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ('non_field_errors', 'detail', 'error'):
                return message
            return f'{key}: {message}'
        return 'Invalid input'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid input'
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render API errors as ``{"error": message}``.

    Field validation errors also carry a ``details`` object with the
    per-field messages. Anything unexpected is logged and returned as 500.
    """
    if isinstance(exc, MatchingError):
        return Response({'error': exc.message}, status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return Response(
            {'error': _first_message(details), 'details': details},
            status=status.HTTP_400_BAD_REQUEST
        )

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=True
        )
        return Response(
            {'error': 'An unexpected error occurred. Please try again later.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    data = response.data
    if isinstance(data, dict) and set(data.keys()) <= {'detail', 'code', 'messages'}:
        response.data = {'error': str(data.get('detail', 'Request failed'))}
    else:
        response.data = {'error': _first_message(data), 'details': data}

    return response
