# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError, ObjectDoesNotExist
from django.db import IntegrityError
import logging
from django.conf import settings

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    400: 'Validation error',
    401: 'Authentication required',
    403: 'Permission denied',
    404: 'Resource not found',
    405: 'Method not allowed',
    409: 'Conflict',
    500: 'Internal server error',
}


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the canteen API
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        response.data = {
            'error': True,
            'message': STATUS_MESSAGES.get(response.status_code, 'An error occurred'),
            'details': response.data,
            'status_code': response.status_code
        }

    # Handle Django ValidationError (model validation, immutable rows)
    elif isinstance(exc, ValidationError):
        logger.warning(f"Validation Error: {exc}")
        response = Response({
            'error': True,
            'message': 'Validation error',
            'details': {'non_field_errors': exc.messages},
            'status_code': 400
        }, status=status.HTTP_400_BAD_REQUEST)

    # Missing rows looked up outside get_object_or_404
    elif isinstance(exc, ObjectDoesNotExist):
        response = Response({
            'error': True,
            'message': 'Resource not found',
            'details': {'error': str(exc)},
            'status_code': 404
        }, status=status.HTTP_404_NOT_FOUND)

    # Handle Django IntegrityError
    elif isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        response = Response({
            'error': True,
            'message': 'Database integrity error',
            'details': {'error': 'This operation violates database constraints'},
            'status_code': 400
        }, status=status.HTTP_400_BAD_REQUEST)

    # Handle unexpected errors
    else:
        logger.exception(f"Unexpected Error: {exc}")
        response = Response({
            'error': True,
            'message': 'An unexpected error occurred',
            'details': {'error': str(exc)} if settings.DEBUG else {},
            'status_code': 500
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response
