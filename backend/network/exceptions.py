"""
Custom exceptions and the API exception handler for consistent error responses.
"""
import logging

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(drf_exceptions.APIException):
    """A write that collides with existing state (duplicate request, share, application)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This action conflicts with the current state of the resource.'
    default_code = 'conflict'


def _collect_messages_from_response_data(response_data):
    """Build a list of human-readable messages from DRF error response data."""
    messages = []
    if isinstance(response_data, dict):
        # DRF returns {'field': ['msg']} or {'detail': 'msg'}
        if 'detail' in response_data and not isinstance(response_data.get('detail'), (dict, list)):
            messages.append(str(response_data['detail']))
        for field, value in response_data.items():
            if field == 'detail':
                continue
            if isinstance(value, (list, tuple)) and value:
                msg = str(value[0])
            else:
                msg = str(value)
            if field == 'non_field_errors':
                messages.append(msg)
            else:
                field_label = str(field).replace('_', ' ').capitalize()
                messages.append(f"{field_label}: {msg}")
    elif isinstance(response_data, (list, tuple)):
        messages.extend(str(v) for v in response_data if v)
    elif response_data:
        messages.append(str(response_data))
    return messages


def custom_exception_handler(exc, context):
    """
    Render every API error in one envelope.

    Returns:
        Response with format:
        {
            "error": {
                "code": "error_code",
                "message": "User-friendly error message",
                "messages": [...],
                "details": {...}  # Optional field-specific errors
            }
        }
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view') if isinstance(context, dict) else None
        logger.error("Unhandled exception in %s: %s", getattr(view, '__name__', view), exc, exc_info=True)
        return Response(
            {
                'error': {
                    'code': 'internal_server_error',
                    'message': 'An unexpected error occurred. Please try again later.',
                }
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Auth failures always return 401 so clients can re-authenticate
    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    messages = _collect_messages_from_response_data(response.data)
    payload = {
        'code': get_error_code(exc, response.status_code),
        'message': messages[0] if messages else get_error_message(exc, response.data),
    }
    if messages:
        payload['messages'] = messages

    if isinstance(response.data, dict):
        details = {}
        for field, errors in response.data.items():
            if field == 'detail':
                continue
            if isinstance(errors, list):
                details[field] = str(errors[0]) if errors else 'Invalid value'
            else:
                details[field] = str(errors)
        if details:
            payload['details'] = details

    response.data = {'error': payload}
    return response


def get_error_code(exc, status_code):
    """Generate error code from exception."""
    if isinstance(exc, drf_exceptions.ValidationError):
        return 'validation_error'
    if hasattr(exc, 'default_code'):
        return exc.default_code

    code_map = {
        400: 'bad_request',
        401: 'unauthorized',
        403: 'forbidden',
        404: 'not_found',
        405: 'method_not_allowed',
        409: 'conflict',
        429: 'too_many_requests',
        500: 'internal_server_error',
    }
    return code_map.get(status_code, 'error')


def get_error_message(exc, response_data):
    """Extract user-friendly error message."""
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, dict):
        for value in detail.values():
            if isinstance(value, list) and value:
                return str(value[0])
            return str(value)
    if detail is not None:
        return str(detail)
    return 'An error occurred'
