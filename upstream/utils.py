from rest_framework import status as http_status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .client import UpstreamApiError


def api_response(success=True, message='', data=None, errors=None, status=200):
    """Consistent API response format"""
    response_data = {
        'success': success,
        'message': message,
        'data': data if data is not None else {},
        'errors': errors if errors is not None else []
    }
    return Response(response_data, status=status)


def custom_exception_handler(exc, context):
    """Wrap DRF's error responses (403, 405, 429, ...) in the api_response envelope"""
    response = exception_handler(exc, context)

    if response is not None:
        message = 'An error occurred'
        errors = []

        if isinstance(response.data, dict):
            if 'detail' in response.data:
                message = str(response.data['detail'])
            else:
                errors = response.data
        elif isinstance(response.data, list):
            errors = response.data
        else:
            message = str(response.data)

        response.data = {
            'success': False,
            'message': message,
            'data': None,
            'errors': errors,
        }

    return response


def upstream_error_response(exc: UpstreamApiError, message: str):
    """Relay a failed upstream mutation to the caller."""
    status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else http_status.HTTP_502_BAD_GATEWAY
    errors = exc.payload.get("errors") if isinstance(exc.payload, dict) else None
    return api_response(
        success=False,
        message=f"{message} {exc.upstream_message}".strip(),
        errors=errors if isinstance(errors, (list, dict)) else [],
        status=status_code,
    )
