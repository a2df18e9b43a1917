import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _flatten(detail) -> str:
    """Collapse DRF/Django error structures into a single readable message."""
    if isinstance(detail, dict):
        parts = []
        for key, value in detail.items():
            msg = _flatten(value)
            parts.append(msg if key in ('detail', 'non_field_errors', '__all__') else f'{key}: {msg}')
        return '; '.join(p for p in parts if p)
    if isinstance(detail, (list, tuple)):
        return '; '.join(_flatten(d) for d in detail if d)
    return str(detail)


def validation_message(exc: DjangoValidationError) -> str:
    if hasattr(exc, 'error_dict'):
        return _flatten(exc.message_dict)
    return _flatten(exc.messages)


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST, **extra) -> Response:
    payload = {'success': False, 'error': message}
    payload.update(extra)
    return Response(payload, status=status_code)


def envelope_exception_handler(exc, context):
    """Return every handled API error as ``{success: false, error, status_code}``."""
    if isinstance(exc, DjangoValidationError):
        return error_response(validation_message(exc), status_code=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', type(view).__name__ if view else 'view')
        return None

    message = _flatten(getattr(exc, 'detail', None) or response.data)
    response.data = {
        'success': False,
        'error': message,
        'status_code': response.status_code,
    }
    return response
