import logging
import time

from django.conf import settings

from accounts.utils import get_user_role

logger = logging.getLogger('django.request')

TIMED_PREFIXES = ('/api/',)


class SlowRequestLoggingMiddleware:
    """Warn about API calls slower than ``SLOW_REQUEST_LOG_MS``.

    Static files and the admin are not timed.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.enabled = bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True))
        self.threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))

    def __call__(self, request):
        if not self.enabled or not request.path.startswith(TIMED_PREFIXES):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = round((time.monotonic() - started) * 1000, 1)
        if elapsed_ms >= self.threshold_ms:
            user = getattr(request, 'user', None)
            logger.warning('%s', {
                'event': 'slow_request',
                'method': request.method,
                'path': request.path,
                'status': getattr(response, 'status_code', None),
                'duration_ms': elapsed_ms,
                'user': getattr(user, 'email', '') or 'anonymous',
                'role': get_user_role(user) or 'guest',
            })
        return response
