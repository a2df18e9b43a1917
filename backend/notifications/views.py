import hmac
import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.exceptions import error_response

from .models import UserNotification
from .serializers import UserNotificationSerializer
from .services import milestone_reminders

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


class NotificationListView(APIView):
    """Notifications addressed to the signed-in user's email."""

    def get(self, request):
        qs = UserNotification.objects.filter(user_email=request.user.email)
        if str(request.query_params.get('unreadOnly') or '').lower() in ('1', 'true', 'yes'):
            qs = qs.filter(is_read=False)
        try:
            limit = max(1, min(int(request.query_params.get('limit') or DEFAULT_LIMIT), 200))
        except ValueError:
            limit = DEFAULT_LIMIT
        unread = UserNotification.objects.filter(user_email=request.user.email, is_read=False).count()
        return Response({
            'success': True,
            'notifications': UserNotificationSerializer(qs[:limit], many=True).data,
            'unread_count': unread,
        })


class NotificationReadView(APIView):
    def post(self, request, pk: int):
        notification = get_object_or_404(UserNotification, pk=pk, user_email=request.user.email)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=['is_read', 'read_at'])
        return Response({'success': True, 'notification': UserNotificationSerializer(notification).data})


def _cron_authorized(request) -> bool:
    secret = getattr(settings, 'CRON_SECRET', '') or ''
    if not secret:
        return False
    header = request.META.get('HTTP_AUTHORIZATION', '')
    return hmac.compare_digest(header, f'Bearer {secret}')


class InternshipMilestoneCronView(APIView):
    """Scheduler entry point for the daily milestone reminder sweep."""

    authentication_classes = ()
    permission_classes = (permissions.AllowAny,)

    def get(self, request):
        if not _cron_authorized(request):
            logger.warning('Rejected internship milestone cron call from %s', request.META.get('REMOTE_ADDR'))
            return error_response('Unauthorized', status_code=status.HTTP_401_UNAUTHORIZED)
        result = milestone_reminders.run_sweep(timezone.localdate())
        return Response(result.as_dict())

    post = get
