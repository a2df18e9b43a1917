import logging
from typing import Optional

from django.conf import settings
from django.core.mail import send_mail
from django.db import DatabaseError

from notifications.models import UserNotification

logger = logging.getLogger(__name__)


def _log(event: str, user_email: str, reference_type: str, reference_id: str, reason: str = ''):
    payload = {
        'event': event,
        'user_email': user_email,
        'reference_type': reference_type,
        'reference_id': reference_id,
        'reason': reason,
    }
    logger.info('%s', payload)


def _absolute(link_url: str) -> str:
    if not link_url or link_url.startswith('http'):
        return link_url
    return str(getattr(settings, 'SITE_URL', '') or '').rstrip('/') + link_url


def _email(notification: UserNotification) -> bool:
    if not getattr(settings, 'CLINICAL_NOTIFICATION_EMAIL_ENABLED', False):
        return False
    body = notification.message
    if notification.link_url:
        body += f'\n\n{_absolute(notification.link_url)}'
    try:
        send_mail(
            subject=notification.title,
            message=body,
            from_email=getattr(settings, 'DEFAULT_FROM_EMAIL', None),
            recipient_list=[notification.user_email],
            fail_silently=False,
        )
        return True
    except Exception as exc:
        logger.warning('Notification email to %s failed: %s', notification.user_email, exc)
        return False


def create_notification(user_email: str, title: str, message: str = '', type: str = 'general',
                        category: str = '', link_url: str = '', reference_type: str = '',
                        reference_id: Optional[str] = None) -> bool:
    """Store an in-app notification (and email it when enabled).

    Best-effort: failures are logged and reported as False, never raised.
    """
    if not user_email:
        return False
    try:
        notification = UserNotification.objects.create(
            user_email=user_email,
            title=title,
            message=message or '',
            type=type or UserNotification.Type.GENERAL,
            category=category or '',
            link_url=link_url or '',
            reference_type=reference_type or '',
            reference_id=str(reference_id or ''),
        )
    except (DatabaseError, ValueError) as exc:
        logger.error('Failed to create notification for %s: %s', user_email, exc)
        return False

    _log('notification_created', user_email, notification.reference_type, notification.reference_id, title)
    _email(notification)
    return True
