import logging
from typing import List

from accounts.utils import admin_emails
from clinical.services.milestones import Alert
from notifications.services import notification_service

logger = logging.getLogger(__name__)

DIGEST_LIMIT = 20


def digest_message(alerts: List[Alert]) -> str:
    lines = [f'- {a.record.student.full_name}: {a.reason}' for a in alerts[:DIGEST_LIMIT]]
    if len(alerts) > DIGEST_LIMIT:
        lines.append(f'...and {len(alerts) - DIGEST_LIMIT} more')
    return '\n'.join(lines)


def send_critical_digest(alerts: List[Alert]) -> int:
    """Notify every coordinator about overdue internships. Returns notices created."""
    if not alerts:
        return 0
    count = len(alerts)
    title = f'{count} internship{"" if count == 1 else "s"} overdue'
    message = digest_message(alerts)
    sent = 0
    for email in admin_emails():
        ok = notification_service.create_notification(
            user_email=email,
            title=title,
            message=message,
            type='alert',
            category='clinical',
            link_url='/clinical/internships',
            reference_type='internship_critical_digest',
        )
        sent += int(ok)
    logger.info('%s', {'event': 'internship_critical_digest', 'alerts': count, 'sent': sent})
    return sent
