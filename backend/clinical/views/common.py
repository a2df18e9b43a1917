from typing import Optional

from django.utils import timezone

from accounts.permissions_api import HasMinRole


def truthy(value) -> bool:
    return str(value or '').strip().lower() in ('1', 'true', 'yes')


def int_param(request, name: str) -> Optional[int]:
    raw = request.query_params.get(name)
    try:
        return int(raw) if raw not in (None, '') else None
    except (TypeError, ValueError):
        return None


def actor(user) -> str:
    return getattr(user, 'email', '') or getattr(user, 'username', '') or ''


def today():
    return timezone.localdate()


class ClinicalView:
    """Mixin: instructors read, lead instructors write."""

    permission_classes = (HasMinRole,)
    min_role = 'instructor'
    min_role_by_method = {
        'POST': 'lead_instructor',
        'PUT': 'lead_instructor',
        'PATCH': 'lead_instructor',
        'DELETE': 'lead_instructor',
    }
