from typing import Iterable, List

ROLE_LEVELS = {
    'guest': 0,
    'student': 1,
    'instructor': 2,
    'lead_instructor': 3,
    'admin': 4,
    'superadmin': 5,
}

# Roles that receive coordinator notifications.
ADMIN_NOTIFICATION_ROLES = ('admin', 'superadmin', 'lead_instructor')


def role_level(role) -> int:
    """Numeric level for *role*; unknown roles rank below guest."""
    return ROLE_LEVELS.get(str(role or '').strip().lower(), -1)


def has_min_role(role, minimum) -> bool:
    if role_level(minimum) < 0:
        return False
    return role_level(role) >= role_level(minimum)


def get_user_role(user) -> str:
    if user is None or not getattr(user, 'is_authenticated', False):
        return ''
    if getattr(user, 'is_superuser', False):
        return 'superadmin'
    return str(getattr(user, 'role', '') or '')


def admin_emails(roles: Iterable[str] = ADMIN_NOTIFICATION_ROLES) -> List[str]:
    from .models import User

    qs = User.objects.filter(role__in=list(roles), is_active=True).exclude(email='')
    return sorted(set(qs.values_list('email', flat=True)))
