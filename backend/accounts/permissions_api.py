from rest_framework import permissions

from .utils import get_user_role, has_min_role


class HasMinRole(permissions.BasePermission):
    """Allow users whose role is at least the view's required role.

    Views declare ``min_role`` and may override it per HTTP method through
    ``min_role_by_method`` (e.g. ``{'POST': 'admin'}``).
    """

    message = 'Insufficient role for this action.'
    min_role: str = 'instructor'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False

        by_method = getattr(view, 'min_role_by_method', None) or {}
        required = by_method.get(request.method) or getattr(view, 'min_role', None) or self.min_role
        return has_min_role(get_user_role(user), required)
