"""Role-based permissions.

Authentication happens upstream; the caller's role is derived from the
authenticated user: staff accounts act as ``admin``, everyone else as
``user``.
"""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

ADMIN_ROLE = "admin"
USER_ROLE = "user"


def caller_role(user) -> str | None:
    if user is None or not user.is_authenticated:
        return None
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return ADMIN_ROLE
    return USER_ROLE


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone can read, only admins can write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return caller_role(request.user) == ADMIN_ROLE
