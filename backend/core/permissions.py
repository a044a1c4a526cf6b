from typing import Iterable, Sequence

from rest_framework.permissions import BasePermission


class HasRole(BasePermission):
    """
    Allows access to authenticated users holding one of the required roles.
    """

    required_roles: Sequence[str] = ()
    message = "Your role does not allow this action."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return getattr(user, "role", None) in self.required_roles

    @classmethod
    def with_roles(cls, roles: Iterable[str]):
        """
        Helper to build a permission class with baked-in required roles.
        """

        role_tuple = tuple(roles)

        class _HasRole(cls):
            required_roles = role_tuple

        _HasRole.__name__ = f"{cls.__name__}WithRoles"
        return _HasRole
