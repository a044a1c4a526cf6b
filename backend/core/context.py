"""Explicit caller context passed into booking and review operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller: user id plus marketplace role."""

    user_id: int
    role: str

    @classmethod
    def from_user(cls, user) -> "AuthContext":
        return cls(user_id=user.pk, role=user.role)

    @classmethod
    def from_request(cls, request) -> "AuthContext":
        return cls.from_user(request.user)

    def has_role(self, *roles: str) -> bool:
        return self.role in roles
