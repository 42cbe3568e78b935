"""Common services package."""

from users_common.services.user_service import UserService

__all__ = ["UserService"]
