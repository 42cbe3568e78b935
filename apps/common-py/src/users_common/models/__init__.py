"""Common models package."""

from users_common.models.outcome import ErrorKind, Outcome, UserError
from users_common.models.user import UserCreate, UserDocument

__all__ = [
    "ErrorKind",
    "Outcome",
    "UserCreate",
    "UserDocument",
    "UserError",
]
