"""Domain models for the Address Book application."""

from .contact import Contact
from .events import CONTACT_ADDED, USER_REGISTERED, NotificationEvent
from .results import ErrorKind, OperationResult
from .user import User, UserProfile

__all__ = [
    "CONTACT_ADDED",
    "USER_REGISTERED",
    "Contact",
    "ErrorKind",
    "NotificationEvent",
    "OperationResult",
    "User",
    "UserProfile",
]
