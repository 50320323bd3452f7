"""Service layer for the user_settings app."""

from .profiles import (
    DisplayNameUpdateResult,
    ProfileError,
    ProfileNotFound,
    ProfileService,
    UserProfile,
)

__all__ = [
    "DisplayNameUpdateResult",
    "ProfileError",
    "ProfileNotFound",
    "ProfileService",
    "UserProfile",
]
