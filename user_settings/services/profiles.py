"""Profile access: load a user's profile and update its display name."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from classbridge.monitoring import track_service_operation
from classbridge.supabase_client import SUPABASE_BACKEND, get_supabase_client, store_backend
from user_settings.models import Profile

logger = logging.getLogger(__name__)

DISPLAY_NAME_MAX_LENGTH = 150


class ProfileError(RuntimeError):
    """Read or write against the profile store failed."""


class ProfileNotFound(ProfileError):
    ...


@dataclass(frozen=True)
class UserProfile:
    """Value object for one row of the ``profiles`` table."""

    id: str
    email: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        """Name to greet the user with."""
        if self.display_name:
            return self.display_name
        if self.email:
            return self.email.split("@")[0]
        return "User"

    def as_dict(self) -> dict:
        return {
            "user_id": self.id,
            "display_name": self.display_name,
            "email": self.email,
            "label": self.label,
        }


@dataclass(frozen=True)
class DisplayNameUpdateResult:
    """Value object describing the result of a display-name update."""

    success: bool
    message: str
    display_name: Optional[str] = None


class ProfileRepository(Protocol):
    """Abstraction for profile persistence operations."""

    def get(self, user_id: str) -> UserProfile:
        raise NotImplementedError

    def save_display_name(self, user_id: str, display_name: str) -> None:
        raise NotImplementedError


class DjangoProfileRepository:
    """Concrete repository backed by Django's ORM."""

    def get(self, user_id: str) -> UserProfile:
        try:
            row = Profile.objects.get(pk=user_id)
        except Profile.DoesNotExist:
            raise ProfileNotFound(f"no profile for user {user_id}")
        except Exception as e:
            raise ProfileError(str(e)) from e
        return UserProfile(id=row.id, email=row.email, display_name=row.display_name)

    def save_display_name(self, user_id: str, display_name: str) -> None:
        try:
            updated = Profile.objects.filter(pk=user_id).update(display_name=display_name)
        except Exception as e:
            raise ProfileError(str(e)) from e
        if not updated:
            raise ProfileNotFound(f"no profile for user {user_id}")


class SupabaseProfileRepository:
    """Repository over the Supabase ``profiles`` table."""

    def __init__(self, client=None, table: str = "profiles"):
        self._client = client
        self.table = table

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def get(self, user_id: str) -> UserProfile:
        try:
            res = self.client.table(self.table).select("*").eq("id", user_id).limit(1).execute()
        except Exception as e:
            raise ProfileError(str(e)) from e
        rows = res.data or []
        if not rows:
            raise ProfileNotFound(f"no profile for user {user_id}")
        row = rows[0]
        return UserProfile(id=str(row["id"]), email=row.get("email") or "", display_name=row.get("display_name"))

    def save_display_name(self, user_id: str, display_name: str) -> None:
        try:
            res = (
                self.client.table(self.table)
                .update({"display_name": display_name})
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            raise ProfileError(str(e)) from e
        if not res.data:
            raise ProfileNotFound(f"no profile for user {user_id}")


class ProfileService:
    """Loads profiles and applies display-name changes."""

    def __init__(self, *, repository: ProfileRepository) -> None:
        self._profiles = repository

    @track_service_operation("load_profile", module="user_settings")
    def load(self, user_id: str) -> UserProfile:
        return self._profiles.get(user_id)

    @track_service_operation("update_display_name", module="user_settings")
    def update_display_name(self, user_id: str, name: str) -> DisplayNameUpdateResult:
        cleaned = (name or "").strip()
        if not cleaned:
            return DisplayNameUpdateResult(success=False, message="Display name is required")
        if len(cleaned) > DISPLAY_NAME_MAX_LENGTH:
            return DisplayNameUpdateResult(
                success=False,
                message=f"Display name must be {DISPLAY_NAME_MAX_LENGTH} characters or less",
            )

        self._profiles.save_display_name(user_id, cleaned)
        logger.info("Display name updated for user %s", user_id)
        return DisplayNameUpdateResult(
            success=True,
            message="Your display name has been updated successfully.",
            display_name=cleaned,
        )


def get_profile_repository() -> ProfileRepository:
    if store_backend() == SUPABASE_BACKEND:
        return SupabaseProfileRepository()
    return DjangoProfileRepository()


def get_profile_service() -> ProfileService:
    return ProfileService(repository=get_profile_repository())
