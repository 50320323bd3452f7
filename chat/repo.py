# chat/repo.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Protocol

from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from classbridge.monitoring import track_service_operation
from classbridge.supabase_client import SUPABASE_BACKEND, get_supabase_client, store_backend
from .models import Message

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Read or write against the message store failed."""


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """One persisted turn. Immutable once created."""

    id: str
    user_id: str
    role: Role
    content: str
    created_at: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "role": self.role.value,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }


class MessageStore(Protocol):
    """Append-only, per-user ordered log of chat turns."""

    def append(self, user_id: str, role: Role, content: str) -> ChatMessage: ...

    def list(self, user_id: str) -> List[ChatMessage]: ...


def _coerce_role(role) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise StorageError(f"invalid role: {role!r}")


class DjangoMessageStore:
    """ORM-backed store over the ``messages`` table."""

    @staticmethod
    def _to_message(row: Message) -> ChatMessage:
        return ChatMessage(
            id=str(row.id),
            user_id=row.user_id,
            role=Role(row.role),
            content=row.content,
            created_at=row.created_at,
        )

    @track_service_operation("append_message")
    def append(self, user_id: str, role: Role, content: str) -> ChatMessage:
        role = _coerce_role(role)
        try:
            with transaction.atomic():
                # Lock the user's newest row so concurrent appends serialise on it
                last = (
                    Message.objects.select_for_update()
                    .filter(user_id=user_id)
                    .order_by("-created_at")
                    .only("created_at")
                    .first()
                )
                created_at = timezone.now()
                # Keep per-user timestamps strictly increasing
                if last is not None and created_at <= last.created_at:
                    created_at = last.created_at + timedelta(microseconds=1)
                row = Message.objects.create(
                    user_id=user_id, role=role.value, content=content, created_at=created_at,
                )
            return self._to_message(row)
        except Exception as e:
            logger.error("Error saving message for user %s: %s", user_id, e)
            raise StorageError(str(e)) from e

    @track_service_operation("list_messages")
    def list(self, user_id: str) -> List[ChatMessage]:
        try:
            rows = list(Message.objects.filter(user_id=user_id).order_by("created_at"))
            return [self._to_message(r) for r in rows]
        except Exception as e:
            logger.error("Error loading messages for user %s: %s", user_id, e)
            raise StorageError(str(e)) from e


class SupabaseMessageStore:
    """Store over the Supabase ``messages`` table (PostgREST)."""

    def __init__(self, client=None, table: str = "messages"):
        self._client = client
        self.table = table

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    @staticmethod
    def _to_message(row: dict) -> ChatMessage:
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = parse_datetime(created_at)
        if created_at is None:
            raise StorageError(f"message {row.get('id')} has no created_at")
        try:
            return ChatMessage(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                role=_coerce_role(row["role"]),
                content=row.get("content") or "",
                created_at=created_at,
            )
        except KeyError as e:
            raise StorageError(f"message row is missing {e}") from e

    @track_service_operation("append_message")
    def append(self, user_id: str, role: Role, content: str) -> ChatMessage:
        role = _coerce_role(role)
        try:
            res = (
                self.client.table(self.table)
                .insert({"user_id": user_id, "role": role.value, "content": content})
                .execute()
            )
        except Exception as e:
            logger.error("Error saving message for user %s: %s", user_id, e)
            raise StorageError(str(e)) from e

        rows = res.data or []
        if not rows:
            raise StorageError("insert returned no row")
        return self._to_message(rows[0])

    @track_service_operation("list_messages")
    def list(self, user_id: str) -> List[ChatMessage]:
        try:
            res = (
                self.client.table(self.table)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=False)
                .execute()
            )
        except Exception as e:
            logger.error("Error loading messages for user %s: %s", user_id, e)
            raise StorageError(str(e)) from e
        return [self._to_message(r) for r in (res.data or [])]


def get_message_store() -> MessageStore:
    if store_backend() == SUPABASE_BACKEND:
        return SupabaseMessageStore()
    return DjangoMessageStore()
