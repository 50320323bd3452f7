# chat/controller.py
"""
Per-session conversation orchestration.

A ConversationController owns the in-memory view of one user's chat for one
session and runs each submission as a strict sequence: persist the user turn,
ask the completion proxy, persist the assistant turn. Every failure is
reported as a notice; nothing is retried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from user_settings.services.profiles import (
    DisplayNameUpdateResult,
    ProfileError,
    ProfileService,
    UserProfile,
    get_profile_service,
)
from .proxy_client import CompletionFailed, CompletionProxy, get_completion_proxy
from .repo import ChatMessage, MessageStore, Role, StorageError, get_message_store

logger = logging.getLogger(__name__)

HISTORY_LOAD_FAILED = "Failed to load chat history"
PROFILE_LOAD_FAILED = "Failed to load profile"
SEND_FAILED = "Failed to send message. Please try again."
DISPLAY_NAME_FAILED = "Failed to update display name. Please try again."


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    SENDING = "sending"
    CLOSED = "closed"


class SubmitStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    IGNORED = "ignored"    # blank input
    REJECTED = "rejected"  # not READY (busy or not started)


class SessionClosed(RuntimeError):
    """Raised for any operation after sign-out."""


@dataclass(frozen=True)
class Notice:
    level: str  # "error" | "success"
    text: str


@dataclass(frozen=True)
class SubmitResult:
    status: SubmitStatus
    messages: tuple = ()

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.SENT


@dataclass
class ViewEntry:
    role: Role
    content: str
    message: Optional[ChatMessage] = None

    @property
    def confirmed(self) -> bool:
        return self.message is not None


class ConversationView:
    """
    Ordered view of the conversation.

    Entries are either confirmed (backed by a stored ChatMessage) or
    tentative. A tentative entry is resolved exactly once, by ``confirm``
    when the store write succeeds or ``discard`` when it fails.
    """

    def __init__(self, messages=()):
        self._entries: List[ViewEntry] = [
            ViewEntry(role=m.role, content=m.content, message=m) for m in messages
        ]

    def __iter__(self) -> Iterator[ViewEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[ViewEntry]:
        return list(self._entries)

    @property
    def messages(self) -> List[ChatMessage]:
        return [e.message for e in self._entries if e.message is not None]

    @property
    def has_pending(self) -> bool:
        return any(not e.confirmed for e in self._entries)

    def add_tentative(self, role: Role, content: str) -> ViewEntry:
        entry = ViewEntry(role=role, content=content)
        self._entries.append(entry)
        return entry

    def confirm(self, entry: ViewEntry, message: ChatMessage) -> None:
        entry.message = message
        entry.content = message.content

    def discard(self, entry: ViewEntry) -> None:
        self._entries = [e for e in self._entries if e is not entry]

    def append_confirmed(self, message: ChatMessage) -> None:
        self._entries.append(ViewEntry(role=message.role, content=message.content, message=message))

    def clear(self) -> None:
        self._entries = []


class ConversationController:
    """State machine: INITIALIZING -> READY <-> SENDING, then CLOSED on sign-out."""

    def __init__(
        self,
        user_id: str,
        *,
        messages: MessageStore,
        profiles: ProfileService,
        proxy: CompletionProxy,
    ) -> None:
        self.user_id = user_id
        self._messages = messages
        self._profiles = profiles
        self._proxy = proxy
        self.state = SessionState.INITIALIZING
        self.view = ConversationView()
        self.profile: Optional[UserProfile] = None
        self._notices: List[Notice] = []

    # ----- presentation-facing state -----

    @property
    def loading(self) -> bool:
        return self.state in (SessionState.INITIALIZING, SessionState.SENDING)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    def drain_notices(self) -> List[Notice]:
        out, self._notices = self._notices, []
        return out

    def _notify(self, level: str, text: str) -> None:
        self._notices.append(Notice(level=level, text=text))

    def _ensure_open(self) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionClosed("conversation session is closed")

    # ----- lifecycle -----

    def start(self) -> SessionState:
        """Load profile and history, then become READY even if either load failed."""
        self._ensure_open()
        self.state = SessionState.INITIALIZING

        try:
            self.profile = self._profiles.load(self.user_id)
        except ProfileError as e:
            logger.error("Error loading profile for %s: %s", self.user_id, e)
            self.profile = None
            self._notify("error", PROFILE_LOAD_FAILED)

        try:
            self.view = ConversationView(self._messages.list(self.user_id))
        except StorageError as e:
            logger.error("Error loading messages for %s: %s", self.user_id, e)
            self.view = ConversationView()
            self._notify("error", HISTORY_LOAD_FAILED)

        self.state = SessionState.READY
        return self.state

    def sign_out(self) -> None:
        self._ensure_open()
        self.view.clear()
        self.profile = None
        self._notices = []
        self.state = SessionState.CLOSED

    # ----- chat round trip -----

    def submit(self, text: str) -> SubmitResult:
        self._ensure_open()
        if self.state is not SessionState.READY:
            logger.warning("Submission rejected in state %s", self.state.value)
            return SubmitResult(SubmitStatus.REJECTED)

        user_text = (text or "").strip()
        if not user_text:
            return SubmitResult(SubmitStatus.IGNORED)

        self.state = SessionState.SENDING
        try:
            return self._round_trip(user_text)
        finally:
            if self.state is SessionState.SENDING:
                self.state = SessionState.READY

    def _round_trip(self, user_text: str) -> SubmitResult:
        tentative = self.view.add_tentative(Role.USER, user_text)
        try:
            user_msg = self._messages.append(self.user_id, Role.USER, user_text)
        except StorageError as e:
            self.view.discard(tentative)
            return self._failed("saving user message", e)
        except Exception as e:
            self.view.discard(tentative)
            logger.exception("Unexpected error saving user message for %s", self.user_id)
            return self._failed("saving user message", e)
        self.view.confirm(tentative, user_msg)

        try:
            reply = self._proxy.complete(user_text)
        except CompletionFailed as e:
            logger.error("Completion proxy failed [status=%s body=%s]", e.status, e.body[:500])
            return self._failed("calling completion proxy", e, persisted=(user_msg,))
        except Exception as e:
            logger.exception("Unexpected error calling completion proxy for %s", self.user_id)
            return self._failed("calling completion proxy", e, persisted=(user_msg,))

        try:
            assistant_msg = self._messages.append(self.user_id, Role.ASSISTANT, reply)
        except StorageError as e:
            return self._failed("saving assistant message", e, persisted=(user_msg,))
        except Exception as e:
            logger.exception("Unexpected error saving assistant message for %s", self.user_id)
            return self._failed("saving assistant message", e, persisted=(user_msg,))
        self.view.append_confirmed(assistant_msg)

        return SubmitResult(SubmitStatus.SENT, (user_msg, assistant_msg))

    def _failed(self, step: str, exc: Exception, persisted: tuple = ()) -> SubmitResult:
        logger.error("Error sending message (%s) for %s: %s", step, self.user_id, exc)
        self._notify("error", SEND_FAILED)
        return SubmitResult(SubmitStatus.FAILED, persisted)

    # ----- profile side channel -----

    def update_display_name(self, name: str) -> DisplayNameUpdateResult:
        self._ensure_open()
        try:
            result = self._profiles.update_display_name(self.user_id, name)
        except ProfileError as e:
            logger.error("Error updating display name for %s: %s", self.user_id, e)
            self._notify("error", DISPLAY_NAME_FAILED)
            return DisplayNameUpdateResult(success=False, message=DISPLAY_NAME_FAILED)

        if result.success:
            if self.profile is not None:
                self.profile = UserProfile(
                    id=self.profile.id, email=self.profile.email, display_name=result.display_name,
                )
            self._notify("success", "Display name updated!")
        return result


def build_controller(user_id: str) -> ConversationController:
    """Controller wired to the configured store backend and proxy."""
    return ConversationController(
        user_id,
        messages=get_message_store(),
        profiles=get_profile_service(),
        proxy=get_completion_proxy(),
    )
