"""Client-side chat view state and a Python client for the chat endpoint.

A :class:`Transcript` is an immutable, append-only list of entries. A user
message enters as *pending* when it is submitted and is later confirmed (the
handler answered) or failed (transport or handler error), each transition
returning a new transcript. :class:`ChatSurface` drives those transitions over
HTTP the same way the in-page widget does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from memchat.chat.models import ChatMessage

logger = logging.getLogger(__name__)

EntryStatus = Literal["pending", "confirmed", "error"]

WELCOME_MESSAGE = (
    "👋 Welcome! I'm powered by Supermemory and can remember our conversations. Try saying:\n\n"
    '• "Remember that I love TypeScript"\n'
    '• "What do you know about me?"\n'
    '• "Test memory storage"'
)
SEND_FAILED_MESSAGE = "❌ Failed to send message"
ERROR_PREFIX = "❌ Error: "


class TransportFailure(Exception):
    """The chat endpoint could not be reached or sent an unreadable reply."""


@dataclass(frozen=True)
class Entry:
    """A message in the transcript and where it is in its round trip."""

    message: ChatMessage
    status: EntryStatus = "confirmed"


@dataclass(frozen=True)
class Transcript:
    entries: tuple[Entry, ...] = ()

    @classmethod
    def welcome(cls) -> Transcript:
        return cls((Entry(ChatMessage.assistant(WELCOME_MESSAGE)),))

    @property
    def messages(self) -> list[ChatMessage]:
        return [entry.message for entry in self.entries]

    @property
    def is_loading(self) -> bool:
        return any(entry.status == "pending" for entry in self.entries)

    def begin(self, user_message: ChatMessage) -> Transcript:
        """Append the user's message optimistically, before the reply arrives."""
        return replace(self, entries=(*self.entries, Entry(user_message, "pending")))

    def confirm(self, message_id: str, reply: ChatMessage) -> Transcript:
        """The handler answered: settle the pending message and add the reply."""
        return replace(
            self,
            entries=(*self._settle(message_id, "confirmed"), Entry(reply)),
        )

    def fail(self, message_id: str, error_text: str) -> Transcript:
        """The round trip failed: settle the pending message and add an error bubble."""
        return replace(
            self,
            entries=(*self._settle(message_id, "error"), Entry(ChatMessage.assistant(error_text))),
        )

    def _settle(self, message_id: str, status: EntryStatus) -> tuple[Entry, ...]:
        settled = []
        found = False
        for entry in self.entries:
            if entry.message.id == message_id and entry.status == "pending":
                entry = replace(entry, status=status)
                found = True
            settled.append(entry)
        if not found:
            raise KeyError(f"No pending message with id {message_id}")
        return tuple(settled)


@dataclass
class ChatSurface:
    """One chat view for one user, talking to the chat endpoint over HTTP."""

    user_id: str
    base_url: str = "http://127.0.0.1:8080"
    endpoint: str = "/api/chat"
    transport: httpx.AsyncBaseTransport | None = None
    timeout: float = 30.0
    transcript: Transcript = field(default_factory=Transcript.welcome)

    @property
    def is_loading(self) -> bool:
        return self.transcript.is_loading

    async def send(self, text: str) -> bool:
        """Submit *text*. Returns False if it was rejected (blank, or a turn is in flight)."""
        content = text.strip()
        if not content or self.is_loading:
            return False

        user_message = ChatMessage.user(content)
        self.transcript = self.transcript.begin(user_message)

        try:
            result = await self._post(content)
            if result.get("success"):
                try:
                    reply = ChatMessage.model_validate(result["assistantMessage"])
                except (KeyError, ValidationError) as exc:
                    raise TransportFailure("Chat reply was malformed") from exc
                self.transcript = self.transcript.confirm(user_message.id, reply)
            else:
                self.transcript = self.transcript.fail(
                    user_message.id, f"{ERROR_PREFIX}{result.get('error')}"
                )
        except Exception:
            logger.exception("Chat request failed")
            self.transcript = self.transcript.fail(user_message.id, SEND_FAILED_MESSAGE)
        finally:
            # Cancellation skips the handlers above; never leave the turn pending.
            if self._is_pending(user_message.id):
                self.transcript = self.transcript.fail(user_message.id, SEND_FAILED_MESSAGE)
        return True

    def _is_pending(self, message_id: str) -> bool:
        return any(
            entry.message.id == message_id and entry.status == "pending"
            for entry in self.transcript.entries
        )

    async def _post(self, content: str) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                resp = await client.post(
                    self.endpoint, json={"userId": self.user_id, "message": content}
                )
            data = resp.json()
        except httpx.HTTPError as exc:
            raise TransportFailure(str(exc)) from exc
        except ValueError as exc:
            raise TransportFailure("Response body was not JSON") from exc
        if not isinstance(data, dict):
            raise TransportFailure("Response body was not a JSON object")
        return data
