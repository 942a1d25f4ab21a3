"""Chat message and turn models, with their JSON wire format.

Wire keys are camelCase and timestamps are ISO-8601 UTC with millisecond
precision and a trailing ``Z``, the shape browsers produce for
``Date.toJSON()``.
"""

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

Role = Literal["user", "assistant"]


def new_message_id() -> str:
    return uuid.uuid4().hex


def now_utc() -> datetime:
    """Current UTC time truncated to the precision sent over the wire."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ChatMessage(_WireModel):
    """A single chat bubble."""

    id: str = Field(default_factory=new_message_id)
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=now_utc)
    memory_created: bool | None = None

    @field_serializer("timestamp")
    def serialize_timestamp(self, ts: datetime) -> str:
        return format_timestamp(ts)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str, memory_created: bool | None = None) -> "ChatMessage":
        return cls(role="assistant", content=content, memory_created=memory_created)


class ChatTurn(_WireModel):
    """The handler's answer to one user message."""

    user_message: ChatMessage
    assistant_message: ChatMessage
    memories_found: int

    def to_wire(self) -> dict[str, Any]:
        return {"success": True, **super().to_wire()}
