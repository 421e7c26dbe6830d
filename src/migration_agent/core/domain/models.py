"""
Core Domain Models

This module defines the task-tracking entities exchanged over the A2A-style
JSON-RPC interface and the user profile extracted from a relocation query.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

ARTIFACT_NAME = "Migration Pathway Recommendation"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an RFC 3339 UTC string (``2025-01-01T12:00:00Z``)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class TaskState(str, Enum):
    """Lifecycle state of a task."""

    WORKING = "working"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Part:
    """A single typed content part of a message or artifact."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class StatusMessage:
    """
    Agent-authored message attached to the current task status.

    Attributes:
        parts: Content parts of the message
        message_id: Unique identifier of this message
        task_id: Identifier of the task the message belongs to
        role: Author role, always "agent" for status messages
    """

    parts: list[Part]
    message_id: str
    task_id: str
    role: str = "agent"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "message",
            "role": self.role,
            "parts": [part.to_dict() for part in self.parts],
            "messageId": self.message_id,
            "taskId": self.task_id,
        }


@dataclass
class Message:
    """Inbound user message submitted with ``tasks/send`` or ``message/send``."""

    parts: list[Part] = field(default_factory=list)
    role: str | None = None
    message_id: str | None = None

    def text_query(self) -> str:
        """Join all text parts with spaces; non-text parts are ignored."""
        return " ".join(part.text for part in self.parts if part.type == "text").strip()


@dataclass
class TaskStatus:
    """Current state of a task plus the optional message attached to it."""

    state: TaskState
    timestamp: datetime = field(default_factory=utc_now)
    message: StatusMessage | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "state": self.state.value,
            "timestamp": format_timestamp(self.timestamp),
        }
        if self.message is not None:
            data["message"] = self.message.to_dict()
        return data


@dataclass
class Artifact:
    """A named piece of output content attached to a completed task."""

    artifact_id: str
    name: str
    parts: list[Part] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "artifactId": self.artifact_id,
            "name": self.name,
            "parts": [part.to_dict() for part in self.parts],
        }


@dataclass
class Task:
    """
    Unit of work tracked by the task store.

    A task is written in ``working`` state when processing starts and
    replaced exactly once by a terminal (``completed`` or ``failed``) value.

    Attributes:
        id: Opaque task identifier, caller-supplied or generated
        status: Current status (state, timestamp, optional message)
        artifacts: Results of a completed task, empty otherwise
        created_at: When processing of the task started
        updated_at: When the task was last written to the store
    """

    id: str
    status: TaskStatus
    artifacts: list[Artifact] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def state(self) -> TaskState:
        return self.status.state

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape returned in RPC results."""
        return {
            "id": self.id,
            "kind": "task",
            "status": self.status.to_dict(),
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class UserProfile:
    """
    Structured fields extracted from a relocation query.

    Empty strings mean "not found"; a budget of 0 means "not specified".
    """

    profession: str = ""
    destination: str = ""
    origin: str = ""
    budget: int = 0

    def is_empty(self) -> bool:
        return not (self.profession or self.destination or self.origin or self.budget)
