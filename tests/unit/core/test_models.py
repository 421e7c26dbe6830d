"""Unit tests for domain models and their JSON serialization."""

from datetime import datetime, timezone

from migration_agent.core.domain.errors import TaskNotFoundError
from migration_agent.core.domain.models import (
    Artifact,
    Message,
    Part,
    StatusMessage,
    Task,
    TaskState,
    TaskStatus,
    format_timestamp,
)


def test_text_query_joins_text_parts_and_skips_others():
    message = Message(
        parts=[
            Part(text="  software engineer"),
            Part(text="ignored", type="file"),
            Part(text="to Canada  "),
        ],
        role="user",
    )
    assert message.text_query() == "software engineer to Canada"


def test_text_query_without_text_parts_is_empty():
    assert Message(parts=[Part(text="x", type="data")]).text_query() == ""
    assert Message().text_query() == ""


def test_format_timestamp_is_rfc3339_utc():
    value = datetime(2025, 3, 1, 8, 30, 15, 123456, tzinfo=timezone.utc)
    assert format_timestamp(value) == "2025-03-01T08:30:15Z"


def test_working_task_to_dict_has_no_message_or_artifacts():
    now = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    task = Task(
        id="task-1",
        status=TaskStatus(state=TaskState.WORKING, timestamp=now),
        created_at=now,
        updated_at=now,
    )

    assert task.to_dict() == {
        "id": "task-1",
        "kind": "task",
        "status": {"state": "working", "timestamp": "2025-01-02T03:04:05Z"},
        "artifacts": [],
        "createdAt": now.isoformat(),
        "updatedAt": now.isoformat(),
    }


def test_completed_task_to_dict_shape():
    task = Task(
        id="task-2",
        status=TaskStatus(
            state=TaskState.COMPLETED,
            message=StatusMessage(parts=[Part(text="done")], message_id="m-1", task_id="task-2"),
        ),
        artifacts=[Artifact(artifact_id="a-1", name="Recommendation", parts=[Part(text="done")])],
    )

    data = task.to_dict()

    assert data["status"]["state"] == "completed"
    assert data["status"]["message"] == {
        "kind": "message",
        "role": "agent",
        "parts": [{"type": "text", "text": "done"}],
        "messageId": "m-1",
        "taskId": "task-2",
    }
    assert data["artifacts"] == [
        {"artifactId": "a-1", "name": "Recommendation", "parts": [{"type": "text", "text": "done"}]}
    ]


def test_task_not_found_error_message():
    error = TaskNotFoundError("abc")
    assert str(error) == "task not found: abc"
    assert error.task_id == "abc"
    assert isinstance(error, KeyError)
