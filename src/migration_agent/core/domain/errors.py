"""
Domain Errors

Exception hierarchy shared by the task store, the pathway generator and
the JSON-RPC layer.
"""

from typing import Any


class MigrationAgentError(Exception):
    """Base class for all errors raised by the migration agent."""


class TaskNotFoundError(MigrationAgentError, KeyError):
    """Raised when a task id is not present in the task store."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return self.args[0]


class PathwayGenerationError(MigrationAgentError):
    """Raised when the LLM call backing pathway generation fails."""


class RpcError(MigrationAgentError):
    """
    Protocol-level JSON-RPC error.

    Raised inside the dispatcher and rendered into an error response.

    Attributes:
        code: Numeric JSON-RPC error code
        message: Short error message
        data: Optional free-text detail (underlying error)
    """

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data
