"""
JSON-RPC Schemas
================

Pydantic models for the JSON-RPC 2.0 envelope and the params of every
supported method. Params are decoded by method name first and then
validated strictly against the matching model; values of the wrong type
are rejected, never coerced.
"""

import math
from enum import IntEnum
from typing import Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    confloat,
    field_validator,
    model_validator,
)

from migration_agent.core.domain.models import Message, Part

JSONRPC_VERSION = "2.0"

RequestId = Union[StrictStr, StrictInt, confloat(strict=True, allow_inf_nan=False), None]


def is_echoable_id(value: Any) -> bool:
    """True when ``value`` can be written back as a JSON-RPC id.

    Booleans, non-finite numbers and strings that cannot be encoded as
    UTF-8 (lone surrogates) are rejected.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return False
        return True
    return False


class RpcErrorCode(IntEnum):
    """Fixed protocol-level error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


ERROR_MESSAGES = {
    RpcErrorCode.PARSE_ERROR: "Parse error",
    RpcErrorCode.INVALID_REQUEST: "Invalid Request",
    RpcErrorCode.METHOD_NOT_FOUND: "Method not found",
    RpcErrorCode.INVALID_PARAMS: "Invalid params",
    RpcErrorCode.INTERNAL_ERROR: "Internal error",
}


class PartSchema(BaseModel):
    """Message part. Accepts the legacy ``type`` key or the A2A ``kind`` key."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[StrictStr] = None
    kind: Optional[StrictStr] = None
    text: Optional[StrictStr] = None

    @model_validator(mode="after")
    def _check_part(self) -> "PartSchema":
        if self.part_type is None:
            raise ValueError("part requires a 'type' or 'kind'")
        if self.part_type == "text" and self.text is None:
            raise ValueError("text part requires 'text'")
        return self

    @property
    def part_type(self) -> Optional[str]:
        return self.type or self.kind


class MessageSchema(BaseModel):
    """Inbound message. Requires a role and/or at least one part."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    role: Optional[StrictStr] = None
    parts: Optional[list[PartSchema]] = None
    message_id: Optional[StrictStr] = Field(default=None, alias="messageId")
    task_id: Optional[StrictStr] = Field(default=None, alias="taskId")

    @model_validator(mode="after")
    def _check_message(self) -> "MessageSchema":
        if not self.role and not self.parts:
            raise ValueError("message requires a 'role' or at least one part")
        return self

    def to_domain(self) -> Message:
        return Message(
            parts=[Part(text=p.text or "", type=p.part_type or "") for p in self.parts or []],
            role=self.role,
            message_id=self.message_id,
        )


class SendParams(BaseModel):
    """Params of ``tasks/send``."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[StrictStr] = None
    message: MessageSchema


class GetParams(BaseModel):
    """Params of ``tasks/get``."""

    model_config = ConfigDict(extra="ignore")

    id: StrictStr = Field(min_length=1)


class MessageParams(BaseModel):
    """Wrapped params of ``message/send``: ``{"message": {...}, "id": ...}``."""

    model_config = ConfigDict(extra="ignore")

    message: MessageSchema
    id: Optional[StrictStr] = None


class JsonRpcRequest(BaseModel):
    """Validated request envelope (params still undecoded)."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Optional[Literal["2.0"]] = None
    method: StrictStr
    params: Any = None
    id: RequestId = None

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: Any) -> Any:
        if not is_echoable_id(value):
            raise ValueError("id must be valid UTF-8 text, a finite number or null")
        return value


class RpcErrorBody(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one line of ``loc: msg`` items."""
    items = []
    for detail in error.errors():
        loc = ".".join(str(part) for part in detail.get("loc", ()))
        msg = detail.get("msg", "invalid value")
        items.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(items)


def success_response(result: Any, request_id: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def error_response(
    code: int, message: str, request_id: Any, data: Any = None
) -> dict[str, Any]:
    body = RpcErrorBody(code=code, message=message, data=data)
    return {
        "jsonrpc": JSONRPC_VERSION,
        "error": body.model_dump(exclude_none=True),
        "id": request_id,
    }
