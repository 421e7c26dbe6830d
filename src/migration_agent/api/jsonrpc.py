"""
JSON-RPC Dispatcher
===================

Decodes inbound JSON-RPC envelopes, validates them, routes them by method
name to the task processor and serializes the response.

Supported methods:
- tasks/send   - process a message as a new task, return the Task
- message/send - same as tasks/send, accepting a bare message or a
                 ``{"message": ..., "id": ...}`` wrapper
- tasks/get    - return a previously created Task

Every response echoes the request ``id``. When the id cannot be recovered
(malformed JSON, or an id that is not UTF-8 text, a finite number or null)
the response carries ``"id": null``.
"""

import json
from typing import Any, Awaitable, Callable, Dict, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from migration_agent.api.schemas.rpc_schemas import (
    ERROR_MESSAGES,
    GetParams,
    JsonRpcRequest,
    MessageParams,
    MessageSchema,
    RpcErrorCode,
    SendParams,
    error_response,
    format_validation_error,
    is_echoable_id,
    success_response,
)
from migration_agent.application.task_processor import TaskProcessor
from migration_agent.core.domain.errors import RpcError, TaskNotFoundError

logger = structlog.get_logger()

ParamsT = TypeVar("ParamsT", bound=BaseModel)
Handler = Callable[[Any], Awaitable[Dict[str, Any]]]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON value: {name}")


def _rpc_error(code: RpcErrorCode, data: Any = None) -> RpcError:
    return RpcError(code, ERROR_MESSAGES[code], data)


class JsonRpcDispatcher:
    """Routes JSON-RPC calls to the task processor."""

    def __init__(self, processor: TaskProcessor):
        self.processor = processor
        self.logger = logger.bind(component="jsonrpc_dispatcher")
        self._handlers: Dict[str, Handler] = {
            "tasks/send": self._handle_tasks_send,
            "message/send": self._handle_message_send,
            "tasks/get": self._handle_tasks_get,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(self, body: bytes | str) -> Dict[str, Any]:
        """Decode a raw request body and dispatch it."""
        try:
            payload = json.loads(body, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            self.logger.warning("rpc.request.unparseable", error=str(e))
            return error_response(
                RpcErrorCode.PARSE_ERROR,
                ERROR_MESSAGES[RpcErrorCode.PARSE_ERROR],
                None,
                data=str(e),
            )
        return await self.dispatch_payload(payload)

    async def dispatch_payload(self, payload: Any) -> Dict[str, Any]:
        """Dispatch an already-decoded JSON value."""
        request_id = self._extract_id(payload)

        try:
            request = self._decode_envelope(payload)
            handler = self._handlers.get(request.method)
            if handler is None:
                raise RpcError(
                    RpcErrorCode.METHOD_NOT_FOUND,
                    ERROR_MESSAGES[RpcErrorCode.METHOD_NOT_FOUND],
                    f"unknown method: {request.method}",
                )

            self.logger.info(
                "rpc.request.received", method=request.method, request_id=request_id
            )
            result = await handler(request.params)
            return success_response(result, request_id)

        except RpcError as e:
            self.logger.warning(
                "rpc.request.rejected",
                request_id=request_id,
                code=e.code,
                error=e.message,
                data=e.data,
            )
            return error_response(e.code, e.message, request_id, data=e.data)

        except Exception as e:
            self.logger.error(
                "rpc.request.failed",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return error_response(
                RpcErrorCode.INTERNAL_ERROR,
                ERROR_MESSAGES[RpcErrorCode.INTERNAL_ERROR],
                request_id,
                data=str(e),
            )

    @staticmethod
    def _extract_id(payload: Any) -> Any:
        if not isinstance(payload, dict):
            return None
        request_id = payload.get("id")
        return request_id if is_echoable_id(request_id) else None

    @staticmethod
    def _decode_envelope(payload: Any) -> JsonRpcRequest:
        if not isinstance(payload, dict):
            raise _rpc_error(RpcErrorCode.INVALID_REQUEST, "request must be a JSON object")
        try:
            return JsonRpcRequest.model_validate(payload)
        except ValidationError as e:
            raise _rpc_error(RpcErrorCode.INVALID_REQUEST, format_validation_error(e))

    @staticmethod
    def _decode_params(model: Type[ParamsT], params: Any) -> ParamsT:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise _rpc_error(RpcErrorCode.INVALID_PARAMS, "params must be an object")
        try:
            return model.model_validate(params)
        except ValidationError as e:
            raise _rpc_error(RpcErrorCode.INVALID_PARAMS, format_validation_error(e))

    async def _handle_tasks_send(self, params: Any) -> Dict[str, Any]:
        send = self._decode_params(SendParams, params)
        task_id = send.id or self.processor.generate_task_id()
        task = await self.processor.process_task(task_id, send.message.to_domain())
        return task.to_dict()

    async def _handle_message_send(self, params: Any) -> Dict[str, Any]:
        if isinstance(params, dict) and "message" in params:
            wrapped = self._decode_params(MessageParams, params)
            message, wrapper_id = wrapped.message, wrapped.id
        else:
            message, wrapper_id = self._decode_params(MessageSchema, params), None

        task_id = message.task_id or wrapper_id or self.processor.generate_task_id()
        task = await self.processor.process_task(task_id, message.to_domain())
        return task.to_dict()

    async def _handle_tasks_get(self, params: Any) -> Dict[str, Any]:
        get = self._decode_params(GetParams, params)
        try:
            task = self.processor.get_task(get.id)
        except TaskNotFoundError as e:
            raise RpcError(RpcErrorCode.INVALID_PARAMS, str(e), str(e))
        return task.to_dict()
