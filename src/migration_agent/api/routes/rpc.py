"""
JSON-RPC API Routes
===================

- POST /     - JSON-RPC endpoint (A2A default)
- POST /a2a  - same endpoint under a dedicated path

Responses are always HTTP 200; protocol errors travel in the JSON-RPC
``error`` member.
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from migration_agent.api.jsonrpc import JsonRpcDispatcher

router = APIRouter()


class RpcResponse(JSONResponse):
    """JSONResponse that escapes non-ASCII text.

    Echoed ids, task ids and method names are client-supplied and may hold
    lone surrogates, which cannot be written as UTF-8.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content, ensure_ascii=True, allow_nan=False, separators=(",", ":")
        ).encode("utf-8")


def get_dispatcher(request: Request) -> JsonRpcDispatcher:
    return request.app.state.dispatcher


@router.post("/", response_class=RpcResponse, summary="JSON-RPC endpoint")
@router.post("/a2a", response_class=RpcResponse, summary="JSON-RPC endpoint (dedicated path)")
async def handle_rpc(request: Request) -> RpcResponse:
    """Dispatch a JSON-RPC call (tasks/send, message/send, tasks/get)."""
    body = await request.body()
    response = await get_dispatcher(request).dispatch(body)
    return RpcResponse(content=response)
