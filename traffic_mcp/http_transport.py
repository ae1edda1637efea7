"""
HTTP transport: a health check plus a single JSON-RPC 2.0 endpoint at /mcp.

Plain request/response over POST; GET /mcp is rejected since no SSE stream
is offered.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, ValidationError

from traffic_mcp.catalog import catalog_as_dicts
from traffic_mcp.dispatcher import ToolDispatcher
from traffic_mcp.models import ToolFailure, ToolOutcome
from traffic_mcp.stdio_transport import SERVER_NAME, SERVER_VERSION

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-06-18"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Union[str, int, None]


class JsonRpcRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = "2.0"
    id: RequestId = None
    method: str
    params: Optional[dict[str, Any]] = None


def _result(request_id: RequestId, result: dict) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def _error(request_id: RequestId, code: int, message: str, data: Optional[dict] = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": request_id, "error": error}


def render_outcome(request_id: RequestId, outcome: ToolOutcome) -> dict:
    if isinstance(outcome, ToolFailure):
        return _error(request_id, INTERNAL_ERROR, outcome.message, {"kind": outcome.kind.value})
    return _result(request_id, {"content": [{"type": "text", "text": outcome.text}]})


def _recover_id(body: Any) -> RequestId:
    if isinstance(body, dict) and isinstance(body.get("id"), (str, int)) and not isinstance(body.get("id"), bool):
        return body["id"]
    return None


def create_http_app(dispatcher: ToolDispatcher) -> FastAPI:
    app = FastAPI(title="Traffic MCP Server", version=SERVER_VERSION)
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]
    )

    async def handle(rpc: JsonRpcRequest) -> dict:
        params = rpc.params or {}

        if rpc.method == "initialize":
            return _result(rpc.id, {
                "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                "capabilities": {"tools": {}},
            })

        if rpc.method == "ping":
            return _result(rpc.id, {"ok": True, "now": datetime.now(timezone.utc).isoformat()})

        if rpc.method == "tools/list":
            return _result(rpc.id, {"tools": catalog_as_dicts()})

        if rpc.method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str):
                return _error(rpc.id, INVALID_PARAMS, "Invalid params: 'name' must be a string")
            outcome = await dispatcher.dispatch(name, params.get("arguments"))
            return render_outcome(rpc.id, outcome)

        return _error(rpc.id, METHOD_NOT_FOUND, "Method not found")

    @app.get("/health")
    def health():
        return {"status": "ok", "message": "Traffic MCP Server is running"}

    @app.post("/mcp")
    async def mcp_endpoint(request: Request):
        raw = await request.body()
        try:
            body = json.loads(raw)
        except ValueError:
            logger.warning("Unparseable JSON-RPC body")
            return JSONResponse(_error(None, PARSE_ERROR, "Parse error"))

        try:
            rpc = JsonRpcRequest.model_validate(body)
        except ValidationError:
            return JSONResponse(_error(_recover_id(body), INVALID_REQUEST, "Invalid Request"))

        logger.info("MCP request method=%s id=%s", rpc.method, rpc.id)
        if rpc.method.startswith("notifications/") and "id" not in body:
            return Response(status_code=202)

        try:
            return JSONResponse(await handle(rpc))
        except Exception:
            logger.exception("MCP JSON-RPC error")
            return JSONResponse(_error(rpc.id, INTERNAL_ERROR, "Internal error"))

    @app.get("/mcp")
    def mcp_get():
        return JSONResponse(
            status_code=400,
            content={"error": "Use POST method for MCP JSON-RPC requests"},
        )

    return app
