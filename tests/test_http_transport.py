"""
HTTP transport tests: FastAPI TestClient with a stubbed dispatcher.
Only envelope (de)serialization is checked here; dispatch has its own tests.
"""
import pytest
from fastapi.testclient import TestClient

from traffic_mcp.http_transport import create_http_app
from traffic_mcp.models import FailureKind, ToolFailure, ToolSuccess
from traffic_mcp.stdio_transport import list_tools


class StubDispatcher:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    async def dispatch(self, name, arguments=None):
        self.calls.append((name, arguments))
        return self.outcome


@pytest.fixture
def dispatcher():
    return StubDispatcher(ToolSuccess('{"origin": "New York, NY, USA"}'))


@pytest.fixture
def client(dispatcher):
    return TestClient(create_http_app(dispatcher))


def rpc(client, method, params=None, request_id=1):
    body = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        body["params"] = params
    r = client.post("/mcp", json=body)
    assert r.status_code == 200
    return r.json()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "message": "Traffic MCP Server is running"}


@pytest.mark.parametrize("query", ["", "?sessionId=abc", "?stream=true&x=1"])
def test_get_mcp_rejected(client, query):
    r = client.get(f"/mcp{query}")
    assert r.status_code == 400
    assert "POST" in r.json()["error"]


def test_initialize(client):
    data = rpc(client, "initialize", {"protocolVersion": "2025-03-26"}, request_id="init-1")
    assert data["id"] == "init-1"
    assert data["result"] == {
        "protocolVersion": "2025-03-26",
        "serverInfo": {"name": "traffic-boy-mcp-server", "version": "1.0.0"},
        "capabilities": {"tools": {}},
    }


def test_initialize_default_protocol(client):
    assert rpc(client, "initialize")["result"]["protocolVersion"] == "2025-06-18"


def test_ping(client):
    result = rpc(client, "ping", request_id=7)["result"]
    assert result["ok"] is True
    assert result["now"]


def test_tools_list_matches_stdio_catalog(client):
    tools = rpc(client, "tools/list")["result"]["tools"]
    stdio_tools = list_tools()
    assert [t["name"] for t in tools] == [t.name for t in stdio_tools]
    for http_tool, stdio_tool in zip(tools, stdio_tools):
        assert http_tool["inputSchema"] == stdio_tool.inputSchema
        assert http_tool["description"] == stdio_tool.description


def test_tools_call_success(client, dispatcher):
    data = rpc(client, "tools/call", {
        "name": "get_live_traffic",
        "arguments": {"origin": "40.7128,-74.0060", "destination": "Boston, MA"},
    }, request_id=2)
    assert dispatcher.calls == [
        ("get_live_traffic", {"origin": "40.7128,-74.0060", "destination": "Boston, MA"})
    ]
    assert data == {
        "jsonrpc": "2.0",
        "id": 2,
        "result": {"content": [{"type": "text", "text": '{"origin": "New York, NY, USA"}'}]},
    }


def test_tools_call_failure_is_jsonrpc_error():
    dispatcher = StubDispatcher(ToolFailure(FailureKind.UNKNOWN_TOOL, "Unknown tool: unknown_tool"))
    data = rpc(TestClient(create_http_app(dispatcher)), "tools/call", {"name": "unknown_tool"}, request_id=3)
    assert data["id"] == 3
    assert "result" not in data
    assert data["error"] == {
        "code": -32603,
        "message": "Unknown tool: unknown_tool",
        "data": {"kind": "unknown_tool"},
    }


def test_tools_call_without_name(client, dispatcher):
    data = rpc(client, "tools/call", {"arguments": {}})
    assert data["error"]["code"] == -32602
    assert dispatcher.calls == []


def test_unknown_method(client):
    data = rpc(client, "resources/list", request_id=9)
    assert data == {"jsonrpc": "2.0", "id": 9, "error": {"code": -32601, "message": "Method not found"}}


def test_unparseable_body_has_null_id(client):
    r = client.post("/mcp", content=b'{"jsonrpc": "2.0", "id": 4, "method": ', headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert r.json() == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}


def test_invalid_request_echoes_id(client):
    r = client.post("/mcp", json={"jsonrpc": "2.0", "id": 5, "params": {}})
    assert r.json()["id"] == 5
    assert r.json()["error"]["code"] == -32600


def test_invalid_request_not_an_object(client):
    r = client.post("/mcp", json=[1, 2, 3])
    assert r.json()["id"] is None
    assert r.json()["error"]["code"] == -32600


def test_notification_accepted_without_body(client):
    r = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert r.status_code == 202
    assert r.content == b""


def test_dispatcher_crash_still_returns_envelope():
    class Exploding:
        async def dispatch(self, name, arguments=None):
            raise RuntimeError("boom")

    data = rpc(TestClient(create_http_app(Exploding())), "tools/call", {"name": "get_live_traffic"}, request_id=6)
    assert data["id"] == 6
    assert data["error"] == {"code": -32603, "message": "Internal error"}
