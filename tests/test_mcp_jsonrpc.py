"""Tests for MCP JSON-RPC protocol handling."""

import json

import pytest
from fastapi.testclient import TestClient

from vertex_mcp.mcp.errors import INTERNAL_ERROR, METHOD_NOT_FOUND
from vertex_mcp.mcp.handlers import PROTOCOL_VERSION


class TestJsonRpcParsing:
    """Tests for JSON-RPC message parsing."""

    def test_invalid_json_returns_400(self, client: TestClient):
        """Test that invalid JSON is a plain-text transport error."""
        response = client.post(
            "/",
            content="not valid json{",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "invalid json" in response.text.lower()

    @pytest.mark.parametrize(
        "body",
        [
            '{"jsonrpc":"2.0","id":NaN,"method":"tools/list"}',
            '{"jsonrpc":"2.0","id":-Infinity,"method":"tools/list"}',
        ],
    )
    def test_non_finite_id_returns_400(self, client: TestClient, body):
        """Test that NaN and Infinity literals are rejected as invalid JSON."""
        response = client.post(
            "/", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "invalid json" in response.text.lower()

    def test_non_finite_argument_returns_400(self, client: TestClient, generator):
        """Test that an Infinity inside tool arguments never reaches the backend."""
        body = (
            '{"jsonrpc":"2.0","id":1,"method":"tools/call","params":'
            '{"name":"gemini_query","arguments":{"prompt":"p","x":Infinity}}}'
        )
        response = client.post(
            "/", content=body, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "invalid json" in response.text.lower()
        assert generator.prompts == []

    def test_non_object_body_returns_400(self, client: TestClient):
        """Test that a JSON array is not accepted as a request."""
        response = client.post("/", json=[1, 2, 3])
        assert response.status_code == 400

    def test_mistyped_method_returns_400(self, client: TestClient):
        """Test that a non-string method fails decoding."""
        response = client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": 5})
        assert response.status_code == 400

    def test_missing_method_returns_not_found(self, client: TestClient):
        """Test that an absent method is treated as an unknown one."""
        response = client.post("/", json={"jsonrpc": "2.0", "id": 1})
        assert response.status_code == 200
        assert response.json()["error"]["code"] == METHOD_NOT_FOUND


class TestMcpMethods:
    """Tests for MCP protocol methods."""

    def test_unknown_method_returns_not_found(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that unknown method returns method not found."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request("unknown/method"),
        )
        assert response.status_code == 200

        data = response.json()
        assert data["error"]["code"] == METHOD_NOT_FOUND
        assert data["error"]["message"] == "Method not found: unknown/method"

    def test_initialize_returns_capabilities(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that initialize returns server capabilities."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "initialize",
                {
                    "protocolVersion": "2024-11-05",
                    "capabilities": {},
                    "clientInfo": {"name": "test", "version": "1.0"},
                },
            ),
        )
        assert response.status_code == 200

        result = response.json()["result"]
        assert result["protocolVersion"] == PROTOCOL_VERSION == "2025-06-18"
        assert result["capabilities"] == {"tools": {}}
        assert result["serverInfo"] == {"name": "vertex-mcp-server", "version": "1.0.0"}

    def test_initialize_ignores_malformed_params(self, client: TestClient):
        """Test that initialize performs no input validation."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 3, "method": "initialize", "params": "junk"},
        )
        assert "result" in response.json()

    def test_tools_list_returns_tools_in_order(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that tools/list returns the tools in definition order."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list"),
        )
        assert response.status_code == 200

        tools = response.json()["result"]["tools"]
        assert [t["name"] for t in tools] == [
            "gemini_query",
            "gemini_query_with_search",
            "gemini_code_review",
        ]

    def test_tools_list_tool_has_required_fields(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that listed tools have all required fields."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list"),
        )
        data = response.json()

        for tool in data["result"]["tools"]:
            assert set(tool) == {"name", "description", "inputSchema"}
            assert tool["inputSchema"]["type"] == "object"
            assert isinstance(tool["inputSchema"]["required"], list)
            for prop in tool["inputSchema"]["properties"].values():
                assert prop["type"] == "string"
                assert prop["description"]

    def test_tools_call_query(
        self, client: TestClient, generator, sample_jsonrpc_request
    ):
        """Test calling the gemini_query tool."""
        generator.reply = "Paris"
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "gemini_query", "arguments": {"prompt": "Capital of France?"}},
            ),
        )
        assert response.status_code == 200

        result = response.json()["result"]
        assert result == {"content": [{"type": "text", "text": "Paris"}]}
        assert generator.prompts == ["Capital of France?"]

    def test_code_review_scenario(self, client: TestClient, generator):
        """Test the exact wire shape of a successful code review."""
        generator.reply = "looks fine"
        response = client.post(
            "/",
            content=json.dumps({
                "jsonrpc": "2.0",
                "id": 1,
                "method": "tools/call",
                "params": {
                    "name": "gemini_code_review",
                    "arguments": {"code": "x=1", "language": "python"},
                },
            }),
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {"content": [{"type": "text", "text": "looks fine"}]},
        }

    def test_tools_call_missing_prompt_is_rpc_error(
        self, client: TestClient, generator, sample_jsonrpc_request
    ):
        """Test that a missing required argument is a JSON-RPC error."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call", {"name": "gemini_query", "arguments": {}}
            ),
        )
        data = response.json()
        assert "result" not in data
        assert data["error"]["code"] == INTERNAL_ERROR
        assert data["error"]["message"] == "prompt must be a string"
        assert generator.prompts == []

    def test_tools_call_mistyped_argument_is_rpc_error(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that a required argument of the wrong type is a JSON-RPC error."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "gemini_code_review", "arguments": {"code": "x=1", "language": 3}},
            ),
        )
        error = response.json()["error"]
        assert error["code"] == INTERNAL_ERROR
        assert error["message"] == "language must be a string"

    def test_tools_call_unknown_tool(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test calling an unknown tool returns an internal error envelope."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "nonexistent", "arguments": {}},
            ),
        )
        assert response.status_code == 200

        data = response.json()
        assert "result" not in data
        assert data["error"] == {"code": INTERNAL_ERROR, "message": "unknown tool: nonexistent"}

    def test_tools_call_without_params(self, client: TestClient):
        """Test that tools/call without params is an internal error."""
        response = client.post(
            "/", json={"jsonrpc": "2.0", "id": 9, "method": "tools/call"}
        )
        error = response.json()["error"]
        assert error["code"] == INTERNAL_ERROR
        assert error["message"].startswith("invalid params:")

    def test_tools_call_with_null_params(self, client: TestClient):
        """Test that explicit null params are treated like absent params."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": None},
        )
        assert response.status_code == 200
        error = response.json()["error"]
        assert error["code"] == INTERNAL_ERROR
        assert error["message"] == "invalid params: params are required"

    def test_tools_call_with_non_object_params(self, client: TestClient):
        """Test that tools/call with array params is an internal error."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": ["x"]},
        )
        error = response.json()["error"]
        assert error["code"] == INTERNAL_ERROR
        assert error["message"].startswith("invalid params:")

    def test_backend_failure_is_soft_error(
        self, failing_client: TestClient, sample_jsonrpc_request
    ):
        """Test that a backend failure comes back inside a success envelope."""
        response = failing_client.post(
            "/",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "gemini_query", "arguments": {"prompt": "hello"}},
            ),
        )
        assert response.status_code == 200

        data = response.json()
        assert "error" not in data
        assert data["result"]["isError"] is True
        assert len(data["result"]["content"]) == 1
        assert data["result"]["content"][0]["text"].startswith("Error: ")

    @pytest.mark.parametrize("request_id", [1, None, "abc"])
    def test_notification_returns_no_content(self, client: TestClient, request_id):
        """Test that notifications/initialized never returns a body."""
        response = client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": request_id,
                "method": "notifications/initialized",
            },
        )
        assert response.status_code == 204
        assert response.content == b""

    def test_notification_without_id_returns_no_content(self, client: TestClient):
        """Test that notifications without an id also return 204."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "method": "notifications/initialized"},
        )
        assert response.status_code == 204
        assert response.content == b""


class TestResponseFormat:
    """Tests for JSON-RPC response format compliance."""

    def test_response_has_jsonrpc_field(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that responses include jsonrpc field."""
        response = client.post(
            "/",
            json=sample_jsonrpc_request("tools/list"),
        )
        data = response.json()
        assert data["jsonrpc"] == "2.0"

    @pytest.mark.parametrize("request_id", [42, "req-7", 1.5, None])
    def test_response_echoes_id_verbatim(self, client: TestClient, request_id):
        """Test that response id matches request id whatever its type."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": request_id, "method": "tools/list"},
        )
        assert response.json()["id"] == request_id

    def test_error_response_echoes_id(self, client: TestClient):
        """Test that error envelopes echo the request id too."""
        response = client.post(
            "/",
            json={"jsonrpc": "2.0", "id": "abc", "method": "nope"},
        )
        assert response.json()["id"] == "abc"

    def test_absent_id_echoed_as_null(self, client: TestClient):
        """Test that a request without id gets a null id in the response."""
        response = client.post("/", json={"jsonrpc": "2.0", "method": "tools/list"})
        data = response.json()
        assert "id" in data
        assert data["id"] is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"method": "initialize"},
            {"method": "tools/list"},
            {"method": "tools/call", "params": {"name": "gemini_query", "arguments": {"prompt": "p"}}},
            {"method": "tools/call", "params": {"name": "gemini_query", "arguments": {}}},
            {"method": "tools/call", "params": {"name": "nonexistent"}},
            {"method": "bogus"},
        ],
    )
    def test_exactly_one_of_result_or_error(self, client: TestClient, payload):
        """Test the result/error exclusivity of every envelope."""
        response = client.post("/", json={"jsonrpc": "2.0", "id": 1, **payload})
        data = json.loads(response.text)
        assert ("result" in data) != ("error" in data)
        assert set(data) - {"result", "error"} == {"jsonrpc", "id"}


class TestAsyncClient:
    """Tests that run the app through the async ASGI transport."""

    @pytest.mark.asyncio
    async def test_query_with_search_over_asgi(self, async_client, generator):
        """Test the search variant through the async client."""
        generator.reply = "today's news"
        response = await async_client.post(
            "/",
            json={
                "jsonrpc": "2.0",
                "id": 5,
                "method": "tools/call",
                "params": {"name": "gemini_query_with_search", "arguments": {"prompt": "news"}},
            },
        )
        assert response.status_code == 200
        assert response.json()["result"]["content"][0]["text"] == "today's news"
        assert generator.prompts[0].endswith("news")
        assert generator.prompts[0].startswith("Please provide current, up-to-date information")
