"""Tests for the MCP server."""

import io
import json

import pytest

from propflow.errors import ConfigError
from propflow.server import MCPServer, handle_request, run_mcp_server
from propflow.server.mcp import load_projects

PROJECT = {
    "Parent.tsx": 'export function Parent() { return <Child label="hi" />; }\n',
    "Child.tsx": "export function Child({ label }) { return null; }\n",
}


@pytest.fixture
def server(write_project):
    root = write_project(PROJECT)
    return MCPServer(root=str(root))


def call(server, name, **arguments):
    response = handle_request(
        server, {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
    )
    assert "error" not in response, response
    return json.loads(response["result"]["content"][0]["text"])


class TestProtocol:
    def test_initialize(self, server):
        response = handle_request(server, {"jsonrpc": "2.0", "id": 1, "method": "initialize"})
        assert response["result"]["serverInfo"]["name"] == "propflow"
        assert "tools" in response["result"]["capabilities"]

    def test_notification_has_no_response(self, server):
        assert handle_request(server, {"jsonrpc": "2.0", "method": "notifications/initialized"}) is None

    def test_tools_list(self, server):
        response = handle_request(server, {"jsonrpc": "2.0", "id": 2, "method": "tools/list"})
        names = [t["name"] for t in response["result"]["tools"]]
        assert names == ["propflow_projects", "propflow_components", "propflow_usage", "propflow_trace"]

    def test_unknown_method(self, server):
        response = handle_request(server, {"jsonrpc": "2.0", "id": 3, "method": "bogus"})
        assert response["error"]["code"] == -32000
        assert "bogus" in response["error"]["message"]

    def test_unknown_tool(self, server):
        response = handle_request(
            server, {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "nope", "arguments": {}}}
        )
        assert "Unknown tool" in response["error"]["message"]

    def test_stdio_loop(self, write_project):
        root = write_project(PROJECT)
        stdin = io.StringIO(
            '{"jsonrpc": "2.0", "id": 1, "method": "ping"}\n'
            "\n"
            "not json\n"
            '{"jsonrpc": "2.0", "method": "notifications/initialized"}\n'
        )
        stdout = io.StringIO()
        run_mcp_server(root=str(root), stdin=stdin, stdout=stdout)
        responses = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert responses[0] == {"jsonrpc": "2.0", "id": 1, "result": {}}
        assert "Parse error" in responses[1]["error"]["message"]
        assert len(responses) == 2


class TestTools:
    def test_projects(self, server):
        data = call(server, "propflow_projects")
        assert [p["name"] for p in data["projects"]] == ["default"]

    def test_components(self, server):
        data = call(server, "propflow_components", file="Child.tsx")
        assert data["components"] == [{"name": "Child", "line": 1, "props": ["label"]}]

    def test_usage(self, server):
        data = call(server, "propflow_usage", file="Parent.tsx", component="Child", prop="label")
        assert data["value"] == '"hi"'
        assert data["spread"] is False

    def test_trace(self, server):
        data = call(server, "propflow_trace", file="Child.tsx", component="Child", prop="label")
        assert [n["component"] for n in data["chain"]] == ["Parent", "Child"]
        assert data["chain"][0]["file"] == "Parent.tsx"

    def test_missing_file_is_an_error(self, server):
        response = handle_request(
            server,
            {
                "jsonrpc": "2.0",
                "id": 5,
                "method": "tools/call",
                "params": {"name": "propflow_components", "arguments": {"file": "Nope.tsx"}},
            },
        )
        assert "error" in response


class TestProjectsConfig:
    def test_multiple_projects(self, tmp_path, write_project):
        root = write_project(PROJECT)
        config = tmp_path / "projects.json"
        config.write_text(json.dumps({"projects": [{"name": "web", "root": str(root)}, {"name": "admin", "root": str(root)}]}))
        server = MCPServer(config_path=str(config))
        data = call(server, "propflow_components", file="Child.tsx", project="admin")
        assert data["total"] == 1

        response = handle_request(
            server,
            {
                "jsonrpc": "2.0",
                "id": 6,
                "method": "tools/call",
                "params": {"name": "propflow_components", "arguments": {"file": "Child.tsx"}},
            },
        )
        assert "Multiple projects" in response["error"]["message"]

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "projects.json"
        config.write_text('{"projects": [{"name": "web"}]}')
        with pytest.raises(ConfigError):
            load_projects(str(config))

    def test_empty_projects(self, tmp_path):
        config = tmp_path / "projects.json"
        config.write_text('{"projects": []}')
        with pytest.raises(ConfigError):
            load_projects(str(config))

    def test_requires_root_or_config(self):
        with pytest.raises(ValueError):
            MCPServer()
