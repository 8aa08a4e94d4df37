"""MCP (Model Context Protocol) server for propflow.

Implements JSON-RPC 2.0 based MCP protocol for Claude and other MCP clients.

Usage:
    propflow mcp-server --root /path/to/app
    propflow mcp-server --config /path/to/propflow-projects.json

Config file format:
    {
        "projects": [
            {"name": "web", "root": "/path/to/web"},
            {"name": "admin", "root": "/path/to/admin"}
        ]
    }
"""

import json
import logging
import sys
from typing import Any, Optional, TextIO

import msgspec

from ..errors import ConfigError, TraceInterrupted
from ..output import components_to_dict, to_json, trace_to_dict
from ..queries import ComponentsQuery, PropUsageQuery, TraceQuery
from ..source.workspace import Workspace

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


class ProjectEntry(msgspec.Struct, forbid_unknown_fields=True):
    """One project in a multi-project config."""

    name: str
    root: str


class ProjectsConfig(msgspec.Struct):
    projects: list[ProjectEntry]


def load_projects(config_path: str) -> dict[str, str]:
    """Read a projects config into a name -> root mapping.

    Raises:
        ConfigError: If the file cannot be read, does not validate, or lists no projects.
    """
    try:
        with open(config_path, "rb") as f:
            config = msgspec.json.decode(f.read(), type=ProjectsConfig)
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    if not config.projects:
        raise ConfigError("Config file must contain at least one project")
    return {p.name: p.root for p in config.projects}


class MCPServer:
    """MCP server for propflow with multi-project support."""

    def __init__(self, config_path: Optional[str] = None, root: Optional[str] = None):
        """Initialize server with config file or a single workspace root.

        Args:
            config_path: Path to JSON config file with multiple projects
            root: Single workspace root (creates default project)
        """
        self._projects: dict[str, str] = {}  # name -> root
        self._workspaces: dict[str, Workspace] = {}  # name -> workspace (lazy loaded)

        if config_path:
            self._projects = load_projects(config_path)
        elif root:
            self._projects["default"] = root
        else:
            raise ValueError("Either config_path or root must be provided")

    def _get_workspace(self, project: Optional[str] = None) -> Workspace:
        """Get workspace for a project (lazy-loaded).

        Args:
            project: Project name. If None, uses default (only if single project).
        """
        if project is None:
            if len(self._projects) == 1:
                project = next(iter(self._projects))
            else:
                raise ValueError(
                    f"Multiple projects configured. Specify 'project' parameter. Available: {list(self._projects)}"
                )

        if project not in self._projects:
            raise ValueError(f"Unknown project: {project}. Available: {list(self._projects)}")

        if project not in self._workspaces:
            logger.debug(f"Opening workspace {self._projects[project]} for project {project}")
            self._workspaces[project] = Workspace(self._projects[project])

        return self._workspaces[project]

    def get_projects(self) -> list[dict]:
        """Return list of configured projects."""
        return [{"name": name, "root": root} for name, root in self._projects.items()]

    def get_tools(self) -> list[dict]:
        """Return list of available MCP tools."""
        # Common project property for multi-project support
        project_prop = {"type": "string", "description": "Project name (required if multiple projects configured)"}
        file_prop = {"type": "string", "description": "File path, absolute or relative to the project root"}

        return [
            {
                "name": "propflow_projects",
                "description": "List all configured projects. Use this to discover available projects before querying.",
                "inputSchema": {
                    "type": "object",
                    "properties": {},
                    "required": [],
                },
            },
            {
                "name": "propflow_components",
                "description": "List the React components declared in a file and the props each accepts.",
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "file": file_prop,
                        "project": project_prop,
                    },
                    "required": ["file"],
                },
            },
            {
                "name": "propflow_usage",
                "description": "Show the value a file passes for a prop on a component tag.",
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "file": file_prop,
                        "component": {"type": "string", "description": "Component (tag) name"},
                        "prop": {"type": "string", "description": "Prop name"},
                        "line": {"type": "integer", "description": "Only inspect the tag nearest this line"},
                        "project": project_prop,
                    },
                    "required": ["file", "component", "prop"],
                },
            },
            {
                "name": "propflow_trace",
                "description": "Trace where a component prop's value comes from, through the components that pass it down.",
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "file": file_prop,
                        "component": {"type": "string", "description": "Component declaring the prop"},
                        "prop": {"type": "string", "description": "Prop to trace"},
                        "depth": {"type": "integer", "description": "Maximum hops (default: from config, 20)"},
                        "project": project_prop,
                    },
                    "required": ["file", "component", "prop"],
                },
            },
        ]

    def call_tool(self, name: str, arguments: dict) -> Any:
        """Call a tool by name."""
        handlers = {
            "propflow_projects": self._handle_projects,
            "propflow_components": self._handle_components,
            "propflow_usage": self._handle_usage,
            "propflow_trace": self._handle_trace,
        }
        handler = handlers.get(name)
        if not handler:
            raise ValueError(f"Unknown tool: {name}")
        return handler(arguments)

    def _handle_projects(self, args: dict) -> dict:
        """List all configured projects."""
        return {"projects": self.get_projects()}

    def _handle_components(self, args: dict) -> dict:
        workspace = self._get_workspace(args.get("project"))
        result = ComponentsQuery(workspace).execute(args["file"])
        return components_to_dict(result, workspace.root)

    def _handle_usage(self, args: dict) -> dict:
        workspace = self._get_workspace(args.get("project"))
        result = PropUsageQuery(workspace).execute(
            args["file"], args["component"], args["prop"], near_line=args.get("line")
        )
        usage = result.usage
        return {
            "file": workspace.relative(result.file_path),
            "component": result.component_name,
            "prop": result.prop_name,
            "line": usage.line if usage else None,
            "value": usage.value if usage else None,
            "spread": usage.is_spread if usage else False,
        }

    def _handle_trace(self, args: dict) -> dict:
        workspace = self._get_workspace(args.get("project"))
        trace = TraceQuery(workspace).execute(
            args["file"], args["component"], args["prop"], max_depth=args.get("depth")
        )
        return trace_to_dict(trace, workspace.root)


def error_response(id: Any, error: Exception) -> dict:
    response = {"jsonrpc": "2.0", "id": id, "error": {"code": -32000, "message": str(error)}}
    if isinstance(error, TraceInterrupted) and error.partial is not None:
        response["error"]["data"] = {"partial": trace_to_dict(error.partial)}
    return response


def handle_request(server: MCPServer, request: dict) -> Optional[dict]:
    """Handle one JSON-RPC request; returns None for notifications."""
    req_id = request.get("id")
    method = request.get("method", "")
    params = request.get("params") or {}

    try:
        if method == "initialize":
            from .. import __version__

            result = {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "propflow", "version": __version__},
            }
        elif method == "notifications/initialized":
            return None  # No response needed for notifications
        elif method == "tools/list":
            result = {"tools": server.get_tools()}
        elif method == "tools/call":
            tool_name = params.get("name", "")
            arguments = params.get("arguments") or {}
            data = server.call_tool(tool_name, arguments)
            result = {"content": [{"type": "text", "text": to_json(data)}]}
        elif method == "ping":
            result = {}
        else:
            return error_response(req_id, ValueError(f"Method not found: {method}"))
    except Exception as e:
        logger.debug(f"Request {method} failed: {e}")
        return error_response(req_id, e)

    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def run_mcp_server(
    config_path: Optional[str] = None,
    root: Optional[str] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
):
    """Run the MCP server using stdio with JSON-RPC 2.0 protocol.

    Args:
        config_path: Path to JSON config file with multiple projects
        root: Single workspace root (creates default project)
        stdin: Input stream (defaults to sys.stdin)
        stdout: Output stream (defaults to sys.stdout)
    """
    server = MCPServer(config_path=config_path, root=root)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    def send(response: dict):
        stdout.write(json.dumps(response) + "\n")
        stdout.flush()

    for line in stdin:
        line = line.strip()
        if not line:
            continue

        try:
            request = json.loads(line)
        except json.JSONDecodeError as e:
            send(error_response(None, ValueError(f"Parse error: {e}")))
            continue

        response = handle_request(server, request)
        if response is not None:
            send(response)
