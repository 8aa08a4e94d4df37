"""Main CLI application."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import find_config, load_config, with_overrides
from .errors import ConfigError, PropFlowError, TraceInterrupted
from .output import (
    print_components,
    print_json,
    print_tag_usages,
    print_trace_tree,
    print_usage,
    trace_to_dict,
)
from .queries import ComponentsQuery, PropUsageQuery, TagUsagesQuery, TraceQuery
from .source.workspace import Workspace

app = typer.Typer(
    name="propflow",
    help="Trace where React component props get their values",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

# Workspaces already opened in this process, keyed by (root, config path)
_workspaces: dict[tuple[str, Optional[str]], Workspace] = {}


def configure_logging(verbose: bool = False):
    """Configure application logging with Rich handler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
    )


def get_workspace(root: Path, config: Optional[Path] = None) -> Workspace:
    """Open or return cached workspace."""
    if not root.is_dir():
        err_console.print(f"[red]Error: Workspace root not found: {root}[/red]")
        raise typer.Exit(1)
    if config is not None and not config.exists():
        err_console.print(f"[red]Error: Config file not found: {config}[/red]")
        raise typer.Exit(1)

    key = (str(root.resolve()), str(config) if config else None)
    if key not in _workspaces:
        try:
            settings = load_config(config) if config else find_config(root)
        except ConfigError as e:
            err_console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        _workspaces[key] = Workspace(str(root), config=settings)
    return _workspaces[key]


def file_arg(file: str) -> str:
    """Resolve a file argument against the current directory."""
    return str(Path(file).absolute())


def fail(message: str, json_output: bool, **extra):
    """Report an error and exit with status 1."""
    if json_output:
        print_json({"error": message, **extra})
    else:
        err_console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


# =============================================================================
# MCP Server Command
# =============================================================================


@app.command("mcp-server")
def mcp_server_cmd(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Workspace root of a single project"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config JSON with multiple projects"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every search and resolution step"),
):
    """Start MCP server for AI assistant integration (stdio).

    Exposes propflow tools via Model Context Protocol for Claude and other AI assistants.

    Single project mode:
        propflow mcp-server --root /path/to/app

    Multi-project mode (config file):
        propflow mcp-server --config /path/to/projects.json

    Config file format:
        {
            "projects": [
                {"name": "web", "root": "/path/to/web"},
                {"name": "admin", "root": "/path/to/admin"}
            ]
        }

    Tools provided:
    - propflow_projects: List available projects
    - propflow_components: List components and their props in a file
    - propflow_usage: Show the value passed for a prop on a tag
    - propflow_trace: Trace a prop value to its origin
    """
    configure_logging(verbose)
    if not root and not config:
        err_console.print("[red]Error: Either --root or --config is required[/red]")
        raise typer.Exit(1)

    if root and config:
        err_console.print("[red]Error: Cannot use both --root and --config[/red]")
        raise typer.Exit(1)

    if root and not root.is_dir():
        err_console.print(f"[red]Error: Workspace root not found: {root}[/red]")
        raise typer.Exit(1)

    if config and not config.exists():
        err_console.print(f"[red]Error: Config file not found: {config}[/red]")
        raise typer.Exit(1)

    from .server import run_mcp_server

    try:
        run_mcp_server(config_path=str(config) if config else None, root=str(root) if root else None)
    except ConfigError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Query Commands
# =============================================================================


@app.command()
def components(
    file: str = typer.Argument(..., help="File to inspect"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propflow.json"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every resolution step"),
):
    """List the components declared in a file and their props."""
    configure_logging(verbose)
    workspace = get_workspace(root, config)

    try:
        result = ComponentsQuery(workspace).execute(file_arg(file))
    except OSError as e:
        fail(f"Cannot read {file}: {e.strerror or e}", json_output)

    print_components(result, as_json=json_output, root=workspace.root)


@app.command()
def usage(
    file: str = typer.Argument(..., help="File containing the tag"),
    component: str = typer.Argument(..., help="Component (tag) name"),
    prop: str = typer.Argument(..., help="Prop name"),
    line: Optional[int] = typer.Option(None, "--line", "-l", help="Only inspect the tag nearest this line"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propflow.json"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every resolution step"),
):
    """Show the value a file passes for a prop on a component tag."""
    configure_logging(verbose)
    workspace = get_workspace(root, config)

    try:
        result = PropUsageQuery(workspace).execute(file_arg(file), component, prop, near_line=line)
    except OSError as e:
        fail(f"Cannot read {file}: {e.strerror or e}", json_output)
    except ValueError as e:
        fail(str(e), json_output)

    print_usage(result, as_json=json_output, root=workspace.root)


@app.command()
def usages(
    component: str = typer.Argument(..., help="Component (tag) name"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propflow.json"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every search step"),
):
    """Find every place a component tag is rendered."""
    configure_logging(verbose)
    workspace = get_workspace(root, config)

    try:
        result = TagUsagesQuery(workspace).execute(component)
    except ValueError as e:
        fail(str(e), json_output)

    print_tag_usages(result, as_json=json_output, root=workspace.root)


@app.command()
def trace(
    file: str = typer.Argument(..., help="File declaring the component"),
    component: str = typer.Argument(..., help="Component name"),
    prop: str = typer.Argument(..., help="Prop to trace"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Maximum hops (overrides maxTraceDepth)"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Budget in ms, 0 disables (overrides traceTimeout)"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Workspace root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to propflow.json"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every hop"),
):
    """Trace where a prop's value comes from."""
    configure_logging(verbose)
    workspace = get_workspace(root, config)

    try:
        settings = with_overrides(workspace.config, max_trace_depth=depth, trace_timeout=timeout)
    except ConfigError as e:
        fail(str(e), json_output)

    try:
        result = TraceQuery(workspace).execute(
            file_arg(file),
            component,
            prop,
            max_depth=settings.max_trace_depth,
            timeout_ms=settings.trace_timeout,
        )
    except OSError as e:
        fail(f"Cannot read {file}: {e.strerror or e}", json_output)
    except TraceInterrupted as e:
        partial = trace_to_dict(e.partial, workspace.root) if e.partial is not None else None
        if not json_output and e.partial is not None:
            print_trace_tree(e.partial, console, root=workspace.root)
        fail(str(e), json_output, partial=partial)
    except (ValueError, PropFlowError) as e:
        fail(str(e), json_output)

    if json_output:
        print_json(trace_to_dict(result, workspace.root))
    else:
        print_trace_tree(result, console, root=workspace.root)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
