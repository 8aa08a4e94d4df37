"""Tree output and dict conversion for prop traces and component lists."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from ..models import ComponentsResult, NodeKind, PropNode, PropTrace
from .paths import display_path

KIND_STYLES = {
    NodeKind.SOURCE: "green",
    NodeKind.USAGE: "cyan",
    NodeKind.DEFINITION: "magenta",
}


def _node_label(node: PropNode, root: Optional[str]) -> str:
    style = KIND_STYLES[node.kind]
    label = f"[{style}]{node.kind.value}[/{style}] [bold]{escape(node.component_name)}[/bold].{escape(node.prop_name)}"
    if node.value is not None and node.value != node.prop_name:
        label += f" = {escape(node.value)}"
    label += f" [dim]({escape(display_path(node.file_path, root))}:{node.line})[/dim]"
    return label


def print_trace_tree(trace: PropTrace, console: Console, root: Optional[str] = None):
    """Print a trace as a tree, from the value's origin down to the component.

    Args:
        trace: PropTrace to render.
        console: Rich console for output.
        root: Workspace root; paths inside it are shown relative.
    """
    flags = []
    if not trace.is_complete:
        flags.append("[yellow]incomplete[/yellow]")
    if trace.ambiguous:
        flags.append("[yellow]ambiguous (spread)[/yellow]")
    title = f"[bold]{escape(trace.prop_name)}[/bold] (depth={trace.depth})"
    if flags:
        title += " " + ", ".join(flags)

    tree = Tree(title)
    branch = tree
    for node in trace.chain:
        branch = branch.add(_node_label(node, root))
    console.print(tree)


def node_to_dict(node: PropNode, root: Optional[str] = None) -> dict:
    return {
        "component": node.component_name,
        "file": display_path(node.file_path, root),
        "prop": node.prop_name,
        "line": node.line,
        "kind": node.kind.value,
        "value": node.value,
    }


def trace_to_dict(trace: PropTrace, root: Optional[str] = None) -> dict:
    """Convert a trace to a JSON-serializable dict.

    Args:
        trace: PropTrace to convert.
        root: Workspace root; paths inside it are made relative.

    Returns:
        Dictionary suitable for JSON serialization.
    """
    return {
        "prop": trace.prop_name,
        "is_complete": trace.is_complete,
        "ambiguous": trace.ambiguous,
        "depth": trace.depth,
        "chain": [node_to_dict(n, root) for n in trace.chain],
    }


def components_to_dict(result: ComponentsResult, root: Optional[str] = None) -> dict:
    return {
        "file": display_path(result.file_path, root),
        "total": len(result.components),
        "components": [
            {"name": c.name, "line": c.line, "props": list(c.props)}
            for c in result.components
        ],
    }
