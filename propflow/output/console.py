"""Console output formatters using Rich."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..models import ComponentsResult, PropUsageResult, TagUsagesResult
from .json_formatter import print_json
from .paths import display_path
from .tree import components_to_dict

console = Console()


def print_components(result: ComponentsResult, as_json: bool = False, root: Optional[str] = None):
    """Print the components of a file and their props."""
    if as_json:
        print_json(components_to_dict(result, root))
        return

    path = escape(display_path(result.file_path, root))
    if not result.found:
        console.print(f"[dim]No components found in {path}[/dim]")
        return

    console.print(f"[bold]Components in {path}:[/bold]")
    for component in result.components:
        console.print(f"  [bold]{escape(component.name)}[/bold] [dim](line {component.line})[/dim]")
        if component.props:
            console.print(f"    props: {escape(', '.join(component.props))}")
        else:
            console.print("    [dim]no props resolved[/dim]")


def print_usage(result: PropUsageResult, as_json: bool = False, root: Optional[str] = None):
    """Print the value passed for one prop."""
    path = display_path(result.file_path, root)
    if as_json:
        print_json({
            "file": path,
            "component": result.component_name,
            "prop": result.prop_name,
            "line": result.usage.line if result.usage else None,
            "value": result.usage.value if result.usage else None,
            "spread": result.usage.is_spread if result.usage else False,
        })
        return

    if not result.found:
        console.print(
            f"[dim]No {escape(result.prop_name)} passed to <{escape(result.component_name)}> in {escape(path)}[/dim]"
        )
        return

    usage = result.usage
    label = f"<{escape(result.component_name)}> {escape(result.prop_name)} = {escape(str(usage.value))}"
    if usage.is_spread:
        label += " [yellow](spread, value unknown)[/yellow]"
    console.print(f"{label} [dim]({escape(path)}:{usage.line})[/dim]")


def print_tag_usages(result: TagUsagesResult, as_json: bool = False, root: Optional[str] = None):
    """Print tag usages grouped by file."""
    if as_json:
        print_json({
            "component": result.component_name,
            "total": len(result.locations),
            "usages": [
                {"file": display_path(loc.file_path, root), "line": loc.line}
                for loc in result.locations
            ],
        })
        return

    if not result.locations:
        console.print(f"[dim]No usages of <{escape(result.component_name)}> found[/dim]")
        return

    # Group by file
    by_file: dict[str, list[int]] = {}
    for loc in result.locations:
        by_file.setdefault(loc.file_path, []).append(loc.line)

    console.print(f"[bold]Usages of <{escape(result.component_name)}>:[/bold]")
    for file_path, lines in by_file.items():
        console.print(f"  {escape(display_path(file_path, root))}")
        console.print(f"    lines: {', '.join(str(n) for n in lines)}")
