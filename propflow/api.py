"""Entry points for callers that do not manage a Workspace themselves."""

import os
from typing import Optional

from .config import PropFlowConfig
from .models import ComponentInfo, PropTrace
from .queries import ComponentsQuery, TraceQuery
from .source.workspace import Workspace


def _workspace(root: Optional[str], config: Optional[PropFlowConfig]) -> Workspace:
    return Workspace(root if root is not None else os.getcwd(), config=config)


def build_prop_chain(
    file_path: str,
    component_name: str,
    prop_name: str,
    root: Optional[str] = None,
    config: Optional[PropFlowConfig] = None,
    workspace: Optional[Workspace] = None,
) -> PropTrace:
    """Trace prop_name of component_name back to where its value comes from.

    Usages are searched under root (default: the current directory). Pass a
    long-lived workspace instead to share its parse cache across calls.
    """
    if workspace is None:
        workspace = _workspace(root, config)
    return TraceQuery(workspace).execute(file_path, component_name, prop_name)


def list_components(
    file_path: str,
    text: Optional[str] = None,
    workspace: Optional[Workspace] = None,
) -> list[ComponentInfo]:
    """Components declared in a file, in source order.

    Args:
        file_path: File to inspect.
        text: Unsaved content to parse instead of the file on disk.
        workspace: Workspace whose cache to use.
    """
    if workspace is None:
        workspace = _workspace(os.path.dirname(os.path.abspath(file_path)), None)
    if text is not None:
        return workspace.list_components(file_path, text)
    return ComponentsQuery(workspace).execute(file_path).components
