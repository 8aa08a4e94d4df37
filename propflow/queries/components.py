"""Component listing query."""

from ..models import ComponentsResult
from .base import Query


class ComponentsQuery(Query[ComponentsResult]):
    """List the components declared in a file and the props each accepts."""

    def execute(self, file_path: str) -> ComponentsResult:
        """Execute component listing.

        Args:
            file_path: File to inspect (relative to the workspace root or absolute).

        Returns:
            ComponentsResult; empty when the file does not parse cleanly.
        """
        path = self.workspace.normalize(file_path)
        return ComponentsResult(file_path=path, components=self.workspace.list_components(path))
