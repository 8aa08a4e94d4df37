"""Prop usage queries."""

from typing import Optional

from ..models import PropUsageResult, TagUsagesResult
from .base import Query


class PropUsageQuery(Query[PropUsageResult]):
    """Find the value a file passes for a prop on a component tag."""

    def execute(
        self,
        file_path: str,
        component_name: str,
        prop_name: str,
        near_line: Optional[int] = None,
    ) -> PropUsageResult:
        if not component_name or not prop_name:
            raise ValueError("Component and prop names must not be empty")
        path = self.workspace.normalize(file_path)
        usage = self.workspace.find_prop_usage(path, component_name, prop_name, near_line)
        return PropUsageResult(
            file_path=path,
            component_name=component_name,
            prop_name=prop_name,
            usage=usage,
        )


class TagUsagesQuery(Query[TagUsagesResult]):
    """Find every place a component tag is rendered."""

    def execute(self, component_name: str) -> TagUsagesResult:
        if not component_name:
            raise ValueError("Component name must not be empty")
        locations = self.workspace.find_tag_usages(component_name)
        return TagUsagesResult(component_name=component_name, locations=locations)
