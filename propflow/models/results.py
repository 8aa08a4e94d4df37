"""Query result types."""

from dataclasses import dataclass, field
from typing import Optional

from .component import ComponentInfo, PropUsage, TagLocation


@dataclass
class ComponentsResult:
    """Components declared in one file."""

    file_path: str
    components: list[ComponentInfo] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return len(self.components) > 0


@dataclass
class PropUsageResult:
    """Value a file passes for one prop of one component."""

    file_path: str
    component_name: str
    prop_name: str
    usage: Optional[PropUsage] = None

    @property
    def found(self) -> bool:
        return self.usage is not None


@dataclass
class TagUsagesResult:
    """Places in the workspace where a component tag appears."""

    component_name: str
    locations: list[TagLocation] = field(default_factory=list)

    @property
    def files(self) -> list[str]:
        """Distinct files, in result order."""
        return list(dict.fromkeys(loc.file_path for loc in self.locations))
