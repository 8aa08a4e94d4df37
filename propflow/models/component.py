"""Component data models."""

from dataclasses import dataclass, field
from typing import Optional

# Reserved value reported when a tag forwards props through a spread attribute
SPREAD_SENTINEL = "{...spread}"


@dataclass(frozen=True)
class ComponentInfo:
    """A declared UI component and the props it accepts."""

    name: str
    file_path: str
    props: list[str] = field(default_factory=list)
    line: int = 0  # 1-based declaration line

    @property
    def location_str(self) -> str:
        """Return file:line string."""
        return f"{self.file_path}:{self.line}"


@dataclass(frozen=True)
class PropUsage:
    """A prop passed to a component tag."""

    line: int  # 1-based line of the attribute (or of the tag for spreads)
    value: Optional[str]  # "true", quoted literal, expression text, or SPREAD_SENTINEL

    @property
    def is_spread(self) -> bool:
        return self.value == SPREAD_SENTINEL


@dataclass(frozen=True)
class TagLocation:
    """A place in the workspace where a component tag appears."""

    file_path: str
    line: int  # 1-based

    @property
    def location_str(self) -> str:
        return f"{self.file_path}:{self.line}"
