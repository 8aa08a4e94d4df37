"""Prop lineage trace models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NodeKind(str, Enum):
    """Role of a hop in a lineage chain."""

    SOURCE = "SOURCE"
    USAGE = "USAGE"
    DEFINITION = "DEFINITION"


@dataclass(frozen=True)
class PropNode:
    """One hop in a lineage chain.

    Nodes are plain value records. A chain is an ordered tuple of them; no node
    refers to its neighbours.
    """

    component_name: str
    file_path: str
    prop_name: str
    line: int  # 1-based, 0 when the component could not be located
    kind: NodeKind
    value: Optional[str] = None  # Raw value text seen at this hop

    @property
    def location_str(self) -> str:
        """Return file:line string."""
        return f"{self.file_path}:{self.line}"


@dataclass(frozen=True)
class PropTrace:
    """Result of tracing a prop from its origin to the inspected component."""

    prop_name: str
    chain: tuple[PropNode, ...]
    is_complete: bool = True
    ambiguous: bool = False

    def __len__(self) -> int:
        return len(self.chain)

    @property
    def source(self) -> PropNode:
        """Origin of the value (first node)."""
        return self.chain[0]

    @property
    def definition(self) -> PropNode:
        """The inspected component (last node)."""
        return self.chain[-1]

    @property
    def depth(self) -> int:
        """Number of hops taken above the definition."""
        return len(self.chain) - 1
