"""Data models for PropFlow."""

from .component import SPREAD_SENTINEL, ComponentInfo, PropUsage, TagLocation
from .results import ComponentsResult, PropUsageResult, TagUsagesResult
from .trace import NodeKind, PropNode, PropTrace

__all__ = [
    "SPREAD_SENTINEL",
    "ComponentInfo",
    "PropUsage",
    "TagLocation",
    "ComponentsResult",
    "PropUsageResult",
    "TagUsagesResult",
    "NodeKind",
    "PropNode",
    "PropTrace",
]
