"""Query classes for PropFlow."""

from .base import Query
from .components import ComponentsQuery
from .trace import TraceQuery
from .usage import PropUsageQuery, TagUsagesQuery

__all__ = [
    "Query",
    "ComponentsQuery",
    "PropUsageQuery",
    "TagUsagesQuery",
    "TraceQuery",
]
