"""Component and prop extraction from parsed files."""

from .components import component_at_line, extract_props, list_components
from .types import TypeResolver
from .usages import find_prop_usage, find_tags

__all__ = [
    "list_components",
    "extract_props",
    "component_at_line",
    "TypeResolver",
    "find_prop_usage",
    "find_tags",
]
