"""Output formatting module."""

from .json_formatter import print_json, to_json
from .console import print_components, print_tag_usages, print_usage
from .tree import components_to_dict, node_to_dict, print_trace_tree, trace_to_dict

__all__ = [
    "print_json",
    "to_json",
    "print_components",
    "print_tag_usages",
    "print_usage",
    "components_to_dict",
    "node_to_dict",
    "print_trace_tree",
    "trace_to_dict",
]
