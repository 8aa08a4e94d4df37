"""Find the value a tag passes for a prop."""

import logging
from typing import Optional

from tree_sitter import Node

from ..models import SPREAD_SENTINEL, PropUsage
from ..source.syntax import SyntaxModel
from .tags import attribute_name, attribute_value, is_spread_attribute, iter_tags, tag_attributes, tag_name

logger = logging.getLogger(__name__)


def find_tags(model: SyntaxModel, component_name: str) -> list[Node]:
    """Opening and self-closing tags named exactly component_name, in document order."""
    return [tag for tag in iter_tags(model) if tag_name(tag) == component_name]


def nearest_tag(tags: list[Node], line: int) -> Optional[Node]:
    """Tag closest to line; the earliest one wins a tie."""
    best = None
    best_distance = None
    for tag in tags:
        distance = abs(SyntaxModel.line_of(tag) - line)
        if best_distance is None or distance < best_distance:
            best, best_distance = tag, distance
    return best


def usage_in_tag(tag: Node, prop_name: str) -> Optional[PropUsage]:
    """Value passed for prop_name by one tag.

    An explicit attribute wins over a spread, wherever the spread sits.
    """
    has_spread = False
    for attr in tag_attributes(tag):
        if is_spread_attribute(attr):
            has_spread = True
        elif attribute_name(attr) == prop_name:
            return PropUsage(line=SyntaxModel.line_of(attr), value=attribute_value(attr))
    if has_spread:
        return PropUsage(line=SyntaxModel.line_of(tag), value=SPREAD_SENTINEL)
    return None


def find_prop_usage(
    model: SyntaxModel,
    component_name: str,
    prop_name: str,
    near_line: Optional[int] = None,
) -> Optional[PropUsage]:
    """Find what a file passes for prop_name on its component_name tags.

    Args:
        model: Parsed file to scan.
        component_name: Tag name to match exactly (``UI.Button`` included).
        prop_name: Attribute to look for.
        near_line: When given, only the tag nearest this line is inspected.

    Returns:
        The first matching PropUsage, a spread sentinel usage when a tag
        forwards props without naming this one, or None.
    """
    tags = find_tags(model, component_name)
    if near_line is not None:
        nearest = nearest_tag(tags, near_line)
        tags = [nearest] if nearest is not None else []

    for tag in tags:
        usage = usage_in_tag(tag, prop_name)
        if usage is not None:
            logger.debug(f"  {component_name}.{prop_name} = {usage.value} at {model.path}:{usage.line}")
            return usage
    return None
