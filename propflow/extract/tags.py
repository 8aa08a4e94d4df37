"""JSX tag and attribute helpers."""

from typing import Iterator, Optional

from tree_sitter import Node

from ..source.syntax import SyntaxModel

TAG_TYPES = ("jsx_opening_element", "jsx_self_closing_element")


def iter_tags(model: SyntaxModel) -> Iterator[Node]:
    """Yield opening and self-closing tags in document order."""
    yield from model.walk(types=TAG_TYPES)


def tag_name(tag: Node) -> str:
    """Tag name as written (``Button``, ``UI.Button``); "" for fragments."""
    return SyntaxModel.text_of(tag.child_by_field_name("name"))


def tag_attributes(tag: Node) -> list[Node]:
    """Attribute nodes of a tag in source order, spreads included."""
    return [c for c in tag.named_children if c.type in ("jsx_attribute", "jsx_expression")]


def is_spread_attribute(attr: Node) -> bool:
    """True for ``{...rest}`` attributes."""
    return attr.type == "jsx_expression" and any(
        c.type == "spread_element" for c in attr.named_children
    )


def attribute_name(attr: Node) -> Optional[str]:
    if attr.type != "jsx_attribute" or not attr.named_children:
        return None
    return SyntaxModel.text_of(attr.named_children[0])


def attribute_value(attr: Node) -> Optional[str]:
    """Value text of a ``jsx_attribute``.

    ``"true"`` for a bare attribute, the literal (quotes included) for a
    string, the unparsed inner expression for ``{...}``, and None for an
    empty expression container.
    """
    values = [c for c in attr.named_children[1:] if c.type != "comment"]
    if not values:
        return "true"
    value = values[0]
    if value.type == "jsx_expression":
        inner = [c for c in value.named_children if c.type != "comment"]
        if not inner:
            return None
        return SyntaxModel.text_of(inner[0])
    return SyntaxModel.text_of(value)
