"""Resolve TypeScript prop types to prop names.

Resolution is name based and file local: a referenced interface or type alias
is looked up among the declarations of the same file. Names that cannot be
found (imported types, library types) resolve to nothing.

Handled shapes:

- interfaces and type literals (property and method signatures)
- interface ``extends`` chains and repeated interface declarations
- intersections and unions; a union yields the props of every branch, which
  over-approximates the real set when a discriminant picks one branch
- aliases of aliases, parenthesized types, generic user types
- ``PropsWithChildren<T>`` / ``PropsWithRef<T>`` (inject ``children`` / ``ref``)
- ``RefAttributes<T>`` (``ref``), ``Partial`` / ``Required`` / ``Readonly``
  (transparent), ``Pick<T, K>`` and ``Omit<T, K>``
"""

import logging
from typing import Optional

from tree_sitter import Node

from ..source.syntax import SyntaxModel

logger = logging.getLogger(__name__)

# Generic wrappers that add one synthetic prop to their type argument
INJECTING_WRAPPERS = {
    "PropsWithChildren": "children",
    "PropsWithRef": "ref",
}
REF_ONLY_TYPES = {"RefAttributes"}
TRANSPARENT_WRAPPERS = {"Partial", "Required", "Readonly"}

MEMBER_TYPES = ("property_signature", "method_signature")
DECLARATION_TYPES = ("interface_declaration", "type_alias_declaration")


def dedupe(names: list[str]) -> list[str]:
    """Drop repeated names, keeping first occurrence order."""
    return list(dict.fromkeys(names))


def member_name(node: Node) -> Optional[str]:
    """Name of a property/method signature or pattern key (None if computed)."""
    name = node.child_by_field_name("name")
    if name is None:
        name = node.child_by_field_name("key")
    if name is None:
        return None
    if name.type == "computed_property_name":
        return None
    text = SyntaxModel.text_of(name)
    if name.type == "string":
        return text[1:-1]
    return text


def object_members(node: Node) -> list[str]:
    """Member names of an object type or interface body, in source order."""
    names = []
    for child in node.named_children:
        if child.type in MEMBER_TYPES:
            name = member_name(child)
            if name:
                names.append(name)
    return dedupe(names)


def simple_type_name(node: Optional[Node]) -> str:
    """Last segment of a (possibly namespace-qualified) type name."""
    if node is None:
        return ""
    if node.type in ("nested_type_identifier", "member_expression"):
        last = node.child_by_field_name("name")
        if last is None:
            last = node.child_by_field_name("property")
        if last is None and node.named_children:
            last = node.named_children[-1]
        return SyntaxModel.text_of(last)
    return SyntaxModel.text_of(node)


def type_arguments(generic: Node) -> list[Node]:
    args = generic.child_by_field_name("type_arguments")
    if args is None:
        args = next((c for c in generic.named_children if c.type == "type_arguments"), None)
    if args is None:
        return []
    return [c for c in args.named_children if c.type != "comment"]


def literal_keys(node: Node) -> list[str]:
    """String literals in a key type such as ``'a' | 'b'``."""
    stack = [node]
    keys = []
    while stack:
        current = stack.pop()
        if current.type == "string":
            keys.append(SyntaxModel.text_of(current)[1:-1])
            continue
        stack.extend(reversed(current.named_children))
    return keys


def collect_type_declarations(model: SyntaxModel) -> dict[str, list[Node]]:
    """Map type names to their interface / alias declarations, anywhere in the file."""
    declarations: dict[str, list[Node]] = {}
    for node in model.walk(types=DECLARATION_TYPES):
        name = SyntaxModel.text_of(node.child_by_field_name("name"))
        if name:
            declarations.setdefault(name, []).append(node)
    return declarations


class TypeResolver:
    """Resolves type names and type expressions of one file to prop names."""

    def __init__(self, model: SyntaxModel):
        self.model = model
        self.declarations = collect_type_declarations(model)

    def has_type(self, name: str) -> bool:
        return name in self.declarations

    def resolve_name(self, name: str, _stack: Optional[set[str]] = None) -> list[str]:
        """Props of a named interface or type alias."""
        stack = _stack if _stack is not None else set()
        if name in stack:
            return []
        declarations = self.declarations.get(name)
        if not declarations:
            logger.debug(f"  Unresolved type {name} in {self.model.path}")
            return []

        stack.add(name)
        try:
            props: list[str] = []
            for decl in declarations:
                if decl.type == "interface_declaration":
                    props.extend(self._interface_props(decl, stack))
                else:
                    props.extend(self.resolve_node(decl.child_by_field_name("value"), stack))
            return dedupe(props)
        finally:
            stack.discard(name)

    def resolve_node(self, node: Optional[Node], _stack: Optional[set[str]] = None) -> list[str]:
        """Props of a type expression."""
        if node is None:
            return []
        stack = _stack if _stack is not None else set()
        kind = node.type

        if kind in ("object_type", "interface_body"):
            return object_members(node)
        if kind in ("type_annotation", "parenthesized_type"):
            inner = [c for c in node.named_children if c.type != "comment"]
            return self.resolve_node(inner[0], stack) if inner else []
        if kind in ("type_identifier", "identifier", "nested_type_identifier", "member_expression"):
            return self.resolve_name(simple_type_name(node), stack)
        if kind in ("union_type", "intersection_type"):
            props: list[str] = []
            for branch in node.named_children:
                props.extend(self.resolve_node(branch, stack))
            return dedupe(props)
        if kind == "generic_type":
            return self._generic_props(node, stack)
        return []

    def _interface_props(self, decl: Node, stack: set[str]) -> list[str]:
        props: list[str] = []
        body = decl.child_by_field_name("body")
        if body is not None:
            props.extend(object_members(body))
        for child in decl.children:
            if child.type in ("extends_type_clause", "extends_clause"):
                for base in child.named_children:
                    props.extend(self.resolve_node(base, stack))
        return props

    def _generic_props(self, node: Node, stack: set[str]) -> list[str]:
        base = simple_type_name(node.child_by_field_name("name"))
        args = type_arguments(node)
        first = args[0] if args else None

        if base in INJECTING_WRAPPERS:
            return dedupe([INJECTING_WRAPPERS[base]] + self.resolve_node(first, stack))
        if base in REF_ONLY_TYPES:
            return ["ref"]
        if base in TRANSPARENT_WRAPPERS:
            return self.resolve_node(first, stack)
        if base == "Pick" and len(args) > 1:
            return dedupe(literal_keys(args[1]))
        if base == "Omit" and len(args) > 1:
            dropped = set(literal_keys(args[1]))
            return [p for p in self.resolve_node(first, stack) if p not in dropped]
        return self.resolve_name(base, stack)
