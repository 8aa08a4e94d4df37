"""Component discovery and prop extraction.

A top-level declaration is a component when its name starts with an uppercase
letter and it is one of:

- a function declaration (``function Button(...)``, exported or not)
- a variable bound to an arrow function or function expression
- such a function wrapped in exactly one ``memo`` / ``forwardRef`` /
  ``observer`` / ``connect`` call, bare or namespace-qualified (``React.memo``)

Props are resolved by the first rule that yields anything:

1. names destructured from the first parameter
2. members of an inline object type on that parameter, or on the type
   argument of the declaration's annotation (``React.FC<{...}>``) or of the
   wrapper call (``forwardRef<Ref, {...}>``)
3. the named type referenced there, resolved through TypeResolver
4. a ``<ComponentName>Props`` interface or alias declared in the same file
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from tree_sitter import Node

from ..models import ComponentInfo
from ..source.syntax import SyntaxModel
from .types import TypeResolver, dedupe, member_name, object_members, simple_type_name, type_arguments

logger = logging.getLogger(__name__)

COMPONENT_NAME = re.compile(r"^[A-Z]")

RECOGNIZED_WRAPPERS = {"memo", "forwardRef", "observer", "connect"}

# "function" is the name older grammars give function expressions
FUNCTION_VALUE_TYPES = ("arrow_function", "function_expression", "function")
FUNCTION_DECLARATION_TYPES = ("function_declaration", "generator_function_declaration")
VARIABLE_STATEMENT_TYPES = ("lexical_declaration", "variable_declaration")
PARAMETER_TYPES = ("required_parameter", "optional_parameter", "identifier", "object_pattern", "assignment_pattern")


@dataclass(frozen=True)
class Candidate:
    """A declaration that looks like a component."""

    name: str
    line: int
    function: Node  # arrow function, function expression, or function declaration
    annotation: Optional[Node] = None  # type annotation on the variable, if any
    wrapper: Optional[str] = None  # recognised HOC name
    wrapper_type_args: tuple[Node, ...] = ()


def _is_function_value(node: Optional[Node]) -> bool:
    return node is not None and node.is_named and node.type in FUNCTION_VALUE_TYPES


def _wrapper_name(callee: Optional[Node]) -> Optional[str]:
    if callee is None:
        return None
    if callee.type == "identifier":
        name = SyntaxModel.text_of(callee)
    elif callee.type == "member_expression":
        name = simple_type_name(callee)
    else:
        return None
    return name if name in RECOGNIZED_WRAPPERS else None


def _function_keyword_line(decl: Node) -> int:
    for child in decl.children:
        if child.type == "function" and not child.is_named:
            return SyntaxModel.line_of(child)
    return SyntaxModel.line_of(decl)


def _unwrap_export(stmt: Node) -> Optional[Node]:
    if stmt.type != "export_statement":
        return stmt
    decl = stmt.child_by_field_name("declaration")
    if decl is not None:
        return decl
    for child in stmt.named_children:
        if child.type in FUNCTION_DECLARATION_TYPES or child.type in VARIABLE_STATEMENT_TYPES:
            return child
    return None


def _variable_candidate(statement: Node, declarator: Node) -> Optional[Candidate]:
    name_node = declarator.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
        return None
    name = SyntaxModel.text_of(name_node)
    if not COMPONENT_NAME.match(name):
        return None

    value = declarator.child_by_field_name("value")
    annotation = declarator.child_by_field_name("type")
    line = SyntaxModel.line_of(statement)

    if _is_function_value(value):
        return Candidate(name=name, line=line, function=value, annotation=annotation)

    if value is not None and value.type == "call_expression":
        wrapper = _wrapper_name(value.child_by_field_name("function"))
        args = value.child_by_field_name("arguments")
        if wrapper is None or args is None:
            return None
        real_args = [a for a in args.named_children if a.type != "comment"]
        if not real_args or not _is_function_value(real_args[0]):
            return None
        type_args = value.child_by_field_name("type_arguments")
        return Candidate(
            name=name,
            line=line,
            function=real_args[0],
            annotation=annotation,
            wrapper=wrapper,
            wrapper_type_args=tuple(
                c for c in (type_args.named_children if type_args is not None else []) if c.type != "comment"
            ),
        )
    return None


def find_candidates(model: SyntaxModel) -> Iterator[Candidate]:
    """Yield component candidates among top-level declarations, in source order."""
    for stmt in model.root.named_children:
        decl = _unwrap_export(stmt)
        if decl is None:
            continue

        if decl.type in FUNCTION_DECLARATION_TYPES:
            name = SyntaxModel.text_of(decl.child_by_field_name("name"))
            if name and COMPONENT_NAME.match(name):
                yield Candidate(name=name, line=_function_keyword_line(decl), function=decl)

        elif decl.type in VARIABLE_STATEMENT_TYPES:
            for declarator in decl.named_children:
                if declarator.type != "variable_declarator":
                    continue
                candidate = _variable_candidate(decl, declarator)
                if candidate is not None:
                    yield candidate


def first_parameter(function: Node) -> Optional[Node]:
    """First formal parameter of a function-like node."""
    single = function.child_by_field_name("parameter")
    if single is not None:
        return single
    params = function.child_by_field_name("parameters")
    if params is None:
        return None
    for child in params.named_children:
        if child.type in PARAMETER_TYPES:
            return child
    return None


def destructured_names(pattern: Optional[Node]) -> list[str]:
    """Prop names bound by an object destructuring pattern.

    ``{label: text}`` contributes ``label``; ``...rest`` contributes ``rest``.
    """
    if pattern is None or pattern.type != "object_pattern":
        return []
    names = []
    for child in pattern.named_children:
        if child.type == "shorthand_property_identifier_pattern":
            names.append(SyntaxModel.text_of(child))
        elif child.type == "pair_pattern":
            name = member_name(child)
            if name:
                names.append(name)
        elif child.type == "object_assignment_pattern":
            left = child.child_by_field_name("left")
            if left is not None and left.type == "shorthand_property_identifier_pattern":
                names.append(SyntaxModel.text_of(left))
        elif child.type == "rest_pattern":
            inner = [c for c in child.named_children if c.type == "identifier"]
            if inner:
                names.append(SyntaxModel.text_of(inner[0]))
    return dedupe(names)


def _parameter_parts(param: Optional[Node]) -> tuple[Optional[Node], Optional[Node]]:
    """Split a parameter into (binding pattern, type node)."""
    if param is None:
        return None, None
    if param.type in ("required_parameter", "optional_parameter"):
        pattern = param.child_by_field_name("pattern")
        annotation = param.child_by_field_name("type")
        type_node = None
        if annotation is not None:
            inner = [c for c in annotation.named_children if c.type != "comment"]
            type_node = inner[0] if inner else None
        return pattern, type_node
    if param.type == "assignment_pattern":
        return param.child_by_field_name("left"), None
    return param, None


def _type_sources(candidate: Candidate, param_type: Optional[Node]) -> list[Node]:
    """Type nodes that may describe the props, most specific first."""
    sources = []
    if param_type is not None:
        sources.append(param_type)

    if candidate.annotation is not None:
        inner = [c for c in candidate.annotation.named_children if c.type != "comment"]
        if inner and inner[0].type == "generic_type":
            args = type_arguments(inner[0])
            if args:
                sources.append(args[0])

    if candidate.wrapper_type_args:
        # forwardRef<RefType, Props>; the other wrappers take Props first
        index = 1 if candidate.wrapper == "forwardRef" else 0
        if len(candidate.wrapper_type_args) > index:
            sources.append(candidate.wrapper_type_args[index])
    return sources


def resolve_candidate_props(candidate: Candidate, resolver: TypeResolver) -> list[str]:
    pattern, param_type = _parameter_parts(first_parameter(candidate.function))

    names = destructured_names(pattern)
    if names:
        return names

    sources = _type_sources(candidate, param_type)
    for source in sources:
        if source.type == "object_type":
            names = object_members(source)
            if names:
                return names

    for source in sources:
        if source.type != "object_type":
            names = resolver.resolve_node(source)
            if names:
                return names

    names = resolver.resolve_name(f"{candidate.name}Props")
    if names:
        logger.debug(f"  Found {len(names)} props from {candidate.name}Props: {', '.join(names)}")
    return names


def list_components(model: SyntaxModel) -> list[ComponentInfo]:
    """List the components declared in a file, in source order.

    A file with syntax errors yields no components.
    """
    if model.has_errors:
        logger.debug(f"Skipping {model.path}: file does not parse cleanly")
        return []

    resolver = TypeResolver(model)
    components = []
    for candidate in find_candidates(model):
        components.append(
            ComponentInfo(
                name=candidate.name,
                file_path=model.path,
                props=resolve_candidate_props(candidate, resolver),
                line=candidate.line,
            )
        )
    return components


def extract_props(model: SyntaxModel, component_name: str) -> list[str]:
    """Props of one named component, or [] when it is not declared in the file."""
    for component in list_components(model):
        if component.name == component_name:
            return list(component.props)
    return []


def component_at_line(components: list[ComponentInfo], line: int) -> Optional[ComponentInfo]:
    """Component whose declaration is the closest one at or above line."""
    closest = None
    for component in components:
        if component.line <= line and (closest is None or component.line > closest.line):
            closest = component
    return closest
