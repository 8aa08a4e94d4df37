"""Prop lineage trace query.

Starting from a component and one of its props, repeatedly asks "who renders
this component, and what do they pass for the prop?" until the value is a
literal, something computed locally, or nobody renders the component.

Each hop runs a small state machine::

    SEARCHING  -> find tag usages of the current component
    RESOLVING  -> try each usage in search order
    ADVANCED   -> the first usage that resolves becomes the next hop
    EXHAUSTED  -> no usage resolves; the current hop is the source

The chain is collected from the inspected component upwards, then reversed so
it reads from the origin of the value to the inspected component.
"""

import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from ..errors import TraceCancelled, TraceTimeout
from ..extract import component_at_line, list_components
from ..models import SPREAD_SENTINEL, NodeKind, PropNode, PropTrace, PropUsage, TagLocation
from ..source.syntax import SyntaxModel
from .base import Query

logger = logging.getLogger(__name__)

_QUOTED = re.compile(r"""^(?:"[^"]*"|'[^']*'|`[^`]*`)$""", re.DOTALL)
_INTEGER = re.compile(r"^-?\d+$")
_PROPS_ACCESS = re.compile(r"^props\.([A-Za-z_$][\w$]*)$")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_KEYWORD_LITERALS = {"true", "false", "null", "undefined"}


class CancelToken(Protocol):
    """Anything with ``is_set()``, such as ``threading.Event``."""

    def is_set(self) -> bool:
        ...


class HopState(str, Enum):
    SEARCHING = "SEARCHING"
    RESOLVING = "RESOLVING"
    ADVANCED = "ADVANCED"
    EXHAUSTED = "EXHAUSTED"


class ValueKind(str, Enum):
    """How a passed value affects the trace."""

    LITERAL = "literal"  # ends the trace at this hop
    FORWARDED = "forwarded"  # comes from the parent's own props or scope
    SPREAD = "spread"  # forwarded through a spread attribute
    COMPUTED = "computed"  # any other expression, ends the trace


def classify_value(value: Optional[str]) -> ValueKind:
    """Classify the raw value text of an attribute."""
    if value is None:
        return ValueKind.LITERAL
    value = value.strip()
    if value == SPREAD_SENTINEL:
        return ValueKind.SPREAD
    if value in _KEYWORD_LITERALS or _INTEGER.match(value):
        return ValueKind.LITERAL
    if _QUOTED.match(value) and "${" not in value:
        return ValueKind.LITERAL
    if _PROPS_ACCESS.match(value) or _IDENTIFIER.match(value):
        return ValueKind.FORWARDED
    return ValueKind.COMPUTED


def next_prop_name(value: str) -> str:
    """Prop name to trace one level up for a forwarded value."""
    value = value.strip()
    match = _PROPS_ACCESS.match(value)
    if match:
        return match.group(1)
    return value


@dataclass(frozen=True)
class Hop:
    """A resolved step, before final classification."""

    component_name: str
    file_path: str
    prop_name: str
    line: int
    value: Optional[str] = None
    terminal: bool = False


class _Budget:
    """Cancellation and wall-clock checks."""

    def __init__(self, timeout_ms: Optional[int], cancel: Optional[CancelToken]):
        self.cancel = cancel
        self.timeout_ms = timeout_ms
        self.deadline = time.monotonic() + timeout_ms / 1000.0 if timeout_ms else None

    def check(self, partial):
        """Raise when the trace must stop; partial() builds the chain so far."""
        if self.cancel is not None and self.cancel.is_set():
            raise TraceCancelled("Trace cancelled", partial=partial())
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise TraceTimeout(f"Trace exceeded {self.timeout_ms} ms", partial=partial())


def build_trace(prop_name: str, hops: list[Hop], is_complete: bool, ambiguous: bool) -> PropTrace:
    """Turn hops (inspected component first) into a PropTrace.

    The order is reversed to origin first, then the first node is labelled
    SOURCE, the last DEFINITION and everything between USAGE.
    """
    ordered = list(reversed(hops))
    last = len(ordered) - 1
    chain = []
    for i, hop in enumerate(ordered):
        if i == 0:
            kind = NodeKind.SOURCE
        elif i == last:
            kind = NodeKind.DEFINITION
        else:
            kind = NodeKind.USAGE
        chain.append(
            PropNode(
                component_name=hop.component_name,
                file_path=hop.file_path,
                prop_name=hop.prop_name,
                line=hop.line,
                kind=kind,
                value=hop.value,
            )
        )
    return PropTrace(prop_name=prop_name, chain=tuple(chain), is_complete=is_complete, ambiguous=ambiguous)


class TraceQuery(Query[PropTrace]):
    """Trace where a prop's value comes from."""

    def execute(
        self,
        file_path: str,
        component_name: str,
        prop_name: str,
        max_depth: Optional[int] = None,
        timeout_ms: Optional[int] = None,
        cancel: Optional[CancelToken] = None,
        text: Optional[str] = None,
    ) -> PropTrace:
        """Execute a lineage trace.

        Args:
            file_path: File declaring the component.
            component_name: Component whose prop is inspected.
            prop_name: Prop to trace.
            max_depth: Maximum hops above the component (config default).
            timeout_ms: Wall-clock budget in ms (config default, 0 disables).
            cancel: Optional token checked between hops and candidates.
            text: Unsaved content of file_path, used instead of the disk file.

        Returns:
            PropTrace from the origin of the value to the component.

        Raises:
            ValueError: If a name is empty or max_depth is below 1.
            FileNotFoundError: If file_path does not exist and no text is given.
            TraceTimeout: If the budget runs out (``partial`` holds the chain so far).
            TraceCancelled: If cancel is set (``partial`` holds the chain so far).
        """
        if not component_name or not prop_name:
            raise ValueError("Component and prop names must not be empty")
        max_depth = self.config.max_trace_depth if max_depth is None else max_depth
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        timeout_ms = self.config.trace_timeout if timeout_ms is None else timeout_ms
        budget = _Budget(timeout_ms, cancel)

        path = self.workspace.normalize(file_path)
        with self.workspace.overlaid(path, text) as overlaid:
            model = self.workspace.model(path, None if overlaid else text)
            return self._trace(path, model, component_name, prop_name, max_depth, budget)

    def _trace(
        self, path: str, model: SyntaxModel, component_name: str, prop_name: str, max_depth: int, budget: _Budget
    ) -> PropTrace:
        definition_line = next((c.line for c in list_components(model) if c.name == component_name), 0)
        if definition_line == 0:
            logger.debug(f"{component_name} is not declared in {path}")

        logger.debug(f"Tracing {component_name}.{prop_name} from {path} (max depth {max_depth})")
        hops = [Hop(component_name=component_name, file_path=path, prop_name=prop_name, line=definition_line)]
        visited: set[tuple[str, int]] = set()
        ambiguous = False

        def partial() -> PropTrace:
            return build_trace(prop_name, hops, is_complete=False, ambiguous=ambiguous)

        is_complete = False
        for depth in range(1, max_depth + 1):
            budget.check(partial)
            state, hop = self._advance(hops[-1], visited, budget, partial)
            logger.debug(f"  Hop {depth}: {state.value}")
            if state == HopState.EXHAUSTED:
                is_complete = True
                break
            hops.append(hop)
            if hop.value == SPREAD_SENTINEL:
                ambiguous = True
            if hop.terminal:
                is_complete = True
                break

        trace = build_trace(prop_name, hops, is_complete=is_complete, ambiguous=ambiguous)
        if not is_complete:
            logger.debug(f"Trace for {component_name}.{prop_name} stopped at depth {max_depth}")
        return trace

    def _advance(self, current: Hop, visited: set, budget: _Budget, partial) -> tuple[HopState, Optional[Hop]]:
        """Run one hop: search usages of current, return the next hop if any."""
        logger.debug(f"  {HopState.SEARCHING.value} <{current.component_name}>")
        candidates = self.workspace.find_tag_usages(current.component_name)
        logger.debug(f"  {HopState.RESOLVING.value} {len(candidates)} candidate(s) for {current.prop_name}")
        for candidate in candidates:
            budget.check(partial)
            if candidate.file_path == current.file_path:
                continue
            key = (candidate.file_path, candidate.line)
            if key in visited:
                logger.debug(f"  Already visited {candidate.location_str}")
                continue

            hop = self._resolve(current, candidate)
            if hop is not None:
                visited.add(key)
                return HopState.ADVANCED, hop

        return HopState.EXHAUSTED, None

    def _resolve(self, current: Hop, candidate: TagLocation) -> Optional[Hop]:
        """Resolve one candidate location into a hop, or None."""
        try:
            usage = self.workspace.find_prop_usage(
                candidate.file_path, current.component_name, current.prop_name, near_line=candidate.line
            )
            components = self.workspace.list_components(candidate.file_path)
        except OSError as e:
            logger.debug(f"  Skipping {candidate.location_str}: {e}")
            return None

        if usage is None:
            logger.debug(f"  No {current.prop_name} passed at {candidate.location_str}")
            return None

        owner = component_at_line(components, usage.line)
        if owner is None:
            logger.debug(f"  No enclosing component for line {usage.line} of {candidate.file_path}")
            return None

        return _hop_for_usage(owner.name, candidate.file_path, current.prop_name, usage)


def _hop_for_usage(owner: str, file_path: str, prop_name: str, usage: PropUsage) -> Hop:
    kind = classify_value(usage.value)
    if kind == ValueKind.LITERAL:
        return Hop(owner, file_path, prop_name, usage.line, usage.value, terminal=True)
    if kind == ValueKind.SPREAD:
        return Hop(owner, file_path, SPREAD_SENTINEL, usage.line, usage.value)
    if kind == ValueKind.FORWARDED:
        return Hop(owner, file_path, next_prop_name(usage.value), usage.line, usage.value)
    return Hop(owner, file_path, usage.value.strip(), usage.line, usage.value, terminal=True)
