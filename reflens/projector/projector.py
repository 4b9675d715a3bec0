"""TreeProjector — builds the filtered, collapsed semantic tree of a subtree."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from reflens.core.types import Projection, SnapshotNode, SnapshotOptions
from reflens.dom.node import DomNode
from reflens.formatter.ref_registry import RefRegistry
from reflens.semantics.names import MAX_VALUE_NAME_LENGTH, accessible_name
from reflens.semantics.roles import is_interactive, resolve_role
from reflens.semantics.visibility import is_visible

_CHECKABLE_ROLES = frozenset({"checkbox", "radio", "switch"})
_TEXT_ROLES = frozenset({"textbox", "searchbox", "combobox"})
_HEADING_TAG = re.compile(r"^h(\d)$")


@dataclass
class _Frame:
    node: DomNode
    depth: int
    parent: _Frame | None
    expanded: bool = False
    collected: list[SnapshotNode] = field(default_factory=list)


class TreeProjector:
    """
    Walks a subtree depth-first and post-order, allocating a ref for every
    node that carries semantic weight and splicing the materialized
    descendants of elided nodes into their nearest materialized ancestor.

    Traversal uses an explicit stack so very deep documents cannot exhaust
    the interpreter's recursion limit. Refs are handed out children-first,
    in document order, so identical trees number identically.
    """

    def __init__(self, registry: RefRegistry) -> None:
        self._refs = registry

    def project(self, root: DomNode, options: SnapshotOptions) -> Projection:
        result = Projection()
        stack = [_Frame(root, 0, None)]
        while stack:
            frame = stack[-1]
            if not frame.expanded:
                if not self._admits(frame, options):
                    stack.pop()
                    continue
                frame.expanded = True
                stack.extend(
                    _Frame(child, frame.depth + 1, frame)
                    for child in reversed(frame.node.children)
                )
                continue

            stack.pop()
            projection = self._finish(frame, options)
            if frame.parent is None:
                result = projection
            else:
                frame.parent.collected.extend(projection.nodes)
        return result

    @staticmethod
    def _admits(frame: _Frame, options: SnapshotOptions) -> bool:
        if not is_visible(frame.node):
            return False
        return options.depth is None or frame.depth <= options.depth

    def _finish(self, frame: _Frame, options: SnapshotOptions) -> Projection:
        node = frame.node
        children = frame.collected
        role = resolve_role(node)
        name = accessible_name(node)
        interactive = is_interactive(node, role)

        if options.interactive and not interactive and not role:
            return Projection.promote(children)
        if options.compact and not role and not name and not interactive:
            return Projection.promote(children)
        if role or name or interactive or children:
            return Projection.materialized(self._materialize(node, role, name, children))
        return Projection.promote(children)

    def _materialize(
        self,
        node: DomNode,
        role: str | None,
        name: str,
        children: list[SnapshotNode],
    ) -> SnapshotNode:
        snap = SnapshotNode(ref=self._refs.allocate(node), role=role, name=name)

        if role == "heading":
            snap.level = _heading_level(node)

        if role in _CHECKABLE_ROLES:
            snap.checked = node.checked or node.get_attribute("aria-checked") == "true"

        if role in _TEXT_ROLES:
            if node.value:
                snap.value = node.value[:MAX_VALUE_NAME_LENGTH]
            snap.placeholder = node.get_attribute("placeholder") or ""

        snap.disabled = node.disabled or node.get_attribute("aria-disabled") == "true"
        snap.required = node.required or node.get_attribute("aria-required") == "true"
        snap.children = list(children)
        return snap


def _heading_level(node: DomNode) -> int | None:
    raw = node.get_attribute("aria-level")
    if not raw:
        match = _HEADING_TAG.match(node.tag)
        raw = match.group(1) if match else None
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
