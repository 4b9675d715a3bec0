"""Shared types and dataclasses for reflens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reflens.core.errors import InvalidParamsError


def int_param(name: str, value: Any) -> int:
    """Coerce a command parameter to int, or raise INVALID_PARAMS."""
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParamsError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class SnapshotOptions:
    """Caller-supplied knobs for one snapshot call."""

    interactive: bool = False  # keep only interactive or role-bearing nodes
    compact: bool = False  # drop nameless, roleless, inert wrappers
    depth: int | None = None  # max tree depth below the projection root
    scope: str | None = None  # structural selector for the projection root

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> SnapshotOptions:
        depth = params.get("depth")
        return cls(
            interactive=bool(params.get("interactive", False)),
            compact=bool(params.get("compact", False)),
            depth=int_param("depth", depth) if depth is not None else None,
            scope=params.get("scope") or None,
        )


@dataclass
class SnapshotNode:
    """A single materialized node of a projection."""

    ref: str  # @eN handle registered for the underlying element
    role: str | None = None
    name: str = ""
    level: int | None = None  # headings
    checked: bool | None = None  # checkbox / radio / switch
    disabled: bool = False
    required: bool = False
    value: str = ""  # text-like roles
    placeholder: str = ""  # text-like roles
    children: list[SnapshotNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ref": self.ref}
        if self.role:
            data["role"] = self.role
        if self.name:
            data["name"] = self.name
        if self.level is not None:
            data["level"] = self.level
        if self.checked is not None:
            data["checked"] = self.checked
        if self.disabled:
            data["disabled"] = True
        if self.required:
            data["required"] = True
        if self.value:
            data["value"] = self.value
        if self.placeholder:
            data["placeholder"] = self.placeholder
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass(frozen=True)
class Projection:
    """
    Result of projecting one subtree.

    Either a single materialized node, or zero-or-more descendants promoted
    because the subtree root itself was elided.
    """

    node: SnapshotNode | None = None
    promoted: tuple[SnapshotNode, ...] = ()

    @classmethod
    def materialized(cls, node: SnapshotNode) -> Projection:
        return cls(node=node)

    @classmethod
    def promote(cls, nodes: list[SnapshotNode]) -> Projection:
        return cls(promoted=tuple(nodes))

    @property
    def is_materialized(self) -> bool:
        return self.node is not None

    @property
    def is_empty(self) -> bool:
        return self.node is None and not self.promoted

    @property
    def nodes(self) -> list[SnapshotNode]:
        """Uniform list view: the single node, or the promoted siblings."""
        if self.node is not None:
            return [self.node]
        return list(self.promoted)

    def to_payload(self) -> dict[str, Any] | list[dict[str, Any]] | None:
        if self.node is not None:
            return self.node.to_dict()
        if not self.promoted:
            return None
        return [n.to_dict() for n in self.promoted]


@dataclass
class SnapshotResult:
    """What a snapshot command returns."""

    tree: Projection
    text: str  # rendered line format
    ref_count: int  # refs allocated in this epoch
    token_count: int = 0  # tokens in text
    truncated: bool = False  # text was cut to the session's token budget

    def to_dict(self) -> dict[str, Any]:
        return {
            "tree": self.tree.to_payload(),
            "text": self.text,
            "refCount": self.ref_count,
            "tokenCount": self.token_count,
            "truncated": self.truncated,
        }


@dataclass
class LocatorResult:
    """One selected match of a semantic query, plus the total match count."""

    ref: str
    count: int
    descriptor: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"ref": self.ref, **self.descriptor, "count": self.count}
