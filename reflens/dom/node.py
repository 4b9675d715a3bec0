"""Mirror of a single live element, as captured from the page."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from reflens.dom.document import Document


class Capability(str, Enum):
    """What kind of control an element is, decided once from tag and type."""

    TEXT_ENTRY = "text_entry"
    CHECKABLE = "checkable"
    SELECTABLE = "selectable"
    FILE_INPUT = "file_input"
    VALUED = "valued"  # carries a value but is not typed into
    NONE = "none"


_TEXT_INPUT_TYPES = frozenset({
    "text", "email", "password", "search", "tel", "url", "number",
    "date", "datetime-local", "month", "time", "week",
})

_VALUED_TAGS = frozenset({"button", "option", "output", "progress", "meter"})


def classify(tag: str, input_type: str | None) -> Capability:
    if tag == "textarea":
        return Capability.TEXT_ENTRY
    if tag == "select":
        return Capability.SELECTABLE
    if tag == "input":
        t = (input_type or "text").lower()
        if t in ("checkbox", "radio"):
            return Capability.CHECKABLE
        if t == "file":
            return Capability.FILE_INPUT
        if t in _TEXT_INPUT_TYPES:
            return Capability.TEXT_ENTRY
        return Capability.VALUED
    if tag in _VALUED_TAGS:
        return Capability.VALUED
    return Capability.NONE


@dataclass(frozen=True)
class ComputedStyle:
    display: str = "block"
    visibility: str = "visible"
    opacity: str = "1"


@dataclass(frozen=True)
class Rect:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(eq=False)
class DomNode:
    """
    One element of the mirror.

    Identity is the Python object: the owning Document hands back the same
    DomNode for the same page element across captures, and flips
    ``connected`` off once the element is gone from the page.
    """

    key: int
    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    contents: list[DomNode | str] = field(default_factory=list)
    style: ComputedStyle = field(default_factory=ComputedStyle)
    rect: Rect = field(default_factory=Rect)
    value: str | None = None  # IDL value, None when the element has none
    checked: bool = False
    disabled: bool = False
    required: bool = False
    multiple: bool = False
    content_editable: bool = False
    has_click_handler: bool = False
    input_type: str | None = None  # IDL .type
    parent: DomNode | None = field(default=None, repr=False)
    document: Document | None = field(default=None, repr=False)
    connected: bool = True
    _capability: Capability | None = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def apply_capture(self, raw: dict[str, Any]) -> None:
        """Overwrite this node's own state from one capture record."""
        self.tag = str(raw.get("tag", self.tag)).lower()
        self.attributes = {str(k): str(v) for k, v in (raw.get("attrs") or {}).items()}

        style = raw.get("style") or {}
        self.style = ComputedStyle(
            display=str(style.get("display", "block")),
            visibility=str(style.get("visibility", "visible")),
            opacity=str(style.get("opacity", "1")),
        )
        rect = raw.get("rect") or {}
        self.rect = Rect(
            x=float(rect.get("x", 0) or 0),
            y=float(rect.get("y", 0) or 0),
            width=float(rect.get("width", 0) or 0),
            height=float(rect.get("height", 0) or 0),
        )

        props = raw.get("props") or {}
        value = props.get("value")
        self.value = None if value is None else str(value)
        self.checked = bool(props.get("checked", False))
        self.disabled = bool(props.get("disabled", False))
        self.required = bool(props.get("required", False))
        self.multiple = bool(props.get("multiple", False))
        self.content_editable = bool(props.get("editable", False))
        self.has_click_handler = bool(props.get("onclick", False))
        input_type = props.get("type")
        self.input_type = None if input_type is None else str(input_type)
        self._capability = None

    # ------------------------------------------------------------------
    # Tree access
    # ------------------------------------------------------------------

    @property
    def children(self) -> list[DomNode]:
        return [c for c in self.contents if isinstance(c, DomNode)]

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        stack: list[DomNode | str] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            else:
                stack.extend(reversed(item.contents))
        return "".join(parts)

    @property
    def is_connected(self) -> bool:
        return self.connected

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    def closest(self, tag: str) -> DomNode | None:
        """Nearest inclusive ancestor with the given tag."""
        node: DomNode | None = self
        while node is not None:
            if node.tag == tag:
                return node
            node = node.parent
        return None

    def iter_descendants(self) -> Iterator[DomNode]:
        """Element descendants in document order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def contains(self, other: DomNode) -> bool:
        node: DomNode | None = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    # ------------------------------------------------------------------
    # Control classification
    # ------------------------------------------------------------------

    @property
    def control_type(self) -> str | None:
        """IDL type, falling back to the type attribute."""
        control_type = self.input_type or self.attributes.get("type")
        return control_type.lower() if control_type else None

    @property
    def capability(self) -> Capability:
        if self._capability is None:
            self._capability = classify(self.tag, self.control_type)
        return self._capability

    @property
    def value_bearing(self) -> bool:
        return self.capability is not Capability.NONE

    def describe(self) -> dict[str, Any]:
        """Short summary used by query-style results."""
        return {
            "tagName": self.tag,
            "id": self.id or None,
            "className": self.attributes.get("class") or None,
        }
