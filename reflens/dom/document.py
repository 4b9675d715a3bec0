"""Document — the mirror of one page's element tree."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from reflens.dom.node import DomNode

logger = logging.getLogger(__name__)


class Document:
    """
    Python-side mirror of a page document, rebuilt from capture records.

    A capture looks like ``{"token": str, "url": str, "root": record}`` where
    each record is ``{"k", "tag", "attrs", "style", "rect", "props",
    "contents"}`` and ``contents`` interleaves child records with text runs.

    Records carrying a key seen in an earlier capture of the same document
    token update the existing DomNode in place, so callers holding a node keep
    a valid handle. Nodes missing from the newest capture are detached.
    """

    def __init__(self) -> None:
        self.token = ""
        self.url = ""
        self.root: DomNode | None = None
        self._by_key: dict[int, DomNode] = {}
        self._by_id: dict[str, DomNode] = {}
        self._labels_for: dict[str, list[DomNode]] = {}

    @classmethod
    def from_capture(cls, capture: dict[str, Any]) -> Document:
        doc = cls()
        doc.update(capture)
        return doc

    # ------------------------------------------------------------------
    # Capture application
    # ------------------------------------------------------------------

    def update(self, capture: dict[str, Any]) -> bool:
        """
        Apply a capture. Returns True when it belongs to a different document
        instance than the previous one (i.e. the page navigated).
        """
        token = str(capture.get("token", ""))
        new_document = token != self.token
        if new_document:
            self._detach_all()
            self.token = token
        self.url = str(capture.get("url", ""))

        previous = self._by_key
        self._by_key = {}
        self._by_id = {}
        self._labels_for = {}

        raw_root = capture.get("root")
        self.root = None
        if raw_root:
            self.root = self._build(raw_root, previous)

        for key, node in previous.items():
            if key not in self._by_key:
                node.connected = False
                node.parent = None

        logger.debug(
            "Applied capture of %s: %d elements (new document: %s)",
            self.url or "<unknown>", len(self._by_key), new_document,
        )
        return new_document

    def _build(self, raw_root: dict[str, Any], previous: dict[int, DomNode]) -> DomNode:
        root = self._materialize(raw_root, previous, parent=None)
        stack: list[tuple[Any, DomNode]] = [
            (item, root) for item in reversed(raw_root.get("contents") or [])
        ]
        while stack:
            item, parent = stack.pop()
            if isinstance(item, str):
                parent.contents.append(item)
                continue
            node = self._materialize(item, previous, parent=parent)
            parent.contents.append(node)
            stack.extend((child, node) for child in reversed(item.get("contents") or []))
        return root

    def _materialize(
        self, raw: dict[str, Any], previous: dict[int, DomNode], parent: DomNode | None
    ) -> DomNode:
        key = int(raw["k"])
        node = previous.get(key)
        if node is None:
            node = DomNode(key=key, tag=str(raw.get("tag", "")).lower())
        node.apply_capture(raw)
        node.contents = []
        node.parent = parent
        node.document = self
        node.connected = True
        self._by_key[key] = node

        node_id = node.id
        if node_id:
            self._by_id.setdefault(node_id, node)
        if node.tag == "label":
            target = node.get_attribute("for")
            if target:
                self._labels_for.setdefault(target, []).append(node)
        return node

    def _detach_all(self) -> None:
        for node in self._by_key.values():
            node.connected = False
            node.parent = None
        self._by_key = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def body(self) -> DomNode | None:
        if self.root is None:
            return None
        if self.root.tag == "body":
            return self.root
        for child in self.root.children:
            if child.tag == "body":
                return child
        return self.root

    def node_by_key(self, key: int) -> DomNode | None:
        return self._by_key.get(key)

    def get_element_by_id(self, element_id: str) -> DomNode | None:
        return self._by_id.get(element_id)

    def labels_for(self, element_id: str) -> list[DomNode]:
        """``<label for=element_id>`` elements in document order."""
        return list(self._labels_for.get(element_id, ()))

    def iter_elements(self) -> Iterator[DomNode]:
        """Every element in document order, starting at the root."""
        if self.root is None:
            return
        yield self.root
        yield from self.root.iter_descendants()

    def __len__(self) -> int:
        return len(self._by_key)
