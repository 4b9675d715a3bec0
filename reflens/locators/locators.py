"""LocatorEngine — ad-hoc semantic queries resolved against the live mirror."""

from __future__ import annotations

import logging
from typing import Any

from reflens.core.errors import ElementNotFoundError, IndexOutOfRangeError
from reflens.core.types import LocatorResult
from reflens.dom.document import Document
from reflens.dom.node import DomNode
from reflens.formatter.ref_registry import RefRegistry
from reflens.semantics.names import accessible_name
from reflens.semantics.roles import explicit_role, implicit_role, resolve_role
from reflens.semantics.visibility import is_visible

logger = logging.getLogger(__name__)

_LABELABLE_TAGS = ("input", "select", "textarea")
_TEXT_PREVIEW_LENGTH = 100


class LocatorEngine:
    """
    Answers find-by-role/text/label/placeholder queries.

    Every query is visibility-filtered and independent of any earlier
    snapshot. A successful call allocates exactly one ref, for the selected
    match only, and never clears the registry.
    """

    def __init__(self, document: Document, registry: RefRegistry) -> None:
        self._doc = document
        self._refs = registry

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_role(self, role: str, name: str | None = None, index: int = 0) -> LocatorResult:
        explicit = [
            el for el in self._doc.iter_elements()
            if explicit_role(el) == role and is_visible(el)
        ]
        implicit = [
            el for el in self._doc.iter_elements()
            if not el.has_attribute("role") and implicit_role(el) == role and is_visible(el)
        ]
        matches = explicit + implicit
        if name:
            needle = name.lower()
            matches = [el for el in matches if needle in accessible_name(el).lower()]

        described = f'role "{role}"' + (f' and name "{name}"' if name else "")
        element = self._select(matches, index, described)
        return self._result(element, len(matches), {
            "role": resolve_role(element),
            "name": accessible_name(element),
        })

    def find_by_text(self, text: str, exact: bool = False, index: int = 0) -> LocatorResult:
        needle = text.strip().lower() if exact else text.lower()

        def accepts(el: DomNode) -> bool:
            content = el.text_content.lower()
            return content.strip() == needle if exact else needle in content

        accepted: list[DomNode] = []
        body = self._doc.body
        if body is not None:
            stack = list(reversed(body.children))
            while stack:
                el = stack.pop()
                if not is_visible(el):
                    continue  # invisible subtrees are never searched
                if accepts(el):
                    accepted.append(el)
                stack.extend(reversed(el.children))

        # Leaf preference: drop any match that contains another match.
        accepted_ids = {id(el) for el in accepted}
        has_accepted_descendant: set[int] = set()
        for el in accepted:
            ancestor = el.parent
            while ancestor is not None and ancestor is not body:
                if id(ancestor) in has_accepted_descendant:
                    break
                if id(ancestor) in accepted_ids:
                    has_accepted_descendant.add(id(ancestor))
                ancestor = ancestor.parent
        matches = [el for el in accepted if id(el) not in has_accepted_descendant]

        element = self._select(matches, index, f'text "{text}"')
        return self._result(element, len(matches), {
            "tagName": element.tag,
            "text": element.text_content[:_TEXT_PREVIEW_LENGTH],
        })

    def find_by_label(self, label: str, index: int = 0) -> LocatorResult:
        needle = label.lower()
        matches: list[DomNode] = []
        seen: set[int] = set()

        def add(el: DomNode | None) -> None:
            if el is not None and id(el) not in seen and is_visible(el):
                seen.add(id(el))
                matches.append(el)

        # An empty query matches nothing.
        elements = list(self._doc.iter_elements()) if needle else []
        for el in elements:
            if el.tag == "label" and needle in el.text_content.lower():
                add(self._label_target(el))
        for el in elements:
            if needle in (el.get_attribute("aria-label") or "").lower():
                add(el)
        for el in elements:
            if needle in (el.get_attribute("placeholder") or "").lower():
                add(el)

        element = self._select(matches, index, f'label "{label}"')
        return self._result(element, len(matches), {
            "tagName": element.tag,
            "type": element.input_type or None,
        })

    def find_by_placeholder(self, placeholder: str, index: int = 0) -> LocatorResult:
        needle = placeholder.lower()
        matches = [
            el for el in self._doc.iter_elements()
            if needle
            and el.has_attribute("placeholder")
            and needle in (el.get_attribute("placeholder") or "").lower()
            and is_visible(el)
        ]

        element = self._select(matches, index, f'placeholder "{placeholder}"')
        return self._result(element, len(matches), {
            "tagName": element.tag,
            "type": element.input_type or None,
            "placeholder": element.get_attribute("placeholder"),
        })

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _label_target(self, label: DomNode) -> DomNode | None:
        target_id = label.get_attribute("for")
        if target_id:
            return self._doc.get_element_by_id(target_id)
        for el in label.iter_descendants():
            if el.tag in _LABELABLE_TAGS:
                return el
        return None

    @staticmethod
    def _select(matches: list[DomNode], index: int, described: str) -> DomNode:
        if not matches:
            raise ElementNotFoundError(f"No element found with {described}")
        if index < 0 or index >= len(matches):
            raise IndexOutOfRangeError(
                f"Index {index} out of range, found {len(matches)} elements"
            )
        return matches[index]

    def _result(self, element: DomNode, count: int, descriptor: dict[str, Any]) -> LocatorResult:
        ref = self._refs.allocate(element)
        logger.debug("Locator matched %d element(s), selected <%s> as %s", count, element.tag, ref)
        return LocatorResult(ref=ref, count=count, descriptor=descriptor)
