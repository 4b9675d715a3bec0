"""Accessible name resolver — a simplified, ordered fallback chain."""

from __future__ import annotations

from typing import Callable

from reflens.dom.node import DomNode

MAX_TEXT_NAME_LENGTH = 100
MAX_VALUE_NAME_LENGTH = 50


def _aria_label(node: DomNode) -> str:
    return (node.get_attribute("aria-label") or "").strip()


def _aria_labelledby(node: DomNode) -> str:
    ids = (node.get_attribute("aria-labelledby") or "").split()
    if not ids or node.document is None:
        return ""
    texts = []
    for element_id in ids:
        target = node.document.get_element_by_id(element_id)
        if target is not None:
            text = target.text_content.strip()
            if text:
                texts.append(text)
    return " ".join(texts)


def _label_for(node: DomNode) -> str:
    if not node.id or node.document is None:
        return ""
    labels = node.document.labels_for(node.id)
    return labels[0].text_content.strip() if labels else ""


def _wrapping_label(node: DomNode) -> str:
    label = node.closest("label")
    if label is None:
        return ""
    label_text = label.text_content.strip()
    own_text = node.text_content.strip()
    return label_text.replace(own_text, "", 1).strip() or label_text


def _attribute(name: str) -> Callable[[DomNode], str]:
    def read(node: DomNode) -> str:
        return (node.get_attribute(name) or "").strip()
    return read


def _text_content(node: DomNode) -> str:
    text = node.text_content.strip()
    return text if len(text) <= MAX_TEXT_NAME_LENGTH else ""


def _value(node: DomNode) -> str:
    if not node.value_bearing or not node.value:
        return ""
    return node.value[:MAX_VALUE_NAME_LENGTH]


# Order matters: first non-empty wins
_NAME_SOURCES: tuple[Callable[[DomNode], str], ...] = (
    _aria_label,
    _aria_labelledby,
    _label_for,
    _wrapping_label,
    _attribute("title"),
    _attribute("placeholder"),
    _attribute("alt"),
    _text_content,
    _value,
)


def accessible_name(node: DomNode) -> str:
    """Human-readable label for a node, or "" when nothing usable exists."""
    for source in _NAME_SOURCES:
        name = source(node)
        if name and name.strip():
            return name
    return ""
