"""Visibility oracle."""

from __future__ import annotations

from reflens.dom.node import DomNode


def is_visible(node: DomNode) -> bool:
    """
    A node is visible when its computed style does not hide it and its box
    has positive area. Ancestor clipping and off-viewport placement are not
    considered.
    """
    style = node.style
    return (
        style.display != "none"
        and style.visibility != "hidden"
        and style.opacity != "0"
        and node.rect.width > 0
        and node.rect.height > 0
    )
