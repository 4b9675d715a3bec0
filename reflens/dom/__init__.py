from reflens.dom.capture import PageCapture
from reflens.dom.document import Document
from reflens.dom.node import Capability, ComputedStyle, DomNode, Rect, classify

__all__ = ["Capability", "ComputedStyle", "Document", "DomNode", "PageCapture", "Rect", "classify"]
