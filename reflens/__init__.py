from reflens.core.engine import ProjectionEngine
from reflens.core.errors import (
    ElementNotFoundError,
    IndexOutOfRangeError,
    InvalidElementError,
    InvalidParamsError,
    InvalidSelectorError,
    PageScriptError,
    RefLensError,
    UnknownActionError,
    WaitTimeoutError,
)
from reflens.core.session import AutomationSession
from reflens.core.types import (
    LocatorResult,
    Projection,
    SnapshotNode,
    SnapshotOptions,
    SnapshotResult,
)
from reflens.dom.document import Document
from reflens.dom.node import Capability, DomNode
from reflens.formatter.ref_registry import RefRegistry

__all__ = [
    "AutomationSession",
    "Capability",
    "Document",
    "DomNode",
    "LocatorResult",
    "Projection",
    "ProjectionEngine",
    "RefRegistry",
    "SnapshotNode",
    "SnapshotOptions",
    "SnapshotResult",
    # Errors
    "ElementNotFoundError",
    "IndexOutOfRangeError",
    "InvalidElementError",
    "InvalidParamsError",
    "InvalidSelectorError",
    "PageScriptError",
    "RefLensError",
    "UnknownActionError",
    "WaitTimeoutError",
]
