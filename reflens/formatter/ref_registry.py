"""RefRegistry — issues @eN handles and maps them back to mirrored nodes."""

from __future__ import annotations

import logging
import re
from collections import OrderedDict

from reflens.dom.node import DomNode

logger = logging.getLogger(__name__)

REF_PATTERN = re.compile(r"^@e?(\d+)$")

DEFAULT_MAX_REFS = 10_000


def is_ref(selector: str) -> bool:
    """Selectors starting with ``@`` address the registry, never the page."""
    return selector.startswith("@")


class RefRegistry:
    """
    Maps @eN refs to the nodes they were allocated for.

    One epoch runs from one clear() to the next. Within an epoch a ref is
    never reused and always resolves to the node it was allocated for, or to
    None once that node has left the page. At most ``max_refs`` entries are
    retained; past that the oldest entries are evicted first.
    """

    def __init__(self, max_refs: int = DEFAULT_MAX_REFS) -> None:
        if max_refs < 1:
            raise ValueError("max_refs must be positive")
        self._max_refs = max_refs
        self._counter = 0
        self._ref_to_node: OrderedDict[str, DomNode] = OrderedDict()

    def allocate(self, node: DomNode) -> str:
        self._counter += 1
        ref = f"@e{self._counter}"
        self._ref_to_node[ref] = node
        if len(self._ref_to_node) > self._max_refs:
            evicted, _ = self._ref_to_node.popitem(last=False)
            logger.debug("Ref registry full (%d), evicted %s", self._max_refs, evicted)
        return ref

    def resolve(self, ref: str) -> DomNode | None:
        match = REF_PATTERN.match(ref)
        if match is None:
            return None
        node = self._ref_to_node.get(f"@e{match.group(1)}")
        if node is None or not node.is_connected:
            return None
        return node

    def clear(self) -> None:
        if self._ref_to_node:
            logger.debug("Clearing %d refs", len(self._ref_to_node))
        self._counter = 0
        self._ref_to_node.clear()

    @property
    def total_refs(self) -> int:
        """Refs allocated in the current epoch, evicted ones included."""
        return self._counter

    def __len__(self) -> int:
        return len(self._ref_to_node)

    def __contains__(self, ref: str) -> bool:
        return self.resolve(ref) is not None
