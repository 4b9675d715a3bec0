"""ProjectionEngine — synchronous façade over projector, renderer and locators."""

from __future__ import annotations

import logging

from reflens.core.types import LocatorResult, Projection, SnapshotOptions, SnapshotResult
from reflens.dom.document import Document
from reflens.dom.node import DomNode
from reflens.formatter.ref_registry import RefRegistry
from reflens.formatter.renderer import TextRenderer
from reflens.formatter.token_budget import TokenBudget
from reflens.locators.locators import LocatorEngine
from reflens.projector.projector import TreeProjector

logger = logging.getLogger(__name__)


class ProjectionEngine:
    """
    Everything that reads the mirror and feeds the ref registry.

    Holds no page connection: callers keep ``document`` current and pass in
    an already-resolved scope node. The registry is owned by the caller so
    that it can outlive a single engine call.
    """

    def __init__(
        self,
        document: Document,
        registry: RefRegistry,
        *,
        token_budget: int | None = None,
    ) -> None:
        self.document = document
        self.registry = registry
        self.token_budget = token_budget
        self._projector = TreeProjector(registry)
        self._renderer = TextRenderer()
        self._locators = LocatorEngine(document, registry)
        self._budget: TokenBudget | None = None

    def snapshot(self, options: SnapshotOptions, root: DomNode | None = None) -> SnapshotResult:
        """Start a new ref epoch and project ``root`` (default ``<body>``)."""
        self.registry.clear()

        if root is None:
            root = self.document.body
        tree = self._projector.project(root, options) if root is not None else Projection()
        text = self._renderer.render(tree)

        budget = self._token_budget()
        truncated = False
        if self.token_budget is not None:
            text, truncated = budget.truncate(text, self.token_budget)

        logger.debug(
            "Snapshot allocated %d refs (interactive=%s compact=%s depth=%s)",
            self.registry.total_refs, options.interactive, options.compact, options.depth,
        )
        return SnapshotResult(
            tree=tree,
            text=text,
            ref_count=self.registry.total_refs,
            token_count=budget.count(text),
            truncated=truncated,
        )

    def find_by_role(self, role: str, name: str | None = None, index: int = 0) -> LocatorResult:
        return self._locators.find_by_role(role, name=name, index=index)

    def find_by_text(self, text: str, exact: bool = False, index: int = 0) -> LocatorResult:
        return self._locators.find_by_text(text, exact=exact, index=index)

    def find_by_label(self, label: str, index: int = 0) -> LocatorResult:
        return self._locators.find_by_label(label, index=index)

    def find_by_placeholder(self, placeholder: str, index: int = 0) -> LocatorResult:
        return self._locators.find_by_placeholder(placeholder, index=index)

    def resolve_ref(self, ref: str) -> DomNode | None:
        return self.registry.resolve(ref)

    def _token_budget(self) -> TokenBudget:
        if self._budget is None:
            self._budget = TokenBudget()
        return self._budget
