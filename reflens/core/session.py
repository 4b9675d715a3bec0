"""AutomationSession — drives one page through its own ref registry."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from reflens.actions.actions import ActionHandlers
from reflens.core.engine import ProjectionEngine
from reflens.core.errors import (
    ElementNotFoundError,
    InvalidParamsError,
    PageScriptError,
    RefLensError,
    UnknownActionError,
)
from reflens.core.types import LocatorResult, SnapshotOptions, SnapshotResult, int_param
from reflens.dom.capture import PageCapture
from reflens.dom.document import Document
from reflens.dom.node import DomNode
from reflens.formatter.ref_registry import DEFAULT_MAX_REFS, RefRegistry, is_ref

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


class AutomationSession:
    """
    Drives one Playwright page by role, text, and label.

    Usage:
        session = AutomationSession(page)
        snap = await session.snapshot(interactive=True)
        # snap.text → "- button "Submit" [ref=@e1]"
        await session.execute("click", {"selector": "@e1"})

    The session owns its RefRegistry; it is never shared between pages.
    The mirror is re-captured at the start of every command, and the
    registry is cleared whenever the page's document changes (navigation).
    """

    def __init__(
        self,
        page: Page,
        *,
        max_refs: int = DEFAULT_MAX_REFS,
        token_budget: int | None = None,
        poll_interval: float = 0.1,
        keystroke_delay_ms: float = 10,
        default_timeout_ms: float = 30_000,
        capture: PageCapture | None = None,
    ) -> None:
        self.poll_interval = poll_interval
        self.keystroke_delay_ms = keystroke_delay_ms
        self.default_timeout_ms = default_timeout_ms

        self._capture = capture if capture is not None else PageCapture(page)
        self._registry = RefRegistry(max_refs=max_refs)
        self._capture.on_new_document = self._on_new_document
        self._engine = ProjectionEngine(
            self._capture.document, self._registry, token_budget=token_budget
        )
        self._actions = ActionHandlers(self)
        self._lock = asyncio.Lock()
        self._handlers: dict[str, Handler] = {
            "snapshot": self._snapshot_command,
            "findByRole": self._find_by_role_command,
            "findByText": self._find_by_text_command,
            "findByLabel": self._find_by_label_command,
            "findByPlaceholder": self._find_by_placeholder_command,
            **self._actions.commands(),
        }

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def page(self) -> Page:
        return self._capture.page

    @property
    def capture(self) -> PageCapture:
        return self._capture

    @property
    def document(self) -> Document:
        return self._capture.document

    @property
    def registry(self) -> RefRegistry:
        return self._registry

    @property
    def engine(self) -> ProjectionEngine:
        return self._engine

    @property
    def actions(self) -> list[str]:
        return sorted(self._handlers)

    # ------------------------------------------------------------------
    # Mirror & selector resolution
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Re-capture the page; a new document starts a new ref epoch."""
        await self._capture.refresh()

    def _on_new_document(self) -> None:
        if len(self._registry):
            logger.debug("Document changed to %s, dropping refs", self.document.url)
        self._registry.clear()

    async def resolve(self, selector: str) -> DomNode:
        """
        ``@eN`` refs are looked up in the registry; anything else is a CSS
        selector evaluated against the live page.
        """
        if is_ref(selector):
            node = self._registry.resolve(selector)
        else:
            node = await self._capture.query_selector(selector)
        if node is None:
            raise ElementNotFoundError(f"Element not found: {selector}")
        return node

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    async def snapshot(
        self,
        interactive: bool = False,
        compact: bool = False,
        depth: int | None = None,
        scope: str | None = None,
    ) -> SnapshotResult:
        options = SnapshotOptions(
            interactive=interactive, compact=compact, depth=depth, scope=scope
        )
        await self.refresh()

        root = None
        if options.scope:
            root = await self._capture.query_selector(options.scope)
            if root is None:
                raise ElementNotFoundError(f"Scope selector not found: {options.scope}")
        return self._engine.snapshot(options, root)

    async def find_by_role(self, role: str, name: str | None = None, index: int = 0) -> LocatorResult:
        await self.refresh()
        return self._engine.find_by_role(role, name=name, index=index)

    async def find_by_text(self, text: str, exact: bool = False, index: int = 0) -> LocatorResult:
        await self.refresh()
        return self._engine.find_by_text(text, exact=exact, index=index)

    async def find_by_label(self, label: str, index: int = 0) -> LocatorResult:
        await self.refresh()
        return self._engine.find_by_label(label, index=index)

    async def find_by_placeholder(self, placeholder: str, index: int = 0) -> LocatorResult:
        await self.refresh()
        return self._engine.find_by_placeholder(placeholder, index=index)

    # ------------------------------------------------------------------
    # Command boundary
    # ------------------------------------------------------------------

    async def execute(self, action: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run one named command and return its payload, or
        ``{"error": {"code", "message"}}`` when it fails.
        """
        params = params or {}
        async with self._lock:
            try:
                handler = self._handlers.get(action)
                if handler is None:
                    raise UnknownActionError(f"Unknown action: {action}")
                try:
                    inspect.signature(handler).bind(**params)
                except TypeError as exc:
                    raise InvalidParamsError(f"Invalid parameters for {action}: {exc}") from exc
                return await handler(**params)
            except RefLensError as exc:
                error = exc
            except PlaywrightError as exc:
                error = PageScriptError(exc.message)
            logger.debug("%s failed: %s %s", action, error.code, error.message)
            return {"error": error.to_dict()}

    async def _snapshot_command(
        self,
        interactive: bool = False,
        compact: bool = False,
        depth: int | None = None,
        scope: str | None = None,
    ) -> dict[str, Any]:
        options = SnapshotOptions.from_params(
            {"interactive": interactive, "compact": compact, "depth": depth, "scope": scope}
        )
        result = await self.snapshot(
            interactive=options.interactive,
            compact=options.compact,
            depth=options.depth,
            scope=options.scope,
        )
        return result.to_dict()

    async def _find_by_role_command(
        self, role: str, name: str | None = None, index: int = 0
    ) -> dict[str, Any]:
        return (await self.find_by_role(role, name=name, index=int_param("index", index))).to_dict()

    async def _find_by_text_command(
        self, text: str, exact: bool = False, index: int = 0
    ) -> dict[str, Any]:
        return (await self.find_by_text(text, exact=bool(exact), index=int_param("index", index))).to_dict()

    async def _find_by_label_command(self, label: str, index: int = 0) -> dict[str, Any]:
        return (await self.find_by_label(label, index=int_param("index", index))).to_dict()

    async def _find_by_placeholder_command(
        self, placeholder: str, index: int = 0
    ) -> dict[str, Any]:
        return (await self.find_by_placeholder(placeholder, index=int_param("index", index))).to_dict()
