"""
Page capture — serialises the live DOM into Document capture records.

Every script below starts from the same prelude, which installs a small
per-document registry on ``window.__reflens``: a random document token, a
WeakMap from element to integer key, and a key -> WeakRef map so Python can
ask for the element behind a key later. Keys are stable for the lifetime of
the page's document; a navigation produces a new token.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from playwright.async_api import ElementHandle, Page
from playwright.async_api import Error as PlaywrightError

from reflens.core.errors import InvalidSelectorError
from reflens.dom.document import Document
from reflens.dom.node import DomNode

logger = logging.getLogger(__name__)

_PRELUDE = """
    const R = window.__reflens || (window.__reflens = {
        token: Math.random().toString(36).slice(2) + Date.now().toString(36),
        next: 1,
        keys: new WeakMap(),
        nodes: new Map(),
    });
    const keyOf = (el) => {
        let k = R.keys.get(el);
        if (k === undefined) {
            k = R.next++;
            R.keys.set(el, k);
        }
        R.nodes.set(k, new WeakRef(el));
        return k;
    };
"""

_CAPTURE_JS = """() => {""" + _PRELUDE + """
    function record(el) {
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        const attrs = {};
        for (const a of el.attributes) attrs[a.name] = a.value;
        return {
            k: keyOf(el),
            tag: el.tagName.toLowerCase(),
            attrs,
            style: {
                display: style.display,
                visibility: style.visibility,
                opacity: style.opacity,
            },
            rect: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
            props: {
                value: typeof el.value === 'string' ? el.value : null,
                checked: el.checked === true,
                disabled: el.disabled === true,
                required: el.required === true,
                multiple: el.multiple === true,
                editable: el.isContentEditable === true,
                onclick: typeof el.onclick === 'function',
                type: typeof el.type === 'string' ? el.type : null,
            },
            contents: [],
        };
    }

    const root = record(document.documentElement);
    const stack = [[document.documentElement, root]];
    while (stack.length) {
        const [el, rec] = stack.pop();
        for (const child of el.childNodes) {
            if (child.nodeType === Node.ELEMENT_NODE) {
                const childRec = record(child);
                rec.contents.push(childRec);
                stack.push([child, childRec]);
            } else if (child.nodeType === Node.TEXT_NODE) {
                rec.contents.push(child.data);
            }
        }
    }
    return { token: R.token, url: location.href, root };
}"""

_QUERY_ONE_JS = """(selector) => {""" + _PRELUDE + """
    const el = document.querySelector(selector);
    return { token: R.token, key: el ? keyOf(el) : null };
}"""

_QUERY_ALL_JS = """(selector) => {""" + _PRELUDE + """
    return { token: R.token, keys: Array.from(document.querySelectorAll(selector), keyOf) };
}"""

_LOOKUP_JS = """([token, key]) => {
    const R = window.__reflens;
    if (!R || R.token !== token) return null;
    const ref = R.nodes.get(key);
    const el = ref && ref.deref();
    return el && el.isConnected ? el : null;
}"""

_BODY_TEXT_JS = """() => document.body ? document.body.textContent : ''"""


class PageCapture:
    """
    Keeps a Document mirror in sync with one Playwright page.

    ``on_new_document`` is called whenever a capture belongs to a different
    document than the previous one, whichever call triggered the capture.
    """

    def __init__(
        self,
        page: Page,
        document: Document | None = None,
        on_new_document: Callable[[], None] | None = None,
    ) -> None:
        self._page = page
        self.document = document if document is not None else Document()
        self.on_new_document = on_new_document

    @property
    def page(self) -> Page:
        return self._page

    async def refresh(self) -> bool:
        """Re-capture the page. Returns True if the page's document changed."""
        capture = await self._page.evaluate(_CAPTURE_JS)
        changed = self.document.update(capture or {})
        if changed:
            logger.debug("New document at %s", self.document.url)
            if self.on_new_document is not None:
                self.on_new_document()
        return changed

    async def query_selector(self, selector: str) -> DomNode | None:
        """First element matching a CSS selector, evaluated in the live page."""
        result = await self._evaluate_query(_QUERY_ONE_JS, selector) or {}
        key = result.get("key")
        if key is None:
            return None
        return await self._node_for_key(str(result.get("token", "")), int(key))

    async def query_selector_all(self, selector: str) -> list[DomNode]:
        result = await self._evaluate_query(_QUERY_ALL_JS, selector) or {}
        token = str(result.get("token", ""))
        nodes: list[DomNode] = []
        for key in result.get("keys") or []:
            node = await self._node_for_key(token, int(key))
            if node is not None:
                nodes.append(node)
        return nodes

    async def element_handle(self, node: DomNode) -> ElementHandle | None:
        """Live handle for a mirrored node, or None if it left the page."""
        if not node.is_connected:
            return None
        handle = await self._page.evaluate_handle(_LOOKUP_JS, [self.document.token, node.key])
        element = handle.as_element()
        if element is None:
            await handle.dispose()
        return element

    async def body_text(self) -> str:
        return await self._page.evaluate(_BODY_TEXT_JS) or ""

    async def _evaluate_query(self, script: str, selector: str) -> dict[str, Any] | None:
        try:
            return await self._page.evaluate(script, selector)
        except PlaywrightError as exc:
            raise InvalidSelectorError(f"Invalid selector {selector!r}: {exc.message}") from exc

    async def _node_for_key(self, token: str, key: int) -> DomNode | None:
        """
        Mirror node for a key issued by the page document ``token``. Keys are
        only meaningful within their own document, so a key from any other
        document never matches.
        """
        node = self.document.node_by_key(key) if token == self.document.token else None
        if node is None:
            # Element appeared, or the page navigated, after the last capture.
            logger.debug("Key %d of %s not mirrored yet, re-capturing", key, token)
            await self.refresh()
            if token != self.document.token:
                return None
            node = self.document.node_by_key(key)
        return node
