"""Action handlers — page effects driven through resolved selectors."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from playwright.async_api import ElementHandle

from reflens.core.errors import (
    ElementNotFoundError,
    InvalidElementError,
    WaitTimeoutError,
)
from reflens.dom.node import Capability, DomNode
from reflens.semantics.visibility import is_visible

if TYPE_CHECKING:
    from reflens.core.session import AutomationSession

logger = logging.getLogger(__name__)

_TEXT_PREVIEW_LENGTH = 100

# Modifier spellings accepted from callers → Playwright's names
_MODIFIER_ALIASES: dict[str, str] = {
    "Ctrl": "Control",
    "Cmd": "Meta",
    "Command": "Meta",
    "Option": "Alt",
}

_SCROLL_DIRECTIONS: dict[str, tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


def normalize_key(key: str) -> str:
    """``"Ctrl+a"`` → ``"Control+a"``; a bare ``" "`` becomes ``"Space"``."""
    if key == " ":
        return "Space"
    parts = key.split("+")
    return "+".join(_MODIFIER_ALIASES.get(p, p) for p in parts)


class ActionHandlers:
    """
    The action commands a session exposes next to snapshot and find-by-*.

    Each handler refreshes the mirror, resolves its selector through the
    session (ref lookup or structural query), checks the node is the right
    kind of control, then acts through a live ElementHandle.
    """

    def __init__(self, session: AutomationSession) -> None:
        self._session = session

    def commands(self) -> dict[str, Callable[..., Awaitable[dict[str, Any]]]]:
        return {
            "click": self.click,
            "type": self.type_text,
            "fill": self.fill,
            "press": self.press,
            "select": self.select,
            "check": self.check,
            "uncheck": self.uncheck,
            "scroll": self.scroll,
            "hover": self.hover,
            "getAttribute": self.get_attribute,
            "getText": self.get_text,
            "getValue": self.get_value,
            "isVisible": self.is_visible,
            "isEnabled": self.is_enabled,
            "isChecked": self.is_checked,
            "query": self.query,
            "waitForSelector": self.wait_for_selector,
            "waitForText": self.wait_for_text,
        }

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def _node(self, selector: str) -> DomNode:
        await self._session.refresh()
        return await self._session.resolve(selector)

    async def _handle(self, node: DomNode, selector: str) -> ElementHandle:
        handle = await self._session.capture.element_handle(node)
        if handle is None:
            raise ElementNotFoundError(f"Element not found: {selector}")
        return handle

    async def _target(self, selector: str) -> tuple[DomNode, ElementHandle]:
        node = await self._node(selector)
        return node, await self._handle(node, selector)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    async def click(self, selector: str) -> dict[str, Any]:
        _, handle = await self._target(selector)
        await handle.scroll_into_view_if_needed()
        await handle.click()
        return {"success": True}

    async def type_text(self, selector: str, text: str) -> dict[str, Any]:
        """Append ``text`` one keystroke at a time."""
        _, handle = await self._target(selector)
        await handle.focus()
        await handle.type(text, delay=self._session.keystroke_delay_ms)
        return {"success": True}

    async def fill(self, selector: str, text: str) -> dict[str, Any]:
        """Clear the control, then type ``text``."""
        node, handle = await self._target(selector)
        if node.capability is not Capability.TEXT_ENTRY and not node.content_editable:
            raise InvalidElementError("Element is not a text input or editable")
        await handle.fill("")
        await handle.type(text, delay=self._session.keystroke_delay_ms)
        return {"success": True}

    async def press(self, key: str, selector: str | None = None) -> dict[str, Any]:
        key = normalize_key(key)
        if selector:
            _, handle = await self._target(selector)
            await handle.press(key)
        else:
            await self._session.page.keyboard.press(key)
        return {"success": True}

    async def select(
        self, selector: str, value: str | None = None, label: str | None = None
    ) -> dict[str, Any]:
        node, handle = await self._target(selector)
        if node.capability is not Capability.SELECTABLE:
            raise InvalidElementError("Element is not a select")

        options = [el for el in node.iter_descendants() if el.tag == "option"]
        option = None
        if value is not None:
            option = next((o for o in options if o.value == value), None)
        if option is None and label is not None:
            option = next((o for o in options if o.text_content.strip() == label), None)
        if option is None:
            raise ElementNotFoundError(f"Option not found: {value if value is not None else label}")

        await handle.select_option(value=option.value)
        return {
            "success": True,
            "selectedValue": option.value,
            "selectedText": option.text_content,
        }

    async def check(self, selector: str) -> dict[str, Any]:
        node, handle = await self._target(selector)
        if node.capability is not Capability.CHECKABLE:
            raise InvalidElementError("Element is not a checkbox or radio")
        if not node.checked:
            await handle.check()
        return {"success": True, "checked": await handle.is_checked()}

    async def uncheck(self, selector: str) -> dict[str, Any]:
        node, handle = await self._target(selector)
        if node.capability is not Capability.CHECKABLE or node.control_type != "checkbox":
            raise InvalidElementError("Element is not a checkbox")
        if node.checked:
            await handle.uncheck()
        return {"success": True, "checked": await handle.is_checked()}

    async def scroll(
        self,
        selector: str | None = None,
        x: float | None = None,
        y: float | None = None,
        direction: str | None = None,
        amount: float = 100,
    ) -> dict[str, Any]:
        page = self._session.page
        if selector:
            _, handle = await self._target(selector)
            await handle.scroll_into_view_if_needed()
        elif direction:
            dx, dy = _SCROLL_DIRECTIONS.get(direction, (0, 0))
            await page.mouse.wheel(dx * amount, dy * amount)
        else:
            await page.evaluate(
                "([x, y]) => window.scrollTo(x ?? window.scrollX, y ?? window.scrollY)",
                [x, y],
            )
        return {"success": True}

    async def hover(self, selector: str) -> dict[str, Any]:
        _, handle = await self._target(selector)
        await handle.hover()
        return {"success": True}

    # ------------------------------------------------------------------
    # Reads (answered from the freshly captured mirror)
    # ------------------------------------------------------------------

    async def get_attribute(self, selector: str, attribute: str) -> dict[str, Any]:
        node = await self._node(selector)
        return {"value": node.get_attribute(attribute)}

    async def get_text(self, selector: str | None = None) -> dict[str, Any]:
        if selector:
            node = await self._node(selector)
            return {"text": node.text_content}
        await self._session.refresh()
        body = self._session.document.body
        return {"text": body.text_content if body is not None else ""}

    async def get_value(self, selector: str) -> dict[str, Any]:
        node = await self._node(selector)
        return {"value": node.value if node.value is not None else node.text_content}

    async def is_visible(self, selector: str) -> dict[str, Any]:
        try:
            node = await self._node(selector)
        except ElementNotFoundError:
            return {"visible": False}
        return {"visible": is_visible(node)}

    async def is_enabled(self, selector: str) -> dict[str, Any]:
        node = await self._node(selector)
        return {"enabled": not node.disabled}

    async def is_checked(self, selector: str) -> dict[str, Any]:
        node = await self._node(selector)
        return {"checked": node.checked}

    async def query(self, selector: str) -> dict[str, Any]:
        await self._session.refresh()
        nodes = await self._session.capture.query_selector_all(selector)
        return {
            "count": len(nodes),
            "elements": [
                {
                    "index": i,
                    **node.describe(),
                    "textContent": node.text_content[:_TEXT_PREVIEW_LENGTH] or None,
                    "isVisible": is_visible(node),
                    "rect": node.rect.to_dict(),
                }
                for i, node in enumerate(nodes)
            ],
        }

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> dict[str, Any]:
        """Poll until ``selector`` resolves to a visible element, then give it a ref."""
        deadline = self._deadline(timeout)
        while time.monotonic() < deadline:
            try:
                node = await self._node(selector)
            except ElementNotFoundError:
                node = None
            if node is not None and is_visible(node):
                ref = self._session.registry.allocate(node)
                return {"success": True, "ref": ref, "element": node.describe()}
            await asyncio.sleep(self._session.poll_interval)
        raise WaitTimeoutError(f"Timeout waiting for selector: {selector}")

    async def wait_for_text(self, text: str, timeout: float | None = None) -> dict[str, Any]:
        needle = text.lower()
        deadline = self._deadline(timeout)
        while time.monotonic() < deadline:
            if needle in (await self._session.capture.body_text()).lower():
                return {"success": True, "found": True}
            await asyncio.sleep(self._session.poll_interval)
        raise WaitTimeoutError(f"Timeout waiting for text: {text}")

    def _deadline(self, timeout_ms: float | None) -> float:
        if timeout_ms is None:
            timeout_ms = self._session.default_timeout_ms
        return time.monotonic() + float(timeout_ms) / 1000
