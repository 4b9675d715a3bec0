"""Role resolver — explicit ARIA role, else an implicit role from tag/attributes."""

from __future__ import annotations

from reflens.dom.node import DomNode

# Tags whose implicit role does not depend on attributes
_TAG_ROLES: dict[str, str] = {
    "article": "article",
    "aside": "complementary",
    "button": "button",
    "datalist": "listbox",
    "details": "group",
    "dialog": "dialog",
    "footer": "contentinfo",
    "form": "form",
    "h1": "heading",
    "h2": "heading",
    "h3": "heading",
    "h4": "heading",
    "h5": "heading",
    "h6": "heading",
    "header": "banner",
    "hr": "separator",
    "li": "listitem",
    "main": "main",
    "menu": "menu",
    "nav": "navigation",
    "ol": "list",
    "option": "option",
    "progress": "progressbar",
    "summary": "button",
    "table": "table",
    "tbody": "rowgroup",
    "td": "cell",
    "textarea": "textbox",
    "tfoot": "rowgroup",
    "th": "columnheader",
    "thead": "rowgroup",
    "tr": "row",
    "ul": "list",
}

# <input type=...> → role; anything unlisted is a textbox
_INPUT_TYPE_ROLES: dict[str, str] = {
    "button": "button",
    "checkbox": "checkbox",
    "email": "textbox",
    "image": "button",
    "number": "spinbutton",
    "radio": "radio",
    "range": "slider",
    "reset": "button",
    "search": "searchbox",
    "submit": "button",
    "tel": "textbox",
    "text": "textbox",
    "url": "textbox",
}

INTERACTIVE_ROLES = frozenset({
    "button", "checkbox", "combobox", "link", "listbox", "menu", "menuitem",
    "menuitemcheckbox", "menuitemradio", "option", "radio", "searchbox",
    "slider", "spinbutton", "switch", "tab", "textbox", "treeitem",
})

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


def explicit_role(node: DomNode) -> str | None:
    return node.get_attribute("role") or None


def implicit_role(node: DomNode) -> str | None:
    tag = node.tag
    if tag in _TAG_ROLES:
        return _TAG_ROLES[tag]
    if tag == "a":
        return "link" if node.has_attribute("href") else None
    if tag == "img":
        return "img" if node.get_attribute("alt") else "presentation"
    if tag == "input":
        input_type = (node.get_attribute("type") or "text").lower()
        return _INPUT_TYPE_ROLES.get(input_type, "textbox")
    if tag == "section":
        if node.has_attribute("aria-label") or node.has_attribute("aria-labelledby"):
            return "region"
        return None
    if tag == "select":
        return "listbox" if node.multiple else "combobox"
    return None


def resolve_role(node: DomNode) -> str | None:
    """Explicit role wins; otherwise the implicit one, or None."""
    return explicit_role(node) or implicit_role(node)


def is_interactive(node: DomNode, role: str | None = None) -> bool:
    """
    Interactive-role elements, plus anything with a click handler, an
    explicit ``tabindex="0"``, or that is directly editable.
    """
    if role is None:
        role = resolve_role(node)
    if role in INTERACTIVE_ROLES:
        return True
    if node.has_click_handler or node.get_attribute("tabindex") == "0":
        return True
    return node.content_editable
