"""TextRenderer — flattens a projection into the line-per-node text format."""

from __future__ import annotations

from reflens.core.types import Projection, SnapshotNode

_INDENT = "  "


class TextRenderer:
    """
    Produces one line per materialized node, depth-first:

        - heading "Welcome" [ref=@e3] [level=1]
          - button "Save" [ref=@e1] [disabled]

    Bracketed attributes always appear in the order ref, level,
    checked/unchecked, disabled, required, value, placeholder.
    """

    def render(self, tree: Projection) -> str:
        lines: list[str] = []
        stack = [(node, 0) for node in reversed(tree.nodes)]
        while stack:
            node, depth = stack.pop()
            lines.append(self.render_line(node, depth))
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return "\n".join(lines)

    @staticmethod
    def render_line(node: SnapshotNode, depth: int = 0) -> str:
        parts: list[str] = []
        if node.role:
            parts.append(node.role)
        if node.name:
            parts.append(f'"{node.name}"')

        attrs = [f"ref={node.ref}"]
        if node.level:
            attrs.append(f"level={node.level}")
        if node.checked is not None:
            attrs.append("checked" if node.checked else "unchecked")
        if node.disabled:
            attrs.append("disabled")
        if node.required:
            attrs.append("required")
        if node.value:
            attrs.append(f'value="{node.value}"')
        if node.placeholder:
            attrs.append(f'placeholder="{node.placeholder}"')

        # An empty head still keeps both separating spaces.
        head = " ".join(parts)
        tail = " ".join(f"[{a}]" for a in attrs)
        return f"{_INDENT * depth}- {head} {tail}"
