"""Token budget — count tokens and truncate rendered snapshots to fit a limit."""

from __future__ import annotations

import tiktoken

_ENCODING = "cl100k_base"


class TokenBudget:
    """Counts tokens in a string and truncates text to fit within a budget."""

    def __init__(self, encoding: str = _ENCODING) -> None:
        self._enc = tiktoken.get_encoding(encoding)

    def count(self, text: str) -> int:
        return len(self._enc.encode(text))

    def truncate(self, text: str, max_tokens: int) -> tuple[str, bool]:
        """
        Truncate text to fit within max_tokens, cutting at a line boundary so
        no snapshot line is left half-rendered.
        Returns (truncated_text, was_truncated).
        """
        tokens = self._enc.encode(text)
        if len(tokens) <= max_tokens:
            return text, False

        truncated = self._enc.decode(tokens[:max_tokens])
        if "\n" in truncated:
            truncated = truncated.rsplit("\n", 1)[0]
        return truncated + "\n[... truncated to fit token budget ...]", True

    def fits(self, text: str, max_tokens: int) -> bool:
        return self.count(text) <= max_tokens
