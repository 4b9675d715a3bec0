"""Error taxonomy surfaced across the command boundary."""

from __future__ import annotations

from typing import Any


class RefLensError(Exception):
    """Base class for every error that maps to a ``{code, message}`` object."""

    code = "REFLENS_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ElementNotFoundError(RefLensError):
    """Unknown ref, detached node, or a query that matched nothing."""

    code = "ELEMENT_NOT_FOUND"


class IndexOutOfRangeError(RefLensError):
    code = "INDEX_OUT_OF_RANGE"


class InvalidElementError(RefLensError):
    """The resolved node is not the kind of control the operation needs."""

    code = "INVALID_ELEMENT"


class WaitTimeoutError(RefLensError):
    code = "TIMEOUT"


class UnknownActionError(RefLensError):
    code = "UNKNOWN_ACTION"


class InvalidSelectorError(RefLensError):
    """The page rejected a structural selector as malformed."""

    code = "INVALID_SELECTOR"


class InvalidParamsError(RefLensError):
    """A command was called with missing or unexpected parameters."""

    code = "INVALID_PARAMS"


class PageScriptError(RefLensError):
    """The page failed while a command was running (detached element, navigation race)."""

    code = "CONTENT_SCRIPT_ERROR"
