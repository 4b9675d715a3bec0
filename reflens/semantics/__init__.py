from reflens.semantics.names import accessible_name
from reflens.semantics.roles import INTERACTIVE_ROLES, is_interactive, resolve_role
from reflens.semantics.visibility import is_visible

__all__ = ["INTERACTIVE_ROLES", "accessible_name", "is_interactive", "is_visible", "resolve_role"]
