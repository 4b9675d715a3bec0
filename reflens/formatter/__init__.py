from reflens.formatter.ref_registry import RefRegistry, is_ref
from reflens.formatter.renderer import TextRenderer
from reflens.formatter.token_budget import TokenBudget

__all__ = ["RefRegistry", "TextRenderer", "TokenBudget", "is_ref"]
