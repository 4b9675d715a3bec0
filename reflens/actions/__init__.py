from reflens.actions.actions import ActionHandlers, normalize_key

__all__ = ["ActionHandlers", "normalize_key"]
