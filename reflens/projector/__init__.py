from reflens.projector.projector import TreeProjector

__all__ = ["TreeProjector"]
