from reflens.locators.locators import LocatorEngine

__all__ = ["LocatorEngine"]
