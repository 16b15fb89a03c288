from .plugin import ModifiersPlugin

__all__ = ["ModifiersPlugin"]
