from .plugin import USE_TAG, WidgetsPlugin

__all__ = ["WidgetsPlugin", "USE_TAG"]
