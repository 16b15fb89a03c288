from .plugin import ViewTagsPlugin

__all__ = ["ViewTagsPlugin"]
