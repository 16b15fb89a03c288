from .base import Widget

__all__ = ["Widget"]
