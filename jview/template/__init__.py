"""
Теги шаблонов: реестр, плагины, расширение Jinja2 и мост к виджетам.
"""

from __future__ import annotations

from .base import PluginList, TemplatePlugin
from .bridge import WidgetBridge, WidgetTable
from .extension import ViewTagsExtension
from .registry import TagRegistry
from .scope import RenderScope, active_scope, current_scope, render_scope

__all__ = [
    "TemplatePlugin",
    "PluginList",
    "TagRegistry",
    "ViewTagsExtension",
    "WidgetBridge",
    "WidgetTable",
    "RenderScope",
    "render_scope",
    "current_scope",
    "active_scope",
]
