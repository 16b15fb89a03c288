"""
jview: рендерер представлений на Jinja2 с тегами фреймворка и виджетами.
"""

from __future__ import annotations

from .config import RendererConfig, load_renderer_config
from .errors import (
    InvalidConfigError,
    JViewUserError,
    JViewWarning,
    TemplateRenderError,
    UnknownPropertyError,
    UnknownTagError,
    WidgetStackError,
)
from .framework import Application, Controller, Module, UrlManager, View
from .renderer import ViewRenderer
from .version import tool_version
from .widgets import Widget

__all__ = [
    "ViewRenderer",
    "RendererConfig",
    "load_renderer_config",
    "Application",
    "Controller",
    "Module",
    "UrlManager",
    "View",
    "Widget",
    "JViewUserError",
    "InvalidConfigError",
    "UnknownPropertyError",
    "UnknownTagError",
    "TemplateRenderError",
    "WidgetStackError",
    "JViewWarning",
    "tool_version",
]
