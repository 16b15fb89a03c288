"""
Плагин модификаторов: пользовательские фильтры из конфигурации.
"""

from __future__ import annotations

from typing import Dict, List

from ..base import TemplatePlugin
from ...framework.factory import resolve_callable
from ...types import PluginPriority, TagKind, TagSpec


class ModifiersPlugin(TemplatePlugin):
    """Регистрирует фильтры вида {{ value|name }} по dotted path к функции."""

    def __init__(self, modifiers: Dict[str, str]):
        super().__init__()
        self.modifiers = dict(modifiers)

    @property
    def name(self) -> str:
        return "modifiers"

    @property
    def priority(self) -> PluginPriority:
        return PluginPriority.MODIFIERS

    def register_tags(self) -> List[TagSpec]:
        return [
            TagSpec(name, TagKind.MODIFIER, resolve_callable(path), plugin=self.name)
            for name, path in self.modifiers.items()
        ]


__all__ = ["ModifiersPlugin"]
