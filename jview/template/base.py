"""
Плагины тегов.

Плагин поставляет группу тегов (виджеты, теги представления,
модификаторы) и может дорегистрировать теги после инициализации,
как это делает тег {% use %}.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from ..types import PluginPriority, TagSpec

if TYPE_CHECKING:
    from .registry import TagRegistry


class TemplatePlugin(ABC):
    """
    Источник тегов для TagRegistry.

    Порядок работы: register_tags() при регистрации плагина, затем
    set_registry() и initialize() в порядке убывания priority.
    """

    def __init__(self):
        self._registry: Optional[TagRegistry] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Уникальное имя плагина в реестре."""

    @property
    @abstractmethod
    def priority(self) -> PluginPriority:
        """Чем больше, тем раньше плагин инициализируется."""

    def set_registry(self, registry: TagRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> TagRegistry:
        """Реестр, к которому подключен плагин (после initialize_plugins)."""
        assert self._registry is not None, f"Plugin '{self.name}' is not attached to a tag registry"
        return self._registry

    @abstractmethod
    def register_tags(self) -> List[TagSpec]:
        """
        Теги, которые плагин добавляет в реестр.

        Returns:
            Список TagSpec; имена тегов должны быть уникальны в пределах плагина
        """

    def initialize(self) -> None:
        """Хук после подключения всех плагинов; по умолчанию ничего не делает."""


PluginList = List[TemplatePlugin]

__all__ = ["TemplatePlugin", "PluginList"]
