"""
Центральный реестр тегов.

Управляет регистрацией плагинов и их тегов; используется расширением
Jinja2 при компиляции и рендеринге шаблонов.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from .base import PluginList, TemplatePlugin
from ..errors import UnknownTagError
from ..types import TagKind, TagSpec

logger = logging.getLogger(__name__)


class TagRegistry:
    """
    Таблица тегов: имя -> TagSpec.

    Заполняется плагинами при инициализации рендерера; после этого
    меняется только идемпотентной регистрацией тегов времени компиляции.
    """

    def __init__(self):
        self.tags: Dict[str, TagSpec] = {}

        # Плагины в порядке регистрации
        self.plugins: PluginList = []

        self._plugins_initialized = False

        # Теги дописываются тегом use во время рендеринга других потоков
        self._lock = threading.RLock()

    def register_plugin(self, plugin: TemplatePlugin) -> None:
        """
        Регистрирует плагин и все его теги.

        Raises:
            ValueError: Если плагин с таким именем уже зарегистрирован
        """
        if any(p.name == plugin.name for p in self.plugins):
            raise ValueError(f"Plugin '{plugin.name}' already registered")

        self.plugins.append(plugin)
        for spec in plugin.register_tags():
            self.register_tag(spec)
        logger.debug(f"Registered plugin '{plugin.name}'")

    def register_tag(self, spec: TagSpec) -> bool:
        """
        Регистрирует один тег.

        Returns:
            True, если реестр изменился
        """
        with self._lock:
            existing = self.tags.get(spec.name)
            if existing == spec:
                return False
            if existing is not None:
                logger.warning(
                    f"Tag '{spec.name}' from plugin '{spec.plugin}' "
                    f"overwrites existing tag from plugin '{existing.plugin}'"
                )
            self.tags[spec.name] = spec
            return True

    def initialize_plugins(self) -> None:
        """
        Инициализирует все зарегистрированные плагины в порядке приоритета.
        """
        if self._plugins_initialized:
            return

        sorted_plugins = sorted(self.plugins, key=lambda p: p.priority, reverse=True)
        for plugin in sorted_plugins:
            plugin.set_registry(self)
        for plugin in sorted_plugins:
            plugin.initialize()

        self._plugins_initialized = True

    def resolve(self, name: str) -> TagSpec:
        """
        Возвращает спецификацию тега.

        Raises:
            UnknownTagError: Если тег не зарегистрирован
        """
        spec = self.tags.get(name)
        if spec is None:
            raise UnknownTagError(name)
        return spec

    def tag_names(self) -> List[str]:
        """Имена тегов, которые разбирает парсер (все, кроме модификаторов)."""
        with self._lock:
            return [name for name, spec in self.tags.items() if spec.kind is not TagKind.MODIFIER]

    def modifiers(self) -> Dict[str, Callable]:
        """Модификаторы в виде фильтров Jinja2."""
        with self._lock:
            return {name: spec.handler for name, spec in self.tags.items() if spec.kind is TagKind.MODIFIER}

    def __contains__(self, name: str) -> bool:
        return name in self.tags


__all__ = ["TagRegistry"]
