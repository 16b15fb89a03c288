"""
Плагин виджетных тегов.

Делает виджеты из конфигурации (blocks/functions) доступными как теги
и добавляет тег времени компиляции {% use %} для подключения виджета
прямо из шаблона.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Dict, List, Optional

from ..base import TemplatePlugin
from ..bridge import WidgetBridge
from ..scope import current_scope
from ...errors import InvalidConfigError, JViewWarning
from ...types import (
    CLASS_KEY,
    PluginPriority,
    TagCall,
    TagKind,
    TagSpec,
    WidgetClassRef,
    WidgetRegistration,
)

logger = logging.getLogger(__name__)

USE_TAG = "use"


class WidgetsPlugin(TemplatePlugin):
    """
    Плагин для вызова виджетов из шаблонов.

    Обеспечивает функциональность:
    - {% Tag attr=... %}...{% endTag %} - блочный виджет
    - {% Tag attr=... %} - функциональный виджет
    - {% use class="pkg.module.Widget" type="block" name="Tag" %} - регистрация виджета
    """

    def __init__(
        self,
        bridge: WidgetBridge,
        blocks: Optional[Dict[str, WidgetClassRef]] = None,
        functions: Optional[Dict[str, WidgetClassRef]] = None,
    ):
        super().__init__()
        self.bridge = bridge
        self.blocks = dict(blocks or {})
        self.functions = dict(functions or {})

    @property
    def name(self) -> str:
        """Возвращает имя плагина."""
        return "widgets"

    @property
    def priority(self) -> PluginPriority:
        """Возвращает приоритет плагина."""
        return PluginPriority.WIDGETS

    def register_tags(self) -> List[TagSpec]:
        """Регистрирует виджеты из конфигурации и тег use."""
        specs: List[TagSpec] = []
        for kind, entries in ((TagKind.BLOCK, self.blocks), (TagKind.FUNCTION, self.functions)):
            for tag, widget_class in entries.items():
                registration = WidgetRegistration(tag, widget_class, kind)
                self.bridge.table.register(registration)
                specs.append(self._widget_spec(registration))

        specs.append(TagSpec(USE_TAG, TagKind.COMPILER, self._use, plugin=self.name))
        return specs

    def register_widget(self, tag: str, widget_class: WidgetClassRef, kind: TagKind) -> bool:
        """
        Регистрирует виджет после инициализации (идемпотентно).

        Returns:
            True, если регистрация изменилась
        """
        registration = WidgetRegistration(tag, widget_class, kind)
        changed = self.bridge.table.register(registration)
        self.registry.register_tag(self._widget_spec(registration))
        if changed:
            logger.debug(f"Widget tag '{tag}' registered as {kind.value} for {widget_class}")
        return changed

    def _widget_spec(self, registration: WidgetRegistration) -> TagSpec:
        return TagSpec(
            name=registration.tag,
            kind=registration.kind,
            handler=self._handle,
            plugin=self.name,
            abort=self._abort,
        )

    # ======= Обработчики =======

    def _handle(self, call: TagCall) -> Any:
        """Передает вызов тега в мост виджетов."""
        return self.bridge.dispatch(call.name, call.phase, call.attrs, call.body)

    def _abort(self, tag: str) -> None:
        self.bridge.abort(current_scope())

    def _use(self, call: TagCall) -> None:
        """Обрабатывает {% use %}; вызывается при компиляции и при каждом рендеринге."""
        widget_class = call.attrs.get(CLASS_KEY)
        if not widget_class:
            warnings.warn(f"{USE_TAG}: missing '{CLASS_KEY}' parameter", JViewWarning, stacklevel=2)
            return

        try:
            kind = TagKind.parse(call.attrs.get("type", TagKind.FUNCTION.value))
        except ValueError as e:
            raise InvalidConfigError(f"{USE_TAG}: {e}") from e
        if kind not in (TagKind.BLOCK, TagKind.FUNCTION):
            raise InvalidConfigError(f"{USE_TAG}: type must be 'block' or 'function', got '{kind.value}'")

        tag = call.attrs.get("name") or str(widget_class).rsplit(".", 1)[-1]
        self.register_widget(str(tag), str(widget_class), kind)


__all__ = ["WidgetsPlugin", "USE_TAG"]
