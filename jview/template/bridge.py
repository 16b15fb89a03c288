"""
Мост между тегами шаблонизатора и виджетами фреймворка.

Блочный тег обрабатывается в две фазы:

    OPENING  - виджет создается из атрибутов тега, кладется в стек,
               открывается буфер захвата вывода;
    CLOSING  - виджет снимается со стека, в буфер пишется тело блока,
               вызывается run(); результат = захваченный текст + результат run().

Функциональный тег - это ровно OPENING, за которым сразу следует
CLOSING с пустым телом.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional

from ..errors import InvalidConfigError
from ..framework.factory import create_object
from ..types import ASSIGN_ATTR, CLASS_KEY, TagKind, TagPhase, WidgetRegistration
from .scope import RenderScope, current_scope

logger = logging.getLogger(__name__)

WidgetFactory = Callable[[Mapping[str, Any]], Any]


@dataclass
class WidgetTable:
    """
    Таблица виджетов: имя тега -> WidgetRegistration.

    Заполняется при инициализации рендерера и тегом {% use %};
    повторная регистрация той же записи ничего не меняет.
    """

    _entries: Dict[str, WidgetRegistration] = field(default_factory=dict)
    _lock: Any = field(default_factory=threading.RLock, repr=False, compare=False)

    def register(self, registration: WidgetRegistration) -> bool:
        """
        Регистрирует виджет.

        Returns:
            True, если таблица изменилась
        """
        with self._lock:
            existing = self._entries.get(registration.tag)
            if existing == registration:
                return False
            if existing is not None:
                logger.warning(
                    f"Widget tag '{registration.tag}' ({existing.widget_class}, {existing.kind.value}) "
                    f"is overwritten by ({registration.widget_class}, {registration.kind.value})"
                )
            self._entries[registration.tag] = registration
            return True

    def get(self, tag: str) -> Optional[WidgetRegistration]:
        return self._entries.get(tag)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    def __contains__(self, tag: str) -> bool:
        return tag in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class WidgetBridge:
    """
    Жизненный цикл виджета, вызванного из шаблона.
    """

    def __init__(self, table: WidgetTable, factory: WidgetFactory = create_object):
        self.table = table
        self.factory = factory

    def resolve(self, tag: str) -> WidgetRegistration:
        """
        Находит регистрацию тега.

        Raises:
            InvalidConfigError: Если тег не зарегистрирован
        """
        registration = self.table.get(tag)
        if registration is None:
            raise InvalidConfigError(f"Widget \"{tag}\" not defined in view's configuration")
        return registration

    def dispatch(
        self,
        tag: str,
        phase: Optional[TagPhase],
        attrs: Optional[Mapping[str, Any]] = None,
        body: str = "",
        variables: Optional[MutableMapping[str, Any]] = None,
        scope: Optional[RenderScope] = None,
    ) -> Any:
        """
        Единая точка вызова виджетного тега.

        Args:
            tag: Имя тега
            phase: Фаза для блочного тега, None для функционального
            attrs: Атрибуты тега (для OPENING и функционального вызова)
            body: Отрендеренное тело блока (для CLOSING)
            variables: Переменные шаблона для связывания по assign
            scope: Контекст рендеринга (по умолчанию - активный)

        Returns:
            Виджет для OPENING, текст для CLOSING и функционального вызова
        """
        registration = self.resolve(tag)
        scope = scope if scope is not None else current_scope()

        if registration.kind is TagKind.FUNCTION:
            if phase is not None:
                raise InvalidConfigError(f"Widget \"{tag}\" is a function tag and cannot be used as a block")
            return self.invoke(scope, registration, attrs)

        if phase is TagPhase.OPENING:
            return self.open(scope, registration, attrs, variables)
        if phase is TagPhase.CLOSING:
            return self.close(scope, body)
        raise InvalidConfigError(f"Widget \"{tag}\" is a block tag and must be opened and closed")

    def open(
        self,
        scope: RenderScope,
        registration: WidgetRegistration,
        attrs: Optional[Mapping[str, Any]] = None,
        variables: Optional[MutableMapping[str, Any]] = None,
    ) -> Any:
        """Фаза OPENING: создать виджет, положить в стек, начать захват вывода."""
        params = dict(attrs or {})
        assign = params.pop(ASSIGN_ATTR, None)
        params[CLASS_KEY] = registration.widget_class

        scope.begin_capture()
        try:
            widget = self.factory(params)
        except BaseException:
            scope.end_capture()
            raise
        scope.push_widget(widget)

        if assign and variables is not None:
            variables[str(assign)] = widget
        return widget

    def close(self, scope: RenderScope, body: Optional[str] = "") -> str:
        """
        Фаза CLOSING: снять виджет, выполнить run() и вернуть вывод.

        Буфер закрывается на любом пути выхода, в том числе при ошибке в run().
        """
        widget = scope.pop_widget()
        try:
            if body:
                scope.emit(body)
            result = widget.run()
        finally:
            captured = scope.end_capture()
        return captured + ("" if result is None else str(result))

    def invoke(
        self,
        scope: RenderScope,
        registration: WidgetRegistration,
        attrs: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Функциональный вызов: OPENING и сразу CLOSING с пустым телом."""
        self.open(scope, registration, attrs)
        return self.close(scope, "")

    def abort(self, scope: RenderScope) -> None:
        """Сбрасывает кадр, тело которого не удалось отрендерить."""
        scope.pop_widget()
        scope.end_capture()


__all__ = ["WidgetTable", "WidgetBridge", "WidgetFactory"]
