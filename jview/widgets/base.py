"""
Базовый класс виджета.

Виджет создается из атрибутов тега: каждый атрибут должен быть объявлен
в классе (атрибут класса или свойство с сеттером). Вывод виджета -
все, что он напечатал через echo(), и результат run().
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..errors import InvalidConfigError, UnknownPropertyError
from ..template.scope import current_scope

_MISSING = object()


class Widget:
    """
    Базовый UI-компонент.

    Пример:
        class Alert(Widget):
            kind = "info"

            def run(self):
                return f'<div class="alert-{self.kind}">'
    """

    def __init__(self, **config: Any):
        self._id: Optional[str] = None
        for name, value in config.items():
            if not self._can_set(name):
                raise UnknownPropertyError(type(self).__name__, name)
            setattr(self, name, value)
        self.init()

    @classmethod
    def _can_set(cls, name: str) -> bool:
        if name.startswith("_"):
            return False
        attr = getattr(cls, name, _MISSING)
        if attr is _MISSING:
            return False
        if isinstance(attr, property):
            return attr.fset is not None
        return not callable(attr)

    def init(self) -> None:
        """Вызывается после применения атрибутов."""
        pass

    def run(self) -> Any:
        """Выполняет виджет; возвращаемое значение дописывается к выводу."""
        return ""

    # ---- Доступ к контексту рендеринга ----

    @property
    def id(self) -> str:
        """Идентификатор виджета, уникальный в пределах одного рендеринга."""
        if self._id is None:
            self._id = current_scope().next_widget_id()
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        self._id = value

    @property
    def view(self) -> Any:
        view = current_scope().view
        if view is None:
            raise InvalidConfigError(f"{type(self).__name__} requires a view in the render scope")
        return view

    def echo(self, text: Any) -> None:
        """Печатает в текущий буфер захвата."""
        current_scope().emit(str(text))

    def render(self, file: Union[str, Path], params: Optional[Mapping[str, Any]] = None) -> str:
        """Рендерит файл представления (путь по соглашению о каталогах)."""
        return self.view.render_file(file, params)


__all__ = ["Widget"]
