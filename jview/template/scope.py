"""
Контекст одного вызова рендеринга.

RenderScope владеет стеком виджетов и стеком буферов захвата вывода.
Активный контекст доступен виджетам через ContextVar, поэтому
параллельные и вложенные рендеры никогда не делят состояние.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, List, Optional

from ..errors import WidgetStackError

_current_scope: ContextVar[Optional["RenderScope"]] = ContextVar("jview_render_scope", default=None)


class RenderScope:
    """
    Состояние рендеринга одного шаблона.

    Виджеты и буферы захвата закрываются строго в порядке LIFO.
    """

    def __init__(self, view: Any = None, template_name: str = ""):
        self.view = view
        self.template_name = template_name
        self.widgets: List[Any] = []
        self.captures: List[io.StringIO] = []
        self._widget_counter = 0

    # ---- Стек виджетов ----

    def push_widget(self, widget: Any) -> None:
        self.widgets.append(widget)

    def pop_widget(self) -> Any:
        """
        Снимает последний открытый виджет.

        Raises:
            WidgetStackError: Если стек пуст (несогласованные открытие/закрытие)
        """
        if not self.widgets:
            raise WidgetStackError(
                f"Unexpected widget close in '{self.template_name}': no widget is open (widget stack is empty)"
            )
        return self.widgets.pop()

    # ---- Захват вывода ----

    def begin_capture(self) -> None:
        self.captures.append(io.StringIO())

    def end_capture(self) -> str:
        """Закрывает внутренний буфер и возвращает накопленный текст."""
        if not self.captures:
            raise WidgetStackError(f"No output capture is open in '{self.template_name}'")
        buffer = self.captures.pop()
        try:
            return buffer.getvalue()
        finally:
            buffer.close()

    def emit(self, text: str) -> None:
        """Пишет текст во внутренний открытый буфер."""
        if not self.captures:
            raise WidgetStackError(
                f"Output emitted outside of a widget in '{self.template_name}' (no capture is open)"
            )
        self.captures[-1].write(str(text))

    @property
    def depth(self) -> int:
        return len(self.captures)

    def next_widget_id(self) -> str:
        widget_id = f"w{self._widget_counter}"
        self._widget_counter += 1
        return widget_id

    # ---- Завершение ----

    def discard(self) -> None:
        """Сбрасывает все незакрытые виджеты и буферы."""
        self.widgets.clear()
        while self.captures:
            self.captures.pop().close()

    def close(self) -> None:
        """
        Проверяет, что все виджеты и буферы закрыты.

        Raises:
            WidgetStackError: Если остались открытые виджеты или буферы
        """
        open_widgets, open_captures = len(self.widgets), len(self.captures)
        self.discard()
        if open_widgets or open_captures:
            raise WidgetStackError(
                f"Render of '{self.template_name}' finished with {open_widgets} open widget(s) "
                f"and {open_captures} open capture(s)"
            )


@contextmanager
def render_scope(view: Any = None, template_name: str = "") -> Iterator[RenderScope]:
    """
    Открывает новый RenderScope на время рендеринга.

    При ошибке незакрытые кадры сбрасываются, а исключение пробрасывается.
    """
    scope = RenderScope(view, template_name)
    token = _current_scope.set(scope)
    try:
        yield scope
    except BaseException:
        scope.discard()
        raise
    else:
        scope.close()
    finally:
        _current_scope.reset(token)


def current_scope() -> RenderScope:
    """
    Возвращает активный RenderScope.

    Raises:
        WidgetStackError: Если рендеринг не выполняется
    """
    scope = _current_scope.get()
    if scope is None:
        raise WidgetStackError("No active render scope: widgets can only run during ViewRenderer.render()")
    return scope


def active_scope() -> Optional[RenderScope]:
    """Как current_scope, но возвращает None вне рендеринга."""
    return _current_scope.get()


__all__ = ["RenderScope", "render_scope", "current_scope", "active_scope"]
