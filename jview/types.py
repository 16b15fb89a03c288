from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Type, Union

# Зарезервированный атрибут тега: имя переменной шаблона для результата
ASSIGN_ATTR = "assign"

# Ключ с классом в конфигурации объекта (как в create_object)
CLASS_KEY = "class"

WidgetClassRef = Union[str, Type[Any]]
TagAttrs = Dict[str, Any]


class TagKind(enum.Enum):
    """Вид тега с точки зрения шаблонизатора."""
    BLOCK = "block"          # {% tag %} ... {% endtag %}
    FUNCTION = "function"    # {% tag %}
    MODIFIER = "modifier"    # {{ value|tag }}
    COMPILER = "compiler"    # выполняется при компиляции шаблона

    @classmethod
    def parse(cls, value: str) -> "TagKind":
        """Разбирает строковое имя вида (из конфигурации или атрибута тега)."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown tag type '{value}'. Allowed: {allowed}")


class TagPhase(enum.Enum):
    """Фаза обработки блочного тега."""
    OPENING = "opening"
    CLOSING = "closing"


class PluginPriority(enum.IntEnum):
    """Приоритеты инициализации плагинов (больше = раньше)."""
    WIDGETS = 90
    VIEW = 50
    MODIFIERS = 10


@dataclass(frozen=True)
class WidgetRegistration:
    """
    Запись таблицы виджетов: имя тега -> класс виджета и вид тега.
    """
    tag: str
    widget_class: WidgetClassRef
    kind: TagKind

    def __post_init__(self):
        if self.kind not in (TagKind.BLOCK, TagKind.FUNCTION):
            raise ValueError(f"Widget tag '{self.tag}' must be a block or function tag, got {self.kind.value}")


@dataclass
class TagCall:
    """
    Один вызов обработчика тега во время рендеринга (или компиляции).

    Attributes:
        name: Имя тега
        phase: OPENING/CLOSING для блочных тегов, None для остальных
        attrs: Атрибуты тега (без assign)
        body: Отрендеренное тело блока (только для CLOSING)
    """
    name: str
    phase: Optional[TagPhase] = None
    attrs: TagAttrs = field(default_factory=dict)
    body: str = ""


TagHandler = Callable[..., Any]


@dataclass(frozen=True)
class TagSpec:
    """
    Спецификация тега для регистрации в реестре.

    Для BLOCK/FUNCTION/COMPILER handler принимает TagCall,
    для MODIFIER handler - это сам фильтр Jinja2.
    """
    name: str
    kind: TagKind
    handler: TagHandler
    plugin: str = ""
    # Вызывается, если тело блока упало до фазы CLOSING
    abort: Optional[Callable[[str], None]] = None


__all__ = [
    "ASSIGN_ATTR",
    "CLASS_KEY",
    "TagKind",
    "TagPhase",
    "PluginPriority",
    "WidgetRegistration",
    "WidgetClassRef",
    "TagAttrs",
    "TagCall",
    "TagHandler",
    "TagSpec",
]
