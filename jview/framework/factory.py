"""
Фабрика объектов: создание экземпляра по идентификатору типа и карте атрибутов.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping

from ..errors import InvalidConfigError
from ..types import CLASS_KEY, WidgetClassRef

logger = logging.getLogger(__name__)


def resolve_class(ref: WidgetClassRef) -> Any:
    """
    Возвращает объект по ссылке: сам тип или dotted path "pkg.module.Name".

    Raises:
        InvalidConfigError: Если модуль или атрибут не найден
    """
    if not isinstance(ref, str):
        return ref

    path = ref.strip()
    module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise InvalidConfigError(f"Invalid class path '{ref}': expected 'package.module.Name'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidConfigError(f"Cannot import module '{module_name}' for '{ref}': {e}") from e

    try:
        return getattr(module, attr)
    except AttributeError:
        raise InvalidConfigError(f"Module '{module_name}' has no attribute '{attr}'") from None


def resolve_callable(ref: WidgetClassRef) -> Callable[..., Any]:
    """То же, что resolve_class, но дополнительно проверяет вызываемость."""
    obj = resolve_class(ref)
    if not callable(obj):
        raise InvalidConfigError(f"'{ref}' is not callable")
    return obj


def create_object(config: Mapping[str, Any]) -> Any:
    """
    Создает объект из конфигурации.

    Ключ "class" задает тип (или путь к нему), остальные ключи
    передаются конструктору именованными аргументами.
    """
    params = dict(config)
    if CLASS_KEY not in params:
        raise InvalidConfigError("Object configuration must contain a 'class' element")

    cls = resolve_class(params.pop(CLASS_KEY))
    if not callable(cls):
        raise InvalidConfigError(f"'{cls!r}' is not a constructible type")

    logger.debug("Creating %s with %s", getattr(cls, "__name__", cls), sorted(params))
    return cls(**params)


__all__ = ["resolve_class", "resolve_callable", "create_object"]
