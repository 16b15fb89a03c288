"""
Соглашение о каталогах представлений.

Префикс пути определяет базу, относительно которой он разрешается:

    @alias/dir   - алиас приложения ("@app/views/dir")
    //dir        - общий каталог представлений приложения ("//layouts")
    /dir         - каталог представлений модуля текущего контроллера ("/site")
    dir          - каталог текущего файла представления
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .errors import InvalidConfigError


@dataclass(frozen=True)
class PathContext:
    """
    Все, что нужно для разрешения пути по соглашению.

    Attributes:
        app: Приложение (алиасы и общий каталог представлений)
        view_file: Текущий файл представления, если он есть
        context_view_path: Каталог представлений модуля текущего контроллера
    """
    app: Any
    view_file: Optional[Path] = None
    context_view_path: Optional[Path] = None

    @classmethod
    def from_view(cls, app: Any, view: Any = None) -> "PathContext":
        if view is None:
            return cls(app=app)
        context = getattr(view, "context", None)
        module = getattr(context, "module", None)
        return cls(
            app=app,
            view_file=getattr(view, "view_file", None),
            context_view_path=getattr(module, "view_path", None),
        )


def resolve_view_path(path: str, ctx: PathContext) -> Path:
    """
    Разрешает путь к каталогу или файлу по соглашению о префиксах.

    Raises:
        InvalidConfigError: Если для выбранного префикса нет базы
            (нет контроллера для "/..." или текущего файла для относительного пути)
    """
    if path.startswith("@"):
        return Path(ctx.app.get_alias(path))

    if path.startswith("//"):
        return Path(ctx.app.view_path) / path.lstrip("/")

    if path.startswith("/"):
        if ctx.context_view_path is None:
            raise InvalidConfigError(
                f"Cannot resolve '{path}': no controller context to resolve module-relative paths"
            )
        return Path(ctx.context_view_path) / path.lstrip("/")

    if ctx.view_file is None:
        raise InvalidConfigError(f"Cannot resolve '{path}': no current view file")
    return Path(os.path.dirname(ctx.view_file)) / path


def resolve_view_file(path: Union[str, Path], ctx: PathContext) -> Path:
    """
    Как resolve_view_path, но существующий абсолютный файл (или объект Path
    с абсолютным путем) возвращается без изменений.
    """
    if isinstance(path, Path) and path.is_absolute():
        return path
    name = str(path)
    if not name.startswith("//") and os.path.isabs(name) and os.path.isfile(name):
        return Path(name)
    return resolve_view_path(name, ctx)


__all__ = ["PathContext", "resolve_view_path", "resolve_view_file"]
