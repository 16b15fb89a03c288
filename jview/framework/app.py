from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import InvalidConfigError
from .url import UrlManager

PathLike = Union[str, Path]


class Module:
    """Модуль приложения со своим каталогом представлений."""

    def __init__(self, id: str, view_path: PathLike):
        self.id = id
        self.view_path = Path(view_path)


class Controller:
    """Контроллер; служит контекстом представления."""

    def __init__(self, id: str, module: Module):
        self.id = id
        self.module = module


class Application:
    """
    Приложение: корневые каталоги, алиасы путей и менеджер URL.

    Алиасы начинаются с '@'. Встроенные: @app, @runtime, @views.
    """

    def __init__(
        self,
        base_path: PathLike,
        view_path: Optional[PathLike] = None,
        runtime_path: Optional[PathLike] = None,
        aliases: Optional[Dict[str, PathLike]] = None,
        url_manager: Optional[UrlManager] = None,
    ):
        self.base_path = Path(base_path).resolve()
        self.view_path = Path(view_path) if view_path is not None else self.base_path / "views"
        self.runtime_path = Path(runtime_path) if runtime_path is not None else self.base_path / "runtime"
        self.url_manager = url_manager or UrlManager()

        self._aliases: Dict[str, str] = {}
        self.set_alias("@app", self.base_path)
        self.set_alias("@runtime", self.runtime_path)
        self.set_alias("@views", self.view_path)
        for alias, path in (aliases or {}).items():
            self.set_alias(alias, path)

    def set_alias(self, alias: str, path: PathLike) -> None:
        """Регистрирует алиас; путь сам может начинаться с алиаса."""
        if not alias.startswith("@"):
            alias = "@" + alias
        alias = alias.rstrip("/")
        target = str(path)
        if target.startswith("@"):
            target = str(self.get_alias(target))
        self._aliases[alias] = target.rstrip("/\\") or target

    def get_alias(self, alias: str, throw: bool = True) -> Optional[Path]:
        """
        Переводит алиас в путь: "@app/views/site" -> <base>/views/site.

        Выбирается самый длинный совпавший корень алиаса.
        """
        if not alias.startswith("@"):
            return Path(alias)

        best = None
        for root in self._aliases:
            if alias == root or alias.startswith(root + "/"):
                if best is None or len(root) > len(best):
                    best = root

        if best is None:
            if throw:
                raise InvalidConfigError(f"Invalid path alias: {alias}")
            return None

        rest = alias[len(best):].lstrip("/")
        base = Path(self._aliases[best])
        return base / rest if rest else base


__all__ = ["Application", "Controller", "Module"]
