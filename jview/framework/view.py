"""
Представление (view) хост-фреймворка.

Хранит заголовок страницы и все зарегистрированные шаблонами
meta/link-теги, скрипты и стили; умеет рендерить файл представления
через подключенный рендерер.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

from markupsafe import Markup

from . import html
from .app import Application, Controller
from ..errors import InvalidConfigError
from ..paths import PathContext, resolve_view_file

logger = logging.getLogger(__name__)


class RendererProtocol(Protocol):
    def render(self, view: "View", file: Union[str, Path], params: Optional[Mapping[str, Any]] = None) -> str:
        ...


class View:
    """Представление с реестром ресурсов страницы."""

    # Позиции регистрации скриптов
    POS_HEAD = 1
    POS_BEGIN = 2
    POS_END = 3
    POS_READY = 4
    POS_LOAD = 5

    def __init__(
        self,
        app: Application,
        renderer: Optional[RendererProtocol] = None,
        context: Optional[Controller] = None,
    ):
        self.app = app
        self.renderer = renderer
        self.context = context

        self.title: str = ""
        self.params: Dict[str, Any] = {}
        self.meta_tags: Dict[Any, Markup] = {}
        self.link_tags: Dict[Any, Markup] = {}
        self.js_files: Dict[int, Dict[str, Markup]] = {}
        self.js: Dict[int, Dict[str, str]] = {}
        self.css_files: Dict[str, Markup] = {}
        self.css: Dict[str, Markup] = {}
        self.dependencies: Dict[str, List[str]] = {}

        # Стек файлов, которые рендерятся в данный момент
        self._view_files: List[Path] = []

    # ---- Позиции ----

    @classmethod
    def position_value(cls, name: Optional[Union[str, int]], default: int) -> int:
        """
        Переводит имя константы позиции ("POS_END") в ее значение.

        Неизвестные имена и None дают default.
        """
        if isinstance(name, int):
            return name
        if not name:
            return default
        value = getattr(cls, str(name), None)
        if str(name).startswith("POS_") and isinstance(value, int):
            return value
        return default

    # ---- Регистрация ресурсов ----

    def register_meta_tag(self, options: Mapping[str, Any], key: Optional[str] = None) -> None:
        _put(self.meta_tags, key, html.meta_tag(options))

    def register_link_tag(self, options: Mapping[str, Any], key: Optional[str] = None) -> None:
        _put(self.link_tags, key, html.tag("link", options=options))

    def register_js_file(
        self,
        url: str,
        depends: Optional[Sequence[str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        key: Optional[str] = None,
    ) -> None:
        options = dict(options or {})
        position = self.position_value(options.pop("position", None), self.POS_END)
        key = key or url
        self.js_files.setdefault(position, {})[key] = html.js_file(url, options)
        self._register_depends(key, depends)

    def register_js(self, js: str, position: int = POS_READY, key: Optional[str] = None) -> None:
        key = key or hashlib.md5(js.encode("utf-8")).hexdigest()
        self.js.setdefault(position, {})[key] = js

    def register_css_file(
        self,
        url: str,
        depends: Optional[Sequence[str]] = None,
        options: Optional[Mapping[str, Any]] = None,
        key: Optional[str] = None,
    ) -> None:
        key = key or url
        self.css_files[key] = html.css_file(url, options)
        self._register_depends(key, depends)

    def register_css(self, css: str, options: Optional[Mapping[str, Any]] = None, key: Optional[str] = None) -> None:
        key = key or hashlib.md5(css.encode("utf-8")).hexdigest()
        self.css[key] = html.tag("style", Markup(css), options)

    def _register_depends(self, key: str, depends: Optional[Sequence[str]]) -> None:
        if not depends:
            return
        if isinstance(depends, str):
            depends = [depends]
        self.dependencies[key] = list(depends)

    # ---- Вывод ----

    def render_head_html(self) -> Markup:
        lines: List[str] = []
        lines.extend(self.meta_tags.values())
        lines.extend(self.link_tags.values())
        lines.extend(self.css_files.values())
        lines.extend(self.css.values())
        lines.extend(self.js_files.get(self.POS_HEAD, {}).values())
        if self.js.get(self.POS_HEAD):
            lines.append(html.tag("script", Markup("\n".join(self.js[self.POS_HEAD].values()))))
        return Markup("\n".join(lines))

    def render_body_end_html(self) -> Markup:
        lines: List[str] = []
        lines.extend(self.js_files.get(self.POS_END, {}).values())

        scripts: List[str] = []
        if self.js.get(self.POS_END):
            scripts.append("\n".join(self.js[self.POS_END].values()))
        if self.js.get(self.POS_READY):
            code = "\n".join(self.js[self.POS_READY].values())
            scripts.append(f"jQuery(function ($) {{\n{code}\n}});")
        if self.js.get(self.POS_LOAD):
            code = "\n".join(self.js[self.POS_LOAD].values())
            scripts.append(f"jQuery(window).on('load', function () {{\n{code}\n}});")
        if scripts:
            lines.append(html.tag("script", Markup("\n".join(scripts))))
        return Markup("\n".join(lines))

    # ---- Рендеринг ----

    @property
    def view_file(self) -> Optional[Path]:
        """Файл, который рендерится в данный момент."""
        return self._view_files[-1] if self._view_files else None

    def render_file(self, file: Union[str, Path], params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Рендерит файл представления через подключенный рендерер.

        Путь разрешается по соглашению о каталогах представлений
        относительно текущего файла (если он есть).
        """
        if self.renderer is None:
            raise InvalidConfigError("View has no renderer configured")

        path = resolve_view_file(file, PathContext.from_view(self.app, self))

        logger.debug("Rendering view file %s", path)
        self._view_files.append(path)
        try:
            return self.renderer.render(self, path, params)
        finally:
            self._view_files.pop()


def _put(store: Dict[Any, Markup], key: Optional[str], value: Markup) -> None:
    if key is None:
        store[len(store)] = value
    else:
        store[key] = value


__all__ = ["View", "RendererProtocol"]
