"""
Теги для работы с представлением текущего рендеринга.

Функциональные: path, url, meta, registerJsFile, registerCssFile.
Блочные: title, description, registerJs, registerCss - действуют в фазе
CLOSING и используют отрендеренное тело блока.
"""

from __future__ import annotations

import re
import warnings
from typing import Any, Dict, List

from ..base import TemplatePlugin
from ..scope import current_scope
from ...errors import InvalidConfigError, JViewWarning
from ...types import PluginPriority, TagCall, TagKind, TagPhase, TagSpec

_WHITESPACE_RE = re.compile(r"\s+")


class ViewTagsPlugin(TemplatePlugin):
    """Регистрирует теги, которые пишут в текущее представление."""

    @property
    def name(self) -> str:
        return "view"

    @property
    def priority(self) -> PluginPriority:
        return PluginPriority.VIEW

    def register_tags(self) -> List[TagSpec]:
        functions = {
            "path": self._path,
            "url": self._url,
            "meta": self._meta,
            "registerJsFile": self._register_js_file,
            "registerCssFile": self._register_css_file,
        }
        blocks = {
            "title": self._title,
            "description": self._description,
            "registerJs": self._register_js,
            "registerCss": self._register_css,
        }
        specs = [TagSpec(tag, TagKind.FUNCTION, handler, plugin=self.name) for tag, handler in functions.items()]
        specs.extend(
            TagSpec(tag, TagKind.BLOCK, _on_closing(handler), plugin=self.name) for tag, handler in blocks.items()
        )
        return specs

    # ======= Функциональные теги =======

    def _path(self, call: TagCall) -> str:
        """{% path route='site/index' id=1 %} - относительный URL."""
        params = dict(call.attrs)
        route = params.pop("route", None)
        if route is None:
            _warn(f"{call.name}: missing 'route' parameter")
            return ""
        return _view().app.url_manager.create_url(route, params)

    def _url(self, call: TagCall) -> str:
        """{% url route='site/index' scheme='https' %} - абсолютный URL."""
        params = dict(call.attrs)
        route = params.pop("route", None)
        scheme = params.pop("scheme", None)
        if route is None:
            _warn(f"{call.name}: missing 'route' parameter")
            return ""
        return _view().app.url_manager.create_absolute_url(route, params, scheme)

    def _meta(self, call: TagCall) -> str:
        """{% meta name='keywords' content='...' %}; name служит ключом."""
        params = dict(call.attrs)
        _view().register_meta_tag(params, params.get("name"))
        return ""

    def _register_js_file(self, call: TagCall) -> str:
        params = dict(call.attrs)
        url = params.pop("url", None)
        if url is None:
            _warn(f"{call.name}: missing 'url' parameter")
            return ""
        view = _view()
        key = params.pop("key", None)
        depends = params.pop("depends", None)
        if "position" in params:
            params["position"] = view.position_value(params["position"], view.POS_END)
        view.register_js_file(url, depends, params, key)
        return ""

    def _register_css_file(self, call: TagCall) -> str:
        params = dict(call.attrs)
        url = params.pop("url", None)
        if url is None:
            _warn(f"{call.name}: missing 'url' parameter")
            return ""
        key = params.pop("key", None)
        depends = params.pop("depends", None)
        _view().register_css_file(url, depends, params, key)
        return ""

    # ======= Блочные теги =======

    def _title(self, call: TagCall) -> str:
        _view().title = call.body.strip()
        return ""

    def _description(self, call: TagCall) -> str:
        """Тело блока становится meta description; пробелы схлопываются."""
        content = _WHITESPACE_RE.sub(" ", call.body).strip()
        _view().register_meta_tag({"name": "description", "content": content}, "description")
        return ""

    def _register_js(self, call: TagCall) -> str:
        """{% registerJs key='init' position='POS_LOAD' %} ... {% endregisterJs %}"""
        params: Dict[str, Any] = dict(call.attrs)
        view = _view()
        position = view.position_value(params.get("position"), view.POS_READY)
        view.register_js(call.body, position, params.get("key"))
        return ""

    def _register_css(self, call: TagCall) -> str:
        params = dict(call.attrs)
        key = params.pop("key", None)
        _view().register_css(call.body, params, key)
        return ""


def _on_closing(handler):
    """Блочный тег ничего не делает при открытии."""
    def wrapper(call: TagCall):
        if call.phase is TagPhase.OPENING:
            return None
        return handler(call)
    return wrapper


def _view():
    view = current_scope().view
    if view is None:
        raise InvalidConfigError("View tags require a view in the render scope")
    return view


def _warn(message: str) -> None:
    warnings.warn(message, JViewWarning, stacklevel=3)


__all__ = ["ViewTagsPlugin"]
