"""
Рендерер файлов представлений на Jinja2.

Окружение Jinja2 создается лениво при первом рендеринге: к этому моменту
известен каталог первого файла, который становится первым путем поиска.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from jinja2 import Environment, FileSystemBytecodeCache, FileSystemLoader, TemplateError, TemplateNotFound
from jinja2.parser import Parser

from .config import RendererConfig, load_renderer_config
from .errors import TemplateRenderError, UnknownTagError
from .framework.app import Application
from .paths import PathContext, resolve_view_path
from .template.bridge import WidgetBridge, WidgetTable
from .template.extension import ViewTagsExtension
from .template.modifiers import ModifiersPlugin
from .template.registry import TagRegistry
from .template.scope import active_scope, render_scope
from .template.view_tags import ViewTagsPlugin
from .template.widgets import WidgetsPlugin
from .version import tool_version

logger = logging.getLogger(__name__)

STRING_TEMPLATE_NAME = "<string>"


class ViewFileLoader(FileSystemLoader):
    """FileSystemLoader, который дополнительно принимает абсолютные пути к файлам."""

    def get_source(self, environment: Environment, template: str) -> Tuple[str, str, Callable[[], bool]]:
        if not os.path.isabs(template):
            return super().get_source(environment, template)

        filename = os.path.normpath(template)
        if not os.path.isfile(filename):
            raise TemplateNotFound(template)

        mtime = os.path.getmtime(filename)
        with open(filename, encoding=self.encoding) as f:
            contents = f.read()

        def uptodate() -> bool:
            try:
                return os.path.getmtime(filename) == mtime
            except OSError:
                return False

        return contents, filename, uptodate


class ViewParser(Parser):
    """Парсер, для которого незарегистрированный тег - ошибка конфигурации."""

    # Служебные теги Jinja2 внутри блоков: для них остается родное сообщение
    _INNER_TAGS = frozenset({"else", "elif", "pluralize"})

    def fail_unknown_tag(self, name: str, lineno: Optional[int] = None):
        if name.startswith("end") or name in self._INNER_TAGS:
            return super().fail_unknown_tag(name, lineno)
        raise UnknownTagError(name, self.name or "", lineno)


class ViewEnvironment(Environment):
    """
    Окружение, в котором include/extends/import понимают соглашение
    о каталогах представлений (@alias, //, /, относительные пути).
    """

    def __init__(self, app: Application, **options: Any):
        super().__init__(**options)
        self.app = app

    def _parse(self, source: str, name: Optional[str], filename: Optional[str]):
        return ViewParser(self, source, name, filename).parse()

    def join_path(self, template: str, parent: str) -> str:
        if template.startswith(("@", "/")):
            if not template.startswith("//") and os.path.isabs(template) and os.path.isfile(template):
                return template
            scope = active_scope()
            ctx = PathContext.from_view(self.app, scope.view if scope is not None else None)
            return str(resolve_view_path(template, ctx))

        # Сначала рядом с подключающим шаблоном, затем по путям поиска
        if parent and os.path.isabs(parent):
            candidate = os.path.join(os.path.dirname(parent), template)
            if os.path.isfile(candidate):
                return os.path.normpath(candidate)
        return template


class ViewRenderer:
    """
    Рендерер представлений.

    Собирает окружение Jinja2 из RendererConfig: расширение тегов,
    плагины (виджеты, теги представления, модификаторы), пути поиска
    и кэш скомпилированных шаблонов.
    """

    def __init__(self, app: Application, config: Optional[RendererConfig] = None):
        self.app = app
        self.config = config or RendererConfig()

        self.widgets = WidgetTable()
        self.bridge = WidgetBridge(self.widgets)
        self.registry = TagRegistry()

        self._env: Optional[ViewEnvironment] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config_file(cls, app: Application, path: Union[str, Path]) -> "ViewRenderer":
        return cls(app, load_renderer_config(Path(path)))

    # ======= Окружение =======

    @property
    def environment(self) -> ViewEnvironment:
        """Окружение Jinja2 (создается при первом обращении)."""
        return self._ensure_environment()

    @property
    def search_path(self) -> List[str]:
        return list(self.environment.loader.searchpath)

    def _ensure_environment(self, view: Any = None, first_file: Optional[Path] = None) -> ViewEnvironment:
        if self._env is None:
            with self._lock:
                if self._env is None:
                    self._env = self._create_environment(view, first_file)
        return self._env

    def _create_environment(self, view: Any, first_file: Optional[Path]) -> ViewEnvironment:
        """
        Собирает окружение Jinja2.

        Реестр тегов и таблица виджетов подменяются только после успешной
        сборки: ошибка конфигурации не оставляет рендерер полуинициализированным.
        """
        cfg = self.config

        search_path: List[str] = []
        if first_file is not None and first_file.is_absolute():
            search_path.append(str(first_file.parent))
        search_path.append(str(self.app.view_path))
        ctx = PathContext.from_view(self.app, view)
        if ctx.view_file is None and first_file is not None:
            ctx = PathContext(self.app, view_file=first_file, context_view_path=ctx.context_view_path)
        for directory in cfg.template_dirs:
            search_path.append(str(resolve_view_path(directory, ctx)))
        # Дубликаты не нужны, порядок сохраняем
        search_path = list(dict.fromkeys(search_path))

        bytecode_cache = None
        if not cfg.force_compile:
            compile_dir = Path(self.app.get_alias(cfg.compile_path))
            compile_dir.mkdir(parents=True, exist_ok=True)
            bytecode_cache = FileSystemBytecodeCache(str(compile_dir))

        widgets = WidgetTable()
        bridge = WidgetBridge(widgets)
        registry = TagRegistry()
        registry.register_plugin(WidgetsPlugin(bridge, cfg.blocks, cfg.functions))
        registry.register_plugin(ViewTagsPlugin())
        registry.register_plugin(ModifiersPlugin(cfg.modifiers))
        registry.initialize_plugins()

        extensions: List[Any] = [ViewTagsExtension]
        if cfg.debugging:
            extensions.append("jinja2.ext.debug")
        extensions.extend(cfg.extensions)

        options: Dict[str, Any] = {
            "loader": ViewFileLoader(search_path),
            "extensions": extensions,
            "autoescape": cfg.escape_html,
            "auto_reload": True,
            "bytecode_cache": bytecode_cache,
        }
        if cfg.force_compile:
            options["cache_size"] = 0

        env = ViewEnvironment(self.app, **options)
        env.tag_registry = registry
        env.filters.update(registry.modifiers())

        self.widgets, self.bridge, self.registry = widgets, bridge, registry
        logger.debug(
            f"Jinja environment created (jview {tool_version()}): search_path={search_path}, "
            f"tags={len(registry.tag_names())}, bytecode_cache={bytecode_cache is not None}"
        )
        return env

    # ======= Рендеринг =======

    def render(self, view: Any, file: Union[str, Path], params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Рендерит файл представления.

        Args:
            view: Представление, для которого выполняется рендеринг
            file: Абсолютный путь к файлу или имя относительно путей поиска
            params: Переменные шаблона

        Returns:
            Результат рендеринга

        Raises:
            TemplateRenderError: Ошибки Jinja2 (синтаксис, шаблон не найден и т.п.)
            UnknownTagError: Шаблон использует незарегистрированный тег
        """
        path = Path(file)
        env = self._ensure_environment(view, path)
        name = str(path) if path.is_absolute() else str(file)

        logger.debug(f"Rendering '{name}'")
        with render_scope(view, name):
            try:
                template = env.get_template(name)
                return template.render(self._variables(view, params))
            except TemplateError as e:
                raise TemplateRenderError(str(e), name, e) from e

    def render_string(self, view: Any, source: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Рендерит исходный текст шаблона так же, как render() рендерит файл."""
        env = self._ensure_environment(view)
        with render_scope(view, STRING_TEMPLATE_NAME):
            try:
                template = env.from_string(source)
                return template.render(self._variables(view, params))
            except TemplateError as e:
                raise TemplateRenderError(str(e), STRING_TEMPLATE_NAME, e) from e

    def _variables(self, view: Any, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        variables = dict(params or {})
        variables["app"] = self.app
        variables["this"] = view
        return variables


__all__ = ["ViewRenderer", "ViewEnvironment", "ViewFileLoader"]
