"""
Расширение Jinja2, через которое работают все теги из TagRegistry.

Синтаксис тегов повторяет атрибутный стиль:

    {% ActiveForm assign='form' id='login-form' %} ... {% endActiveForm %}
    {% path route='blog/view' alias=post.alias %}
    {% use class='app.widgets.Nav' type='function' %}

Блочный тег компилируется в вызов фазы OPENING (с присваиванием
результата переменной assign) и CallBlock для фазы CLOSING; тело блока
рендерится внутри CLOSING через caller().
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set, Tuple

from jinja2 import nodes
from jinja2.ext import Extension
from jinja2.parser import Parser
from markupsafe import Markup

from .registry import TagRegistry
from ..errors import InvalidConfigError
from ..types import ASSIGN_ATTR, TagCall, TagKind, TagPhase, TagSpec

ParsedAttr = Tuple[str, nodes.Expr, int]


class ViewTagsExtension(Extension):
    """Разбирает и исполняет теги, зарегистрированные в TagRegistry."""

    def __init__(self, environment):
        super().__init__(environment)
        environment.extend(tag_registry=None)

    @property
    def tags(self) -> Set[str]:  # type: ignore[override]
        registry = self.environment.tag_registry
        if registry is None:
            return set()
        return set(registry.tag_names())

    @property
    def registry(self) -> TagRegistry:
        registry = self.environment.tag_registry
        if registry is None:
            raise InvalidConfigError("ViewTagsExtension is not attached to a tag registry")
        return registry

    # ======= Компиляция =======

    def parse(self, parser: Parser):
        token = next(parser.stream)
        name, lineno = token.value, token.lineno
        spec = self.registry.resolve(name)

        attrs, assign = self._parse_attributes(parser, name)

        if spec.kind is TagKind.COMPILER:
            return self._compile_tag(parser, spec, attrs, lineno)

        attrs_node = self._attrs_node(attrs, lineno)

        if spec.kind is TagKind.BLOCK:
            body = parser.parse_statements((f"name:end{name}",), drop_needle=True)
            open_call = self.call_method("_open_block", [nodes.Const(name), attrs_node], lineno=lineno)
            if assign:
                opener = nodes.Assign(nodes.Name(assign, "store"), open_call, lineno=lineno)
            else:
                opener = nodes.ExprStmt(open_call, lineno=lineno)
            close_call = self.call_method("_close_block", [nodes.Const(name), attrs_node], lineno=lineno)
            closer = nodes.CallBlock(close_call, [], [], body, lineno=lineno)
            return [opener, closer]

        call = self.call_method("_call_function", [nodes.Const(name), attrs_node], lineno=lineno)
        if assign:
            return nodes.Assign(nodes.Name(assign, "store"), call, lineno=lineno)
        return nodes.Output([call], lineno=lineno)

    def _parse_attributes(self, parser: Parser, name: str) -> Tuple[List[ParsedAttr], Optional[str]]:
        """Разбирает атрибуты вида key=expr до конца тега."""
        attrs: List[ParsedAttr] = []
        assign: Optional[str] = None

        while parser.stream.current.type != "block_end":
            if attrs or assign is not None:
                parser.stream.skip_if("comma")
                if parser.stream.current.type == "block_end":
                    break
            key = parser.stream.expect("name")
            parser.stream.expect("assign")
            value = parser.parse_expression()

            if key.value == ASSIGN_ATTR:
                if not (isinstance(value, nodes.Const) and isinstance(value.value, str)
                        and value.value.isidentifier()):
                    parser.fail(f"'{name}': {ASSIGN_ATTR} must be a string literal naming a variable", key.lineno)
                assign = value.value
            else:
                attrs.append((key.value, value, key.lineno))

        return attrs, assign

    @staticmethod
    def _attrs_node(attrs: List[ParsedAttr], lineno: int) -> nodes.Dict:
        return nodes.Dict(
            [nodes.Pair(nodes.Const(key, lineno=ln), value, lineno=ln) for key, value, ln in attrs],
            lineno=lineno,
        )

    def _compile_tag(self, parser: Parser, spec: TagSpec, attrs: List[ParsedAttr], lineno: int):
        """
        Тег времени компиляции: выполняется сразу при разборе, а в
        скомпилированный шаблон попадает тот же вызов, который повторяется
        в начале каждого рендеринга (шаблон из кэша парсер не видит).
        """
        values: Dict[str, Any] = {}
        for key, value, key_lineno in attrs:
            if not isinstance(value, nodes.Const):
                parser.fail(f"'{spec.name}': attribute '{key}' must be a literal", key_lineno)
            values[key] = value.value

        spec.handler(TagCall(spec.name, None, dict(values)))

        # Теги, зарегистрированные только что, должны разбираться дальше в этом же шаблоне
        for tag in self.registry.tag_names():
            parser.extensions.setdefault(tag, self.parse)

        const_attrs = [(key, nodes.Const(value, lineno=lineno), lineno) for key, value in values.items()]
        call = self.call_method(
            "_run_compiled",
            [nodes.Const(spec.name), self._attrs_node(const_attrs, lineno)],
            lineno=lineno,
        )
        return nodes.ExprStmt(call, lineno=lineno)

    # ======= Рендеринг =======

    def _open_block(self, name: str, attrs: Dict[str, Any]) -> Any:
        spec = self.registry.resolve(name)
        return spec.handler(TagCall(name, TagPhase.OPENING, dict(attrs)))

    def _close_block(self, name: str, attrs: Dict[str, Any], caller) -> Markup:
        spec = self.registry.resolve(name)
        try:
            body = caller()
        except BaseException:
            if spec.abort is not None:
                spec.abort(name)
            raise
        return Markup(_text(spec.handler(TagCall(name, TagPhase.CLOSING, dict(attrs), str(body)))))

    def _call_function(self, name: str, attrs: Dict[str, Any]) -> Markup:
        spec = self.registry.resolve(name)
        return Markup(_text(spec.handler(TagCall(name, None, dict(attrs)))))

    def _run_compiled(self, name: str, attrs: Dict[str, Any]) -> str:
        spec = self.registry.resolve(name)
        spec.handler(TagCall(name, None, dict(attrs)))
        return ""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


__all__ = ["ViewTagsExtension"]
