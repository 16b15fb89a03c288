from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

from ..errors import InvalidConfigError


@dataclass
class RendererConfig:
    """
    Настройки ViewRenderer.

    Пути могут задаваться алиасами приложения (@runtime/...) и
    соглашением о каталогах представлений (//, /, относительные).
    """
    # Каталог кэша байткода; отключается только force_compile
    compile_path: str = "@runtime/jinja/compile"
    force_compile: bool = False
    debugging: bool = False
    escape_html: bool = False
    template_dirs: List[str] = field(default_factory=list)
    # Виджеты, доступные как блочные теги: tag -> класс
    blocks: Dict[str, str] = field(default_factory=dict)
    # Виджеты, доступные как функциональные теги: tag -> класс
    functions: Dict[str, str] = field(default_factory=dict)
    # Дополнительные фильтры: name -> dotted path к callable
    modifiers: Dict[str, str] = field(default_factory=dict)
    extensions: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RendererConfig":
        """Создание экземпляра из словаря (из YAML)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(
                f"Unknown renderer option(s): {', '.join(unknown)}. "
                f"Allowed: {', '.join(sorted(known))}"
            )

        return cls(
            compile_path=str(data.get("compile_path", cls.compile_path)),
            force_compile=bool(data.get("force_compile", False)),
            debugging=bool(data.get("debugging", False)),
            escape_html=bool(data.get("escape_html", False)),
            template_dirs=[str(d) for d in _as_list(data, "template_dirs")],
            blocks=_as_str_map(data, "blocks"),
            functions=_as_str_map(data, "functions"),
            modifiers=_as_str_map(data, "modifiers"),
            extensions=[str(e) for e in _as_list(data, "extensions")],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для YAML."""
        return {
            "compile_path": self.compile_path,
            "force_compile": self.force_compile,
            "debugging": self.debugging,
            "escape_html": self.escape_html,
            "template_dirs": list(self.template_dirs),
            "blocks": dict(self.blocks),
            "functions": dict(self.functions),
            "modifiers": dict(self.modifiers),
            "extensions": list(self.extensions),
        }


def _as_list(data: Dict[str, Any], key: str) -> List[Any]:
    raw = data.get(key) or []
    if isinstance(raw, str):
        return [raw]
    if not isinstance(raw, (list, tuple)):
        raise InvalidConfigError(f"'{key}' must be a list, got {type(raw).__name__}")
    return list(raw)


def _as_str_map(data: Dict[str, Any], key: str) -> Dict[str, str]:
    raw = data.get(key) or {}
    if not isinstance(raw, dict):
        raise InvalidConfigError(f"'{key}' must be a mapping, got {type(raw).__name__}")
    return {str(k): str(v) for k, v in raw.items()}


__all__ = ["RendererConfig"]
