"""
Загрузчик конфигурации рендерера из YAML.
"""

from __future__ import annotations

from pathlib import Path

from ruamel.yaml import YAML

from ..errors import InvalidConfigError
from .model import RendererConfig

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise InvalidConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_renderer_config(path: Path) -> RendererConfig:
    """
    Загружает настройки рендерера.

    Args:
        path: Путь к YAML файлу (например, config/renderer.yaml)

    Returns:
        RendererConfig; значения по умолчанию, если файла нет
    """
    raw = _read_yaml_map(Path(path))
    # Допускаем обёртку вида "renderer: {...}"
    if set(raw) == {"renderer"} and isinstance(raw["renderer"], dict):
        raw = raw["renderer"]
    try:
        return RendererConfig.from_dict(raw)
    except InvalidConfigError as e:
        raise InvalidConfigError(f"{path}: {e}") from e


__all__ = ["load_renderer_config"]
