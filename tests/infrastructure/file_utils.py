"""
Утилиты для создания файлов в тестах.
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Dict


def write(p: Path, text: str) -> Path:
    """
    Записывает текст в файл, создавая родительские директории при необходимости.

    Returns:
        Путь к созданному файлу
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(text), encoding="utf-8")
    return p


def write_yaml(p: Path, data: Dict[str, Any]) -> Path:
    """Сохраняет словарь в YAML через ruamel (как это делает пользователь)."""
    from ruamel.yaml import YAML

    p.parent.mkdir(parents=True, exist_ok=True)
    yaml = YAML()
    with p.open("w", encoding="utf-8") as f:
        yaml.dump(data, f)
    return p
