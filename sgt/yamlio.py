from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

_yaml = YAML(typ="safe")

_YAML_RT = YAML(typ="rt")
_YAML_RT.indent(mapping=2, sequence=4, offset=2)
# Чтобы ruamel не переносил длинные строки переводов:
_YAML_RT.width = 1000000


def read_yaml(path: Path) -> Any:
    """
    Читает YAML (или JSON, как подмножество YAML) файл целиком.

    Raises:
        ValueError: Если документ синтаксически некорректен
    """
    try:
        return _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def read_yaml_map(path: Path) -> Dict[str, Any]:
    """
    Читает YAML файл и возвращает словарь.
    Пустой документ дает пустой словарь, документ другого вида считается ошибкой.
    """
    raw = read_yaml(path)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"YAML must be a mapping: {path}")
    return raw


def dump_yaml_rt(path: Path, data: CommentedMap) -> None:
    """Атомарно записывает YAML с комментариями (round-trip)."""
    tmp = path.with_suffix(path.suffix + ".tmp-rt")
    with tmp.open("w", encoding="utf-8") as f:
        _YAML_RT.dump(data, f)
    tmp.replace(path)


__all__ = ["read_yaml", "read_yaml_map", "dump_yaml_rt"]
