"""
Извлечение локализуемых ключей из шаблонов.

Проходит по скомпилированному дереву и собирает ключи всех директив
$txt:{...}$ с номерами строк в порядке исходного текста. Дубликаты
сохраняются, чтобы инструменты каталогов видели каждое вхождение.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, NamedTuple, Union

from .nodes import CompiledTemplate, IfNode, MapNode, TemplateNode, TxtNode
from .parser import compile_template


class KeyOccurrence(NamedTuple):
    """Вхождение локализуемого ключа: (key, line)."""
    key: str
    line: int


def collect_keys(nodes: Iterable[TemplateNode]) -> List[KeyOccurrence]:
    """Обходит узлы в глубину и собирает ключи Txt-узлов."""
    found: List[KeyOccurrence] = []
    for node in nodes:
        if isinstance(node, TxtNode):
            found.append(KeyOccurrence(node.key, node.line))
        elif isinstance(node, IfNode):
            found.extend(collect_keys(node.body))
            if node.else_body is not None:
                found.extend(collect_keys(node.else_body))
        elif isinstance(node, MapNode) and isinstance(node.body, CompiledTemplate):
            found.extend(collect_keys(node.body.nodes))
    return found


def extract_keys(source: Union[str, bytes]) -> List[KeyOccurrence]:
    """
    Извлекает локализуемые ключи из текста шаблона.

    Raises:
        ParseError: Если шаблон не компилируется
    """
    if isinstance(source, bytes):
        source = source.decode("utf-8")
    return collect_keys(compile_template(source).nodes)


def extract_keys_from_file(path: Union[str, Path]) -> List[KeyOccurrence]:
    """Извлекает ключи из файла шаблона. Ошибки чтения файла пробрасываются как есть."""
    return extract_keys(Path(path).read_text(encoding="utf-8"))


__all__ = ["KeyOccurrence", "collect_keys", "extract_keys", "extract_keys_from_file"]
