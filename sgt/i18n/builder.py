"""
Генерация шаблона каталога переводов по исходным шаблонам.

Собирает ключи $txt:{...}$ из файлов и пишет <domain>.yaml, где каждый
ключ встречается один раз с пустым переводом, а комментарий в конце
строки перечисляет все вхождения file:line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

from ruamel.yaml.comments import CommentedMap

from .catalog import DEFAULT_DOMAIN
from ..template.keys import extract_keys_from_file
from ..yamlio import dump_yaml_rt

logger = logging.getLogger(__name__)


def collect_occurrences(source_files: Iterable[Union[str, Path]]) -> Dict[str, List[str]]:
    """Ключ → список "file:line" в порядке первого появления."""
    occurrences: Dict[str, List[str]] = {}
    for source in source_files:
        source = Path(source)
        for key, line in extract_keys_from_file(source):
            occurrences.setdefault(key, []).append(f"{source.as_posix()}:{line}")
    return occurrences


def build_catalog(
        target_dir: Union[str, Path],
        source_files: Iterable[Union[str, Path]],
        domain: str = DEFAULT_DOMAIN,
) -> Path:
    """
    Пишет шаблон каталога <target_dir>/<domain>.yaml.

    Целевая директория создается при необходимости. Ошибки чтения
    и компиляции исходных файлов пробрасываются как есть.

    Returns:
        Путь к записанному файлу
    """
    target = Path(target_dir)
    occurrences = collect_occurrences(source_files)

    data = CommentedMap()
    for key, refs in occurrences.items():
        data[key] = ""
        data.yaml_add_eol_comment("# " + " ".join(refs), key)

    target.mkdir(parents=True, exist_ok=True)
    path = target / f"{domain}.yaml"
    dump_yaml_rt(path, data)
    logger.debug("Wrote %d keys to %s", len(occurrences), path)
    return path


__all__ = ["build_catalog", "collect_occurrences"]
