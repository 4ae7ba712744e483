"""
Каталог переводов.

Файлы каталога представляют собой YAML-отображения "ключ: перевод", по одному на пару
(локаль, домен): <catalog_dir>/<locale>/<domain>.yaml.

Каталог заполняется один раз и замораживается; после freeze() данные
доступны только на чтение и могут без блокировок использоваться
параллельными рендерами.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple, Union

from ..errors import SgtUserError
from ..yamlio import read_yaml_map

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "messages"
DEFAULT_LOCALE = "en"
CATALOG_SUFFIXES = (".yaml", ".yml")


class CatalogError(SgtUserError):
    """Ошибка загрузки каталога переводов."""
    pass


class CatalogFrozenError(CatalogError):
    """Попытка изменить замороженный каталог."""
    pass


class TranslationCatalog:
    """
    Хранилище переводов по ключу (локаль, домен).

    Реализует протокол Translator.
    """

    def __init__(self):
        self._messages: Dict[Tuple[str, str], Mapping[str, str]] = {}
        self._frozen = False

    @classmethod
    def from_dir(cls, directory: Union[str, Path]) -> TranslationCatalog:
        """Загружает все каталоги из директории и замораживает результат."""
        catalog = cls()
        catalog.load_dir(directory)
        return catalog.freeze()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, locale: str, domain: str, messages: Mapping[str, object]) -> None:
        """
        Добавляет переводы для пары (локаль, домен), дополняя уже загруженные.

        Пустые значения пропускаются: для них рендерер выведет ключ.

        Raises:
            CatalogFrozenError: Если каталог уже заморожен
        """
        if self._frozen:
            raise CatalogFrozenError("Translation catalog is frozen")

        merged = dict(self._messages.get((locale, domain), {}))
        for key, value in messages.items():
            if value is None or value == "":
                continue
            merged[str(key)] = str(value)
        self._messages[(locale, domain)] = merged

    def load_file(self, path: Union[str, Path], locale: str, domain: Optional[str] = None) -> None:
        """
        Загружает один файл каталога. По умолчанию домен равен имени файла без суффикса.

        Raises:
            CatalogError: Если файл не является YAML-отображением
        """
        path = Path(path)
        try:
            messages = read_yaml_map(path)
        except ValueError as e:
            raise CatalogError(f"Invalid catalog file {path}: {e}") from e
        self.add(locale, domain or path.stem, messages)
        logger.debug("Loaded %d messages for %s/%s from %s", len(messages), locale, domain or path.stem, path)

    def load_dir(self, directory: Union[str, Path]) -> None:
        """
        Загружает все файлы <directory>/<locale>/<domain>.yaml.

        Raises:
            CatalogError: Если директория не существует или файл некорректен
        """
        base = Path(directory)
        if not base.is_dir():
            raise CatalogError(f"Catalog directory not found: {base}")

        for locale_dir in sorted(p for p in base.iterdir() if p.is_dir()):
            for path in sorted(locale_dir.iterdir()):
                if path.is_file() and path.suffix in CATALOG_SUFFIXES:
                    self.load_file(path, locale_dir.name)

    def freeze(self) -> TranslationCatalog:
        """Делает каталог неизменяемым. Возвращает self для цепочек вызовов."""
        if not self._frozen:
            self._messages = MappingProxyType({
                key: MappingProxyType(dict(messages))
                for key, messages in self._messages.items()
            })
            self._frozen = True
        return self

    def translate(self, key: str, locale: str, domain: str = DEFAULT_DOMAIN) -> Optional[str]:
        """
        Ищет перевод ключа.

        Для региональной локали (it_IT, pt-BR) при отсутствии перевода
        проверяется базовый язык (it, pt).
        """
        for candidate in _locale_candidates(locale):
            messages = self._messages.get((candidate, domain))
            if messages is not None and key in messages:
                return messages[key]
        return None

    def locales(self) -> List[str]:
        return sorted({locale for locale, _ in self._messages})

    def domains(self) -> List[str]:
        return sorted({domain for _, domain in self._messages})


def _locale_candidates(locale: str) -> List[str]:
    candidates = [locale]
    for sep in ("_", "-"):
        if sep in locale:
            candidates.append(locale.split(sep, 1)[0])
            break
    return candidates


__all__ = [
    "DEFAULT_DOMAIN",
    "DEFAULT_LOCALE",
    "CatalogError",
    "CatalogFrozenError",
    "TranslationCatalog",
]
