"""
Локализация: хук для $txt:{...}$, каталог переводов и генерация каталога.
"""

from __future__ import annotations

from .builder import build_catalog
from .catalog import (
    DEFAULT_DOMAIN,
    DEFAULT_LOCALE,
    CatalogError,
    CatalogFrozenError,
    TranslationCatalog,
)
from .protocols import Translator

__all__ = [
    "DEFAULT_DOMAIN",
    "DEFAULT_LOCALE",
    "CatalogError",
    "CatalogFrozenError",
    "TranslationCatalog",
    "Translator",
    "build_catalog",
]
