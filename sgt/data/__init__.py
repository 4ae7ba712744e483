"""
Модель данных и разрешение путей атрибутов.
"""

from __future__ import annotations

from .context import DataContext, MISSING
from .records import AdapterError, NotEnoughKeysError, TooManyKeysError, to_mapping, to_mapping_with_names
from .resolver import ResolutionError, UndefinedAttributeError, NotIndexableError, resolve
from .values import ValueKind, classify, is_empty, to_text

__all__ = [
    "DataContext",
    "MISSING",
    "ValueKind",
    "classify",
    "is_empty",
    "to_text",
    "resolve",
    "ResolutionError",
    "UndefinedAttributeError",
    "NotIndexableError",
    "AdapterError",
    "NotEnoughKeysError",
    "TooManyKeysError",
    "to_mapping",
    "to_mapping_with_names",
]
