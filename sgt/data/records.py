"""
Адаптеры записей.

Превращают записи фиксированной формы (кортежи, namedtuple, dataclass)
в отображения, пригодные для контекста данных.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Optional, Sequence, Tuple

from ..errors import SgtUserError


class AdapterError(SgtUserError):
    """Ошибка преобразования записи."""
    pass


class NotEnoughKeysError(AdapterError):
    """Имен полей меньше, чем значений в записи."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Not enough keys: record has {expected} fields, got {got} names")
        self.expected = expected
        self.got = got


class TooManyKeysError(AdapterError):
    """Имен полей больше, чем значений в записи."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Too many keys: record has {expected} fields, got {got} names")
        self.expected = expected
        self.got = got


def _own_fields(record: Any) -> Tuple[Tuple[str, ...], Tuple[Any, ...]]:
    """Имена и значения полей namedtuple или dataclass-экземпляра."""
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        names = tuple(f.name for f in dataclasses.fields(record))
        return names, tuple(getattr(record, n) for n in names)
    if isinstance(record, tuple) and hasattr(record, "_fields"):
        return tuple(record._fields), tuple(record)
    raise AdapterError(f"Field names are required for {type(record).__name__} records")


def _values_of(record: Any) -> Tuple[Any, ...]:
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return _own_fields(record)[1]
    return tuple(record)


def to_mapping(record: Any, field_names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """
    Сопоставляет значения записи с именами полей.

    Args:
        record: Кортеж/список значений, namedtuple или dataclass-экземпляр
        field_names: Имена полей по порядку; для namedtuple и dataclass
            можно не указывать, тогда используются собственные имена полей

    Raises:
        NotEnoughKeysError: Имен меньше, чем значений
        TooManyKeysError: Имен больше, чем значений
    """
    if field_names is None:
        names, values = _own_fields(record)
        return dict(zip(names, values))

    values = _values_of(record)
    names = list(field_names)
    if len(names) < len(values):
        raise NotEnoughKeysError(len(values), len(names))
    if len(names) > len(values):
        raise TooManyKeysError(len(values), len(names))
    return dict(zip(names, values))


def to_mapping_with_names(record: Any, field_names: Optional[Sequence[str]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Как to_mapping, но результат вложен под именем записи.

    Запись-кортеж имеет вид (record_name, value1, value2, ...);
    для namedtuple и dataclass именем служит имя класса.

    Returns:
        {record_name: {field: value, ...}}
    """
    if (dataclasses.is_dataclass(record) and not isinstance(record, type)) or hasattr(record, "_fields"):
        return {type(record).__name__: to_mapping(record, field_names)}

    items = tuple(record)
    if not items:
        raise AdapterError("Record is empty, expected (name, *values)")
    name, values = items[0], items[1:]
    return {str(name): to_mapping(values, field_names)}


__all__ = [
    "AdapterError",
    "NotEnoughKeysError",
    "TooManyKeysError",
    "to_mapping",
    "to_mapping_with_names",
]
