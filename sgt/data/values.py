"""
Модель значений контекста данных.

Данные передаются обычными объектами Python; classify() сводит их
к закрытому набору видов, с которым работают резолвер и рендерер.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any


class ValueKind(enum.Enum):
    """Виды значений в контексте данных."""
    SCALAR = "scalar"
    MAPPING = "mapping"
    LIST = "list"
    CALLABLE = "callable"


def classify(value: Any) -> ValueKind:
    """
    Определяет вид значения.

    Порядок проверок важен: отображение может оказаться вызываемым объектом,
    но всегда трактуется как MAPPING.
    """
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if callable(value):
        return ValueKind.CALLABLE
    return ValueKind.SCALAR


def to_text(value: Any) -> str:
    """Скалярная форма значения для вывода. None выводится как пустая строка."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def is_empty(value: Any) -> bool:
    """
    Пустое значение для $if$: пустой скаляр ("", None, False) или пустой список.
    """
    if value is None or value is False:
        return True
    kind = classify(value)
    if kind == ValueKind.SCALAR:
        return to_text(value) == ""
    if kind == ValueKind.LIST:
        return len(value) == 0
    return False


__all__ = ["ValueKind", "classify", "to_text", "is_empty"]
