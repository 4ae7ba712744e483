"""
Разрешение путей атрибутов по контексту данных.

Первый сегмент ищется по цепочке областей, остальные ищутся как ключи
в отображениях. Спуститься "сквозь" функцию нельзя: вызвана может быть
только функция на последней позиции пути.
"""

from __future__ import annotations

from typing import Any, Sequence

from .context import DataContext, MISSING
from .values import ValueKind, classify
from ..errors import SgtUserError


class ResolutionError(SgtUserError):
    """Ошибка разрешения пути атрибута."""

    def __init__(self, message: str, path: Sequence[str], segment: str):
        super().__init__(message)
        self.path = tuple(path)
        self.segment = segment

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


class UndefinedAttributeError(ResolutionError):
    """Сегмент пути не найден."""

    def __init__(self, path: Sequence[str], segment: str):
        super().__init__(f"Undefined attribute '{segment}' in '{'.'.join(path)}'", path, segment)


class NotIndexableError(ResolutionError):
    """Попытка спуститься в скаляр, список или функцию."""

    def __init__(self, path: Sequence[str], segment: str, kind: ValueKind):
        super().__init__(
            f"Cannot look up '{segment}' in a {kind.value} value in '{'.'.join(path)}'",
            path, segment
        )
        self.kind = kind


def resolve(path: Sequence[str], context: DataContext, invoke: bool = True) -> Any:
    """
    Разрешает путь в контексте.

    Args:
        path: Непустая последовательность сегментов
        context: Контекст данных
        invoke: Вызывать ли конечную функцию с корневым отображением контекста.
            Результат вызова не вызывается повторно, даже если он сам вызываемый.

    Returns:
        Найденное значение

    Raises:
        UndefinedAttributeError: Если сегмент не найден
        NotIndexableError: Если промежуточное значение не отображение
    """
    head = path[0]
    value = context.lookup(head)
    if value is MISSING:
        raise UndefinedAttributeError(path, head)

    for segment in path[1:]:
        kind = classify(value)
        if kind != ValueKind.MAPPING:
            raise NotIndexableError(path, segment, kind)
        if segment not in value:
            raise UndefinedAttributeError(path, segment)
        value = value[segment]

    if invoke and classify(value) == ValueKind.CALLABLE:
        value = value(context.root)

    return value


__all__ = [
    "ResolutionError",
    "UndefinedAttributeError",
    "NotIndexableError",
    "resolve",
]
