"""
Контекст данных рендеринга.

Цепочка областей видимости (отображений) от внутренней к внешней.
Поиск идет изнутри наружу, поэтому внутренние ключи затеняют внешние.
Контекст неизменяем: push() возвращает новый экземпляр.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator, Tuple, Union

from ..errors import SgtUserError

# Маркер отсутствующего значения (None является допустимым значением данных)
MISSING: Any = object()


class DataContext:
    """
    Цепочка областей видимости, внутренняя область первой.

    Внешняя область содержит данные, переданные в render; она же передается
    аргументом в автоматически вызываемые функции.
    """

    __slots__ = ("_scopes",)

    def __init__(self, *scopes: Mapping):
        if not scopes:
            raise ValueError("DataContext requires at least one scope")
        for scope in scopes:
            if not isinstance(scope, Mapping):
                raise SgtUserError(f"Data scope must be a mapping, got {type(scope).__name__}")
        self._scopes: Tuple[Mapping, ...] = scopes

    @classmethod
    def of(cls, data: Union["DataContext", Mapping, None]) -> "DataContext":
        """Создает контекст из отображения (или возвращает уже готовый контекст)."""
        if isinstance(data, DataContext):
            return data
        if data is None:
            return cls({})
        return cls(data)

    @property
    def root(self) -> Mapping:
        """Внешняя (верхнеуровневая) область."""
        return self._scopes[-1]

    @property
    def depth(self) -> int:
        return len(self._scopes)

    def push(self, scope: Mapping) -> "DataContext":
        """Возвращает новый контекст с scope в роли внутренней области."""
        return DataContext(scope, *self._scopes)

    def lookup(self, name: str) -> Any:
        """
        Ищет имя во всех областях изнутри наружу.

        Returns:
            Значение или MISSING, если имя нигде не определено
        """
        for scope in self._scopes:
            if name in scope:
                return scope[name]
        return MISSING

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self._scopes)

    def __repr__(self) -> str:
        return f"DataContext(depth={len(self._scopes)})"


__all__ = ["DataContext", "MISSING"]
