"""
Диагностики рендеринга.

Ошибки времени рендеринга не прерывают обработку: узел выводит пустую
строку, а ошибка превращается в запись Diagnostic.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class DiagnosticKind(enum.Enum):
    """Виды восстановимых ошибок рендеринга."""
    ATTRIBUTE = "attribute"     # путь не разрешился
    INCLUDE = "include"         # шаблон не найден, не компилируется или включается циклически
    LIST_TYPE = "list_type"     # map/join по значению, которое не является списком


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    target: str     # путь атрибута или имя шаблона
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


__all__ = ["DiagnosticKind", "Diagnostic"]
