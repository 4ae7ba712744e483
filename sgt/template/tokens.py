"""
Лексические типы.

Определяет типы токенов верхнего уровня (текст и директивы $...$)
и ошибку компиляции шаблона.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import SgtUserError


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Литеральный текст между директивами
    TEXT = "TEXT"

    # Содержимое директивы между двумя $
    DIRECTIVE = "DIRECTIVE"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Для DIRECTIVE поле value хранит сырое содержимое между ограничителями,
    position/end указывают на это содержимое в исходном тексте,
    а line/column указывают на открывающий $.
    """
    type: TokenType
    value: str
    position: int        # Позиция в исходном тексте
    line: int           # Номер строки (начиная с 1)
    column: int         # Номер колонки (начиная с 1)
    end: int = 0        # Позиция сразу за содержимым

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class ParseError(SgtUserError):
    """Ошибка компиляции шаблона. Частичное дерево никогда не возвращается."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.message = message
        self.line = line
        self.column = column

    @classmethod
    def at_token(cls, message: str, token: Token) -> ParseError:
        return cls(message, token.line, token.column)


__all__ = ["TokenType", "Token", "ParseError"]
