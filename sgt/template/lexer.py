"""
Лексический анализатор шаблонов.

Разбивает исходный текст на чередующиеся токены литерального текста
и директив $...$, отслеживая строки и колонки для диагностики.
Все сканеры работают курсором по исходному буферу: вложенные
блоки :{...} не вырезаются в подстроки, а сканируются в границах
[start, end) того же текста, поэтому позиции остаются точными.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .tokens import Token, TokenType, ParseError

DELIMITER = "$"
ESCAPE = "\\"

# Имена шаблонов и сегменты путей не могут содержать эти символы
_WORD_STOP = set(" \t\r\n:{}$")

_BLOCK_ESCAPE_RE = re.compile(r"\\([{}$])")


def unescape_block(raw: str) -> str:
    """Снимает экранирование \\{, \\} и \\$ в литеральном содержимом блока."""
    return _BLOCK_ESCAPE_RE.sub(r"\1", raw)


class SourceCursor:
    """
    Курсор по участку исходного текста с отслеживанием строк и колонок.
    """

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None,
                 line: int = 1, column: int = 1):
        self.text = text
        self.position = start
        self.length = len(text) if end is None else end
        self.line = line
        self.column = column

    def at_end(self) -> bool:
        return self.position >= self.length

    def peek(self, offset: int = 0) -> str:
        """Возвращает символ на смещении от курсора или '' за границей."""
        pos = self.position + offset
        if pos >= self.length:
            return ""
        return self.text[pos]

    def _advance(self, count: int = 1) -> None:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == '\n':
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1

    def skip_block(self) -> Tuple[int, int, int, int]:
        """
        Пропускает сбалансированный блок {...}, курсор стоит на '{'.

        Экранированные символы внутри блока не учитываются при подсчете скобок.

        Returns:
            (start, end, line, column) содержимого блока без скобок

        Raises:
            ParseError: Если закрывающая скобка не найдена
        """
        open_line, open_column = self.line, self.column
        self._advance()
        start, line, column = self.position, self.line, self.column
        depth = 1

        while not self.at_end():
            char = self.peek()
            if char == ESCAPE and self.peek(1):
                self._advance(2)
                continue
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    end = self.position
                    self._advance()
                    return start, end, line, column
            self._advance()

        raise ParseError("Unmatched '{'", open_line, open_column)


class TemplateLexer(SourceCursor):
    """
    Лексический анализатор шаблонов.

    Выдает токены TEXT (уже без экранирования) и DIRECTIVE (сырое содержимое
    между ограничителями). Внутри директивы '$' внутри блока {...} не закрывает
    директиву, поэтому встроенные подшаблоны могут содержать свои директивы.
    """

    def __init__(self, text: str, start: int = 0, end: Optional[int] = None,
                 line: int = 1, column: int = 1, in_block: bool = False):
        super().__init__(text, start, end, line, column)
        # Внутри встроенного блока \{ и \} в тексте тоже означают литеральные скобки
        self._escapable = "${}" if in_block else "$"

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь участок текста и возвращает список токенов.

        Raises:
            ParseError: При незакрытой директиве или несбалансированных скобках
        """
        tokens: List[Token] = []

        while not self.at_end():
            tokens.append(self.next_token())

        # Добавляем EOF токен
        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column, self.position))

        return tokens

    def next_token(self) -> Token:
        """Извлекает следующий токен из входного потока."""
        if self.at_end():
            return Token(TokenType.EOF, "", self.position, self.line, self.column, self.position)

        if self.peek() == DELIMITER:
            return self._read_directive()

        return self._read_text()

    def _read_text(self) -> Token:
        """Читает литеральный текст до следующего неэкранированного '$'."""
        start_pos = self.position
        start_line = self.line
        start_column = self.column
        parts: List[str] = []

        while not self.at_end():
            char = self.peek()
            if char == DELIMITER:
                break
            if char == ESCAPE and self.peek(1) and self.peek(1) in self._escapable:
                parts.append(self.peek(1))
                self._advance(2)
                continue
            parts.append(char)
            self._advance()

        return Token(TokenType.TEXT, "".join(parts), start_pos, start_line, start_column, self.position)

    def _read_directive(self) -> Token:
        """Читает директиву $...$ с учетом вложенных блоков {...}."""
        open_line = self.line
        open_column = self.column
        self._advance()
        content_start = self.position

        while not self.at_end():
            char = self.peek()
            if char == DELIMITER:
                content_end = self.position
                self._advance()
                return Token(
                    TokenType.DIRECTIVE,
                    self.text[content_start:content_end],
                    content_start, open_line, open_column, content_end
                )
            if char == '{':
                self.skip_block()
                continue
            if char == '}':
                raise ParseError("Unmatched '}'", self.line, self.column)
            self._advance()

        raise ParseError("Unterminated directive, expected closing '$'", open_line, open_column)


class DirectiveScanner(SourceCursor):
    """
    Сканер содержимого одной директивы.

    Читает слова (ключевые слова, пути, имена шаблонов), двоеточия
    и встроенные блоки в границах токена DIRECTIVE.
    """

    def __init__(self, text: str, token: Token):
        # Содержимое начинается сразу за открывающим '$' на той же строке
        super().__init__(text, token.position, token.end, token.line, token.column + 1)
        self.token = token

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.peek().isspace():
            self._advance()

    def read_word(self) -> Tuple[str, int, int]:
        """
        Читает слово до пробела, ':', скобки или конца директивы.

        Returns:
            (word, line, column); word пуст, если слова нет
        """
        self.skip_whitespace()
        line, column = self.line, self.column
        start = self.position
        while not self.at_end() and self.peek() not in _WORD_STOP:
            self._advance()
        return self.text[start:self.position], line, column

    def match(self, char: str) -> bool:
        """Проверяет и потребляет символ (после пробелов)."""
        self.skip_whitespace()
        if self.peek() == char:
            self._advance()
            return True
        return False

    def read_block(self, what: str) -> Tuple[int, int, int, int]:
        """
        Читает встроенный блок ':{...}'.

        Returns:
            (start, end, line, column) содержимого блока

        Raises:
            ParseError: Если блок отсутствует
        """
        if not self.match(":"):
            raise ParseError(f"Expected ':{{...}}' after '{what}'", self.line, self.column)
        self.skip_whitespace()
        if self.peek() != "{":
            raise ParseError(f"Expected '{{' after '{what}:'", self.line, self.column)
        return self.skip_block()

    def expect_end(self, what: str) -> None:
        """Проверяет, что в директиве не осталось лишних токенов."""
        self.skip_whitespace()
        if not self.at_end():
            rest = self.text[self.position:self.length].strip()
            raise ParseError(f"Unexpected '{rest}' in {what} directive", self.line, self.column)


def tokenize_template(text: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список токенов

    Raises:
        ParseError: При ошибке лексического анализа
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = [
    "TemplateLexer",
    "DirectiveScanner",
    "SourceCursor",
    "tokenize_template",
    "unescape_block",
]
