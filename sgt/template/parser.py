"""
Парсер шаблонов.

Преобразует последовательность токенов в CompiledTemplate с поддержкой
условных блоков, включений, применения функций, отображения списков,
склейки и локализуемых строк.

Грамматика директив (первое слово выбирает тип узла):
    attr       → PATH
    include    → "include" NAME
    apply      → "apply" PATH PATH
    if         → "if" PATH  ...  ["else" ...]  "end if"
    map        → "map" (NAME | ":{" TEMPLATE "}") PATH
    join       → "join" ":{" LITERAL "}" PATH
    txt        → "txt" ":{" LITERAL "}"
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from .lexer import TemplateLexer, DirectiveScanner, unescape_block
from .nodes import (
    Path, TemplateNode, TextNode, AttrNode, IncludeNode, ApplyNode,
    IfNode, MapNode, JoinNode, TxtNode, CompiledTemplate,
)
from .tokens import Token, TokenType, ParseError

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_\-]+")


class TemplateParser:
    """
    Рекурсивный парсер для шаблонов.

    Обрабатывает последовательность токенов и строит AST, корректно
    обрабатывая вложенные конструкции. Встроенные подшаблоны map:{...}
    разбираются новым экземпляром парсера по тому же исходному тексту.
    """

    def __init__(self, tokens: List[Token], source: str):
        self.tokens = tokens
        self.source = source
        self.position = 0

        self._directives: Dict[str, Callable[[Token, DirectiveScanner], TemplateNode]] = {
            "include": self._parse_include,
            "apply": self._parse_apply,
            "if": self._parse_if,
            "map": self._parse_map,
            "join": self._parse_join,
            "txt": self._parse_txt,
        }

    def parse(self) -> List[TemplateNode]:
        """
        Парсит всю последовательность токенов в список узлов.

        Raises:
            ParseError: При ошибке синтаксического анализа
        """
        nodes: List[TemplateNode] = []

        while not self._is_at_end():
            current = self._current_token()
            if self._is_else(current):
                raise ParseError.at_token("else without if", current)
            if self._is_end_if(current):
                raise ParseError.at_token("end if without if", current)
            nodes.append(self._parse_top_level())

        return nodes

    def _parse_top_level(self) -> TemplateNode:
        """Парсит текстовый узел или директиву."""
        current = self._current_token()

        if current.type == TokenType.TEXT:
            self._advance()
            return TextNode(text=current.value)
        if current.type == TokenType.DIRECTIVE:
            return self._parse_directive()

        raise ParseError.at_token(f"Unexpected token: {current.type.name}", current)

    def _parse_directive(self) -> TemplateNode:
        """
        Парсит директиву $...$.

        Первое слово выбирает тип узла; одиночный путь означает ссылку на атрибут.
        """
        token = self._advance()
        scanner = DirectiveScanner(self.source, token)

        word, line, column = scanner.read_word()
        if not word:
            scanner.skip_whitespace()
            if scanner.at_end():
                raise ParseError.at_token("Empty directive", token)
            raise ParseError(f"Unexpected '{scanner.peek()}' in directive", scanner.line, scanner.column)

        handler = self._directives.get(word)
        if handler is not None:
            return handler(token, scanner)

        if word in ("else", "end"):
            raise ParseError.at_token(f"Unknown directive: {token.value.strip()}", token)

        path = self._make_path(word, line, column)
        scanner.skip_whitespace()
        if not scanner.at_end():
            raise ParseError.at_token(f"Unknown directive: {word}", token)
        return AttrNode(path=path, line=token.line, column=token.column)

    # ---- Директивы ----

    def _parse_include(self, token: Token, scanner: DirectiveScanner) -> IncludeNode:
        """Парсит включение $include name$."""
        name, _, _ = scanner.read_word()
        if not name:
            raise ParseError.at_token("Missing template name in include", token)
        scanner.expect_end("include")
        return IncludeNode(name=name, line=token.line, column=token.column)

    def _parse_apply(self, token: Token, scanner: DirectiveScanner) -> ApplyNode:
        """Парсит применение $apply func arg$."""
        func = self._read_path(scanner, token, "apply")
        arg = self._read_path(scanner, token, "apply")
        scanner.expect_end("apply")
        return ApplyNode(func=func, arg=arg, line=token.line, column=token.column)

    def _parse_if(self, token: Token, scanner: DirectiveScanner) -> IfNode:
        """
        Парсит условный блок $if cond$ ... [$else$ ...] $end if$.

        Тело разбирается тем же методом верхнего уровня, поэтому условия
        могут вкладываться на любую глубину.
        """
        condition = self._read_path(scanner, token, "if")
        scanner.expect_end("if")

        body: List[TemplateNode] = []
        else_body: Optional[List[TemplateNode]] = None
        current_body = body

        while True:
            if self._is_at_end():
                raise ParseError.at_token("Unexpected end of template, expected $end if$", token)

            current = self._current_token()
            if self._is_end_if(current):
                self._advance()
                break
            if self._is_else(current):
                if else_body is not None:
                    raise ParseError.at_token("Duplicate else in if block", current)
                self._advance()
                else_body = []
                current_body = else_body
                continue

            current_body.append(self._parse_top_level())

        return IfNode(
            condition=condition,
            body=tuple(body),
            else_body=tuple(else_body) if else_body is not None else None,
            line=token.line,
            column=token.column,
        )

    def _parse_map(self, token: Token, scanner: DirectiveScanner) -> MapNode:
        """Парсит $map name items$ или $map:{inline template} items$."""
        scanner.skip_whitespace()
        if scanner.peek() == ":":
            start, end, line, column = scanner.read_block("map")
            body = compile_range(self.source, start, end, line, column)
        else:
            body, _, _ = scanner.read_word()
            if not body:
                raise ParseError.at_token("Missing template name in map", token)

        items = self._read_path(scanner, token, "map")
        scanner.expect_end("map")
        return MapNode(body=body, items=items, line=token.line, column=token.column)

    def _parse_join(self, token: Token, scanner: DirectiveScanner) -> JoinNode:
        """Парсит $join:{separator} items$. Разделитель берется сырым литералом."""
        start, end, _, _ = scanner.read_block("join")
        separator = unescape_block(self.source[start:end])
        items = self._read_path(scanner, token, "join")
        scanner.expect_end("join")
        return JoinNode(separator=separator, items=items, line=token.line, column=token.column)

    def _parse_txt(self, token: Token, scanner: DirectiveScanner) -> TxtNode:
        """Парсит локализуемую строку $txt:{key}$."""
        start, end, _, _ = scanner.read_block("txt")
        key = unescape_block(self.source[start:end])
        if not key:
            raise ParseError.at_token("Empty localization key in txt", token)
        scanner.expect_end("txt")
        return TxtNode(key=key, line=token.line, column=token.column)

    # ---- Пути ----

    def _read_path(self, scanner: DirectiveScanner, token: Token, what: str) -> Path:
        word, line, column = scanner.read_word()
        if not word:
            raise ParseError.at_token(f"Missing attribute path in {what}", token)
        return self._make_path(word, line, column)

    @staticmethod
    def _make_path(word: str, line: int, column: int) -> Path:
        """
        Разбивает foo.bar.baz на сегменты и проверяет их.

        Raises:
            ParseError: При пустом или недопустимом сегменте
        """
        segments = tuple(word.split("."))
        for segment in segments:
            if not segment:
                raise ParseError(f"Empty path segment in '{word}'", line, column)
            if not _SEGMENT_RE.fullmatch(segment):
                raise ParseError(f"Invalid attribute name '{segment}' in '{word}'", line, column)
        return segments

    # ---- Вспомогательные методы ----

    @staticmethod
    def _directive_words(token: Token) -> List[str]:
        if token.type != TokenType.DIRECTIVE:
            return []
        return token.value.split()

    def _is_else(self, token: Token) -> bool:
        return self._directive_words(token) == ["else"]

    def _is_end_if(self, token: Token) -> bool:
        return self._directive_words(token) == ["end", "if"]

    def _current_token(self) -> Token:
        """Возвращает текущий токен."""
        if self.position >= len(self.tokens):
            last = self.tokens[-1] if self.tokens else Token(TokenType.EOF, "", 0, 1, 1)
            return Token(TokenType.EOF, "", last.position, last.line, last.column, last.position)
        return self.tokens[self.position]

    def _advance(self) -> Token:
        """Продвигается к следующему токену и возвращает предыдущий."""
        current = self._current_token()
        if not self._is_at_end():
            self.position += 1
        return current

    def _is_at_end(self) -> bool:
        """Проверяет, достигли ли мы конца токенов."""
        return self._current_token().type == TokenType.EOF


def compile_range(source: str, start: int, end: int, line: int, column: int) -> CompiledTemplate:
    """Компилирует участок [start, end) исходного текста как самостоятельный шаблон."""
    lexer = TemplateLexer(source, start, end, line, column, in_block=True)
    nodes = TemplateParser(lexer.tokenize(), source).parse()
    return CompiledTemplate(nodes=tuple(nodes))


def compile_template(source: str, name: str = "") -> CompiledTemplate:
    """
    Компилирует текст шаблона.

    Args:
        source: Исходный текст шаблона
        name: Опциональное имя шаблона для диагностики

    Returns:
        Неизменяемый скомпилированный шаблон

    Raises:
        ParseError: При ошибке лексического или синтаксического анализа
    """
    lexer = TemplateLexer(source)
    nodes = TemplateParser(lexer.tokenize(), source).parse()
    logger.debug("Compiled template '%s' -> %d nodes", name, len(nodes))
    return CompiledTemplate(nodes=tuple(nodes), name=name)


__all__ = ["TemplateParser", "compile_template", "compile_range"]
