"""
AST-узлы скомпилированного шаблона.

Определяет неизменяемую иерархию узлов. Набор узлов закрыт: рендерер
и экстрактор ключей обрабатывают каждый тип явно.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union

# Путь к атрибуту: foo.bar.baz → ("foo", "bar", "baz")
Path = Tuple[str, ...]


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для всех узлов AST шаблона."""
    pass


@dataclass(frozen=True)
class DirectiveNode(TemplateNode):
    """
    Узел, порожденный директивой $...$.

    Позиция открывающего $ хранится для диагностики и не участвует в сравнении.
    """
    line: int = field(default=0, compare=False, kw_only=True)
    column: int = field(default=0, compare=False, kw_only=True)


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Обычный текстовый контент в шаблоне.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class AttrNode(DirectiveNode):
    """Ссылка на атрибут: $foo.bar$"""
    path: Path


@dataclass(frozen=True)
class IncludeNode(DirectiveNode):
    """Включение внешнего шаблона по имени: $include name$"""
    name: str


@dataclass(frozen=True)
class ApplyNode(DirectiveNode):
    """Применение функции к атрибуту: $apply func arg$"""
    func: Path
    arg: Path


@dataclass(frozen=True)
class IfNode(DirectiveNode):
    """
    Условный блок: $if cond$ ... [$else$ ...] $end if$

    else_body равен None, если ветка $else$ отсутствует.
    """
    condition: Path
    body: Tuple[TemplateNode, ...]
    else_body: Optional[Tuple[TemplateNode, ...]] = None


@dataclass(frozen=True)
class MapNode(DirectiveNode):
    """
    Применение шаблона к каждому элементу списка.

    Тело задается либо именем шаблона ($map li names$), либо встроенный
    подшаблон ($map:{...} names$), разобранный при компиляции.
    """
    body: Union[str, "CompiledTemplate"]
    items: Path

    @property
    def is_inline(self) -> bool:
        return isinstance(self.body, CompiledTemplate)


@dataclass(frozen=True)
class JoinNode(DirectiveNode):
    """Склейка элементов списка литеральным разделителем: $join:{, } items$"""
    separator: str
    items: Path


@dataclass(frozen=True)
class TxtNode(DirectiveNode):
    """Локализуемая строка: $txt:{Hello World}$"""
    key: str


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Результат компиляции: неизменяемая упорядоченная последовательность узлов.

    Безопасен для многократного и параллельного рендеринга.
    """
    nodes: Tuple[TemplateNode, ...] = ()
    name: str = field(default="", compare=False)

    def __iter__(self) -> Iterator[TemplateNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


__all__ = [
    "Path",
    "TemplateNode",
    "DirectiveNode",
    "TextNode",
    "AttrNode",
    "IncludeNode",
    "ApplyNode",
    "IfNode",
    "MapNode",
    "JoinNode",
    "TxtNode",
    "CompiledTemplate",
]
