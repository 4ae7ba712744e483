"""
Рендерер скомпилированных шаблонов.

Чистый рекурсивный обход дерева: каждый узел превращается в текст,
результаты склеиваются в исходном порядке. Состояние одного вызова
(диагностики, стек включений) живет в _RenderState, поэтому один
экземпляр рендерера можно использовать из нескольких потоков.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, Union

from .diagnostics import Diagnostic, DiagnosticKind
from .types import RenderOptions, RenderResult
from ..data.context import DataContext, MISSING
from ..data.resolver import ResolutionError, resolve
from ..data.values import ValueKind, classify, is_empty, to_text
from ..i18n.catalog import DEFAULT_LOCALE
from ..i18n.protocols import Translator
from ..loaders import TemplateLoader, TemplateLookupError
from ..template.nodes import (
    TemplateNode, DirectiveNode, TextNode, AttrNode, IncludeNode, ApplyNode,
    IfNode, MapNode, JoinNode, TxtNode, CompiledTemplate,
)
from ..template.parser import compile_template
from ..template.tokens import ParseError

logger = logging.getLogger(__name__)

# Предел вложенности include/map; рекурсия по данным обрывается здесь
MAX_NESTING_DEPTH = 100


@dataclass
class _RenderState:
    """Изменяемое состояние одного вызова render."""
    options: RenderOptions
    diagnostics: List[Diagnostic] = field(default_factory=list)
    include_stack: List[str] = field(default_factory=list)
    depth: int = 0


NodeHandler = Callable[[Any, DataContext, _RenderState], str]


class TemplateRenderer:
    """
    Вычисляет CompiledTemplate в контексте данных.

    Ошибки разрешения атрибутов, включений и типов списков не прерывают
    рендеринг: узел выводит пустую строку, ошибка попадает в диагностики
    (если не задан quiet). Исключения из пользовательских функций
    пробрасываются.
    """

    def __init__(
            self,
            loader: Optional[TemplateLoader] = None,
            translator: Optional[Translator] = None,
            default_locale: str = DEFAULT_LOCALE,
    ):
        """
        Args:
            loader: Источник шаблонов для $include$ и $map name ...$
            translator: Хук локализации для $txt:{...}$
            default_locale: Локаль, если в опциях она не задана
        """
        self.loader = loader
        self.translator = translator
        self.default_locale = default_locale

        self._handlers: Dict[Type[TemplateNode], NodeHandler] = {
            TextNode: self._render_text,
            AttrNode: self._render_attr,
            IncludeNode: self._render_include,
            ApplyNode: self._render_apply,
            IfNode: self._render_if,
            MapNode: self._render_map,
            JoinNode: self._render_join,
            TxtNode: self._render_txt,
        }

    def render(
            self,
            template: CompiledTemplate,
            data: Union[DataContext, Mapping, None],
            options: Optional[RenderOptions] = None,
    ) -> RenderResult:
        """
        Рендерит шаблон.

        Args:
            template: Скомпилированный шаблон
            data: Отображение верхнего уровня или готовый DataContext
            options: Опции рендеринга

        Returns:
            Текст и список диагностик
        """
        state = _RenderState(options=options or RenderOptions())
        if template.name:
            state.include_stack.append(template.name)
        text = self._render_nodes(template.nodes, DataContext.of(data), state)
        return RenderResult(text=text, diagnostics=list(state.diagnostics))

    # ---- Обход ----

    def _render_nodes(self, nodes: Sequence[TemplateNode], ctx: DataContext, state: _RenderState) -> str:
        return "".join(self._render_node(node, ctx, state) for node in nodes)

    def _render_node(self, node: TemplateNode, ctx: DataContext, state: _RenderState) -> str:
        handler = self._handlers.get(type(node))
        if handler is None:
            raise TypeError(f"No renderer for node type: {type(node).__name__}")
        return handler(node, ctx, state)

    # ---- Узлы ----

    def _render_text(self, node: TextNode, ctx: DataContext, state: _RenderState) -> str:
        return node.text

    def _render_attr(self, node: AttrNode, ctx: DataContext, state: _RenderState) -> str:
        try:
            value = resolve(node.path, ctx)
        except ResolutionError as e:
            self._report(state, DiagnosticKind.ATTRIBUTE, str(e), node, e.dotted_path)
            return ""
        return to_text(value)

    def _render_include(self, node: IncludeNode, ctx: DataContext, state: _RenderState) -> str:
        if not self._enter(node.name, node, state):
            return ""
        try:
            template = self._lookup_template(node.name, node, ctx, state)
            if template is None:
                return ""
            # Включаемый шаблон видит тот же контекст, что и включающий
            return self._render_nodes(template.nodes, ctx, state)
        finally:
            self._leave(node.name, state)

    def _render_apply(self, node: ApplyNode, ctx: DataContext, state: _RenderState) -> str:
        try:
            func = resolve(node.func, ctx, invoke=False)
        except ResolutionError as e:
            self._report(state, DiagnosticKind.ATTRIBUTE, str(e), node, e.dotted_path)
            return ""

        # Не функция: выводим значение как есть, аргумент не разрешаем
        if classify(func) != ValueKind.CALLABLE:
            return to_text(func)

        try:
            arg = resolve(node.arg, ctx)
        except ResolutionError as e:
            self._report(state, DiagnosticKind.ATTRIBUTE, str(e), node, e.dotted_path)
            return ""
        return to_text(func(arg))

    def _render_if(self, node: IfNode, ctx: DataContext, state: _RenderState) -> str:
        try:
            truthy = not is_empty(resolve(node.condition, ctx))
        except ResolutionError:
            truthy = False

        if truthy:
            return self._render_nodes(node.body, ctx, state)
        if node.else_body is not None:
            return self._render_nodes(node.else_body, ctx, state)
        return ""

    def _render_map(self, node: MapNode, ctx: DataContext, state: _RenderState) -> str:
        items = self._resolve_list(node, ctx, state)
        if not items:
            return ""

        name = None if isinstance(node.body, CompiledTemplate) else node.body
        if not self._enter(name, node, state):
            return ""
        try:
            return self._map_items(node, items, name, ctx, state)
        finally:
            self._leave(name, state)

    def _map_items(
            self,
            node: MapNode,
            items: Sequence[Any],
            name: Optional[str],
            ctx: DataContext,
            state: _RenderState,
    ) -> str:
        if name is None:
            template: Optional[CompiledTemplate] = node.body
        else:
            template = self._lookup_template(name, node, ctx, state)
        if template is None:
            return ""

        parts: List[str] = []
        for index, item in enumerate(items):
            if classify(item) != ValueKind.MAPPING:
                self._report(
                    state, DiagnosticKind.LIST_TYPE,
                    f"Element {index} of '{'.'.join(node.items)}' is not a mapping",
                    node, ".".join(node.items)
                )
                continue
            # Элемент становится внутренней областью; внешние атрибуты доступны через цепочку
            parts.append(self._render_nodes(template.nodes, ctx.push(item), state))
        return "".join(parts)

    def _render_join(self, node: JoinNode, ctx: DataContext, state: _RenderState) -> str:
        items = self._resolve_list(node, ctx, state)
        if items is None:
            return ""
        return node.separator.join(self._item_text(item, ctx) for item in items)

    def _render_txt(self, node: TxtNode, ctx: DataContext, state: _RenderState) -> str:
        if self.translator is None:
            return node.key
        locale = state.options.locale or self.default_locale
        translated = self.translator.translate(node.key, locale, state.options.domain)
        return node.key if translated is None else translated

    # ---- Вспомогательные методы ----

    def _enter(self, name: Optional[str], node: DirectiveNode, state: _RenderState) -> bool:
        """
        Входит на следующий уровень include/map.

        Возвращает False (и сообщает об ошибке), если предел вложенности
        исчерпан. Встроенное тело map имени не имеет и в цепочку не попадает.
        """
        if state.depth >= MAX_NESTING_DEPTH:
            chain = _recursion_chain(state.include_stack, name)
            self._report(
                state, DiagnosticKind.INCLUDE,
                f"Template nesting exceeds {MAX_NESTING_DEPTH} levels: {chain}",
                node, name or ".".join(getattr(node, "items", ()))
            )
            return False
        state.depth += 1
        if name is not None:
            state.include_stack.append(name)
        return True

    @staticmethod
    def _leave(name: Optional[str], state: _RenderState) -> None:
        state.depth -= 1
        if name is not None:
            state.include_stack.pop()

    def _resolve_list(self, node: Union[MapNode, JoinNode], ctx: DataContext, state: _RenderState) -> Optional[Sequence[Any]]:
        """Разрешает путь списка для map/join; при ошибке сообщает и возвращает None."""
        dotted = ".".join(node.items)
        try:
            value = resolve(node.items, ctx)
        except ResolutionError as e:
            self._report(state, DiagnosticKind.ATTRIBUTE, str(e), node, dotted)
            return None

        kind = classify(value)
        if kind != ValueKind.LIST:
            self._report(state, DiagnosticKind.LIST_TYPE, f"'{dotted}' is not a list (got {kind.value})", node, dotted)
            return None
        return value

    @staticmethod
    def _item_text(item: Any, ctx: DataContext) -> str:
        """
        Текст одного элемента $join$.

        Скаляр выводится как есть, у отображения склеиваются скалярные
        значения полей, функция вызывается с корневым отображением.
        """
        kind = classify(item)
        if kind == ValueKind.CALLABLE:
            return to_text(item(ctx.root))
        if kind == ValueKind.MAPPING:
            values = item.values()
        elif kind == ValueKind.LIST:
            values = item
        else:
            return to_text(item)
        return "".join(to_text(v) for v in values if classify(v) == ValueKind.SCALAR)

    def _lookup_template(self, name: str, node: DirectiveNode, ctx: DataContext, state: _RenderState) -> Optional[CompiledTemplate]:
        """
        Ищет шаблон по имени: сначала в загрузчике, затем среди данных
        (скомпилированный шаблон или исходный текст под этим именем).
        """
        lookup_error: Optional[TemplateLookupError] = None
        if self.loader is not None:
            try:
                return self.loader.load_template(name)
            except TemplateLookupError as e:
                lookup_error = e
            except ParseError as e:
                self._report(state, DiagnosticKind.INCLUDE, f"Failed to compile template '{name}': {e}", node, name)
                return None

        bound = ctx.lookup(name)
        if isinstance(bound, CompiledTemplate):
            return bound
        if isinstance(bound, str):
            try:
                return compile_template(bound, name)
            except ParseError as e:
                self._report(state, DiagnosticKind.INCLUDE, f"Failed to compile template '{name}': {e}", node, name)
                return None

        message = str(lookup_error) if lookup_error is not None else f"Template not found: {name}"
        if bound is not MISSING and lookup_error is None:
            message = f"Attribute '{name}' is not a template"
        self._report(state, DiagnosticKind.INCLUDE, message, node, name)
        return None

    @staticmethod
    def _report(state: _RenderState, kind: DiagnosticKind, message: str, node: DirectiveNode, target: str) -> None:
        if state.options.quiet:
            return
        diagnostic = Diagnostic(kind=kind, message=message, target=target, line=node.line, column=node.column)
        state.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)


def _recursion_chain(stack: List[str], name: Optional[str]) -> str:
    """Хвост стека шаблонов от последнего повтора, например 'a → b → a'."""
    chain = stack + [name] if name is not None else list(stack)
    if not chain:
        return "<inline map>"
    last = chain[-1]
    for index in range(len(chain) - 2, -1, -1):
        if chain[index] == last:
            chain = chain[index:]
            break
    return " → ".join(chain)


__all__ = ["MAX_NESTING_DEPTH", "TemplateRenderer"]
