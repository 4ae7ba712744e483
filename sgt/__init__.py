"""
sgt: компилятор и рендерер текстовых шаблонов с директивами $...$.

    >>> import sgt
    >>> tpl = sgt.compile("Hello $name$!")
    >>> sgt.render(tpl, {"name": "Filippo"})
    'Hello Filippo!'
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .data import (
    AdapterError,
    DataContext,
    NotEnoughKeysError,
    NotIndexableError,
    ResolutionError,
    TooManyKeysError,
    UndefinedAttributeError,
    to_mapping,
    to_mapping_with_names,
)
from .engine import Data, TemplateEngine
from .errors import SgtUserError
from .i18n import (
    CatalogError,
    CatalogFrozenError,
    TranslationCatalog,
    Translator,
    build_catalog,
)
from .loaders import ChainLoader, DictLoader, FileSystemLoader, TemplateLoader, TemplateLookupError
from .render import Diagnostic, DiagnosticKind, RenderOptions, RenderResult, TemplateRenderer
from .template import (
    CompiledTemplate,
    KeyOccurrence,
    ParseError,
    compile_template,
    extract_keys,
    extract_keys_from_file,
)


def compile(source: Union[str, bytes]) -> CompiledTemplate:
    """
    Компилирует текст шаблона (str или UTF-8 bytes).

    Raises:
        ParseError: При синтаксической ошибке
    """
    if isinstance(source, bytes):
        source = source.decode("utf-8")
    return compile_template(source)


def compile_file(path: Union[str, Path]) -> CompiledTemplate:
    """Компилирует файл шаблона. Ошибки чтения файла пробрасываются как есть."""
    path = Path(path)
    return compile_template(path.read_text(encoding="utf-8"), path.stem)


def render_with_diagnostics(
        compiled: CompiledTemplate,
        data: Data,
        options: Optional[RenderOptions] = None,
        *,
        loader: Optional[TemplateLoader] = None,
        translator: Optional[Translator] = None,
) -> RenderResult:
    """Рендерит шаблон и возвращает текст вместе со списком диагностик."""
    renderer = TemplateRenderer(loader=loader, translator=translator)
    return renderer.render(compiled, data, options)


def render(
        compiled: CompiledTemplate,
        data: Data,
        options: Optional[RenderOptions] = None,
        *,
        loader: Optional[TemplateLoader] = None,
        translator: Optional[Translator] = None,
) -> str:
    """Рендерит шаблон. Ошибки рендеринга не бросаются, а логируются (если не quiet)."""
    return render_with_diagnostics(compiled, data, options, loader=loader, translator=translator).text


def render_text(compiled: CompiledTemplate, data: Data, options: Optional[RenderOptions] = None, **kwargs) -> str:
    return render(compiled, data, options, **kwargs)


def render_bytes(compiled: CompiledTemplate, data: Data, options: Optional[RenderOptions] = None,
                 encoding: str = "utf-8", **kwargs) -> bytes:
    return render(compiled, data, options, **kwargs).encode(encoding)


__all__ = [
    # Компиляция
    "compile",
    "compile_file",
    "CompiledTemplate",
    "ParseError",
    # Рендеринг
    "render",
    "render_with_diagnostics",
    "render_text",
    "render_bytes",
    "RenderOptions",
    "RenderResult",
    "Diagnostic",
    "DiagnosticKind",
    "TemplateRenderer",
    "TemplateEngine",
    # Данные
    "DataContext",
    "ResolutionError",
    "UndefinedAttributeError",
    "NotIndexableError",
    "AdapterError",
    "NotEnoughKeysError",
    "TooManyKeysError",
    "to_mapping",
    "to_mapping_with_names",
    # Шаблоны по имени
    "TemplateLoader",
    "TemplateLookupError",
    "DictLoader",
    "FileSystemLoader",
    "ChainLoader",
    # Локализация
    "Translator",
    "TranslationCatalog",
    "CatalogError",
    "CatalogFrozenError",
    "KeyOccurrence",
    "extract_keys",
    "extract_keys_from_file",
    "build_catalog",
    "SgtUserError",
]
