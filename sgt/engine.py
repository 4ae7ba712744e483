"""
Движок шаблонов.

Публичный API, объединяющий компилятор, рендерер, загрузчик шаблонов
и каталог переводов в удобный интерфейс. Каталог создается и
замораживается один раз при построении движка, после чего движок
можно разделять между потоками.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from .config import EngineConfig
from .data.context import DataContext
from .i18n.catalog import DEFAULT_LOCALE, TranslationCatalog
from .i18n.protocols import Translator
from .loaders import FileSystemLoader, TemplateLoader, TemplateLookupError
from .render.renderer import TemplateRenderer
from .render.types import RenderOptions, RenderResult
from .template.nodes import CompiledTemplate
from .template.parser import compile_template

logger = logging.getLogger(__name__)

Data = Union[DataContext, Mapping, None]
TemplateRef = Union[CompiledTemplate, str]


class TemplateEngine:
    """
    Основной фасад для компиляции и рендеринга.
    """

    def __init__(
            self,
            loader: Optional[TemplateLoader] = None,
            translator: Optional[Translator] = None,
            default_locale: str = DEFAULT_LOCALE,
            options: Optional[RenderOptions] = None,
    ):
        """
        Args:
            loader: Источник именованных шаблонов
            translator: Хук локализации (обычно замороженный TranslationCatalog)
            default_locale: Локаль для $txt$, если опции ее не задают
            options: Опции рендеринга по умолчанию
        """
        self.loader = loader
        self.translator = translator
        self.options = options or RenderOptions()
        self.renderer = TemplateRenderer(loader=loader, translator=translator, default_locale=default_locale)

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> TemplateEngine:
        """Строит движок по конфигурации: файловый загрузчик и замороженный каталог."""
        loader = None
        if cfg.templates_dir is not None:
            loader = FileSystemLoader(cfg.templates_dir, suffix=cfg.template_suffix)

        translator = None
        if cfg.catalog_dir is not None:
            translator = TranslationCatalog.from_dir(cfg.catalog_dir)
            logger.debug("Catalog loaded: locales=%s domains=%s", translator.locales(), translator.domains())

        return cls(
            loader=loader,
            translator=translator,
            default_locale=cfg.default_locale,
            options=RenderOptions(quiet=cfg.quiet, domain=cfg.domain),
        )

    # ---- Компиляция ----

    def compile(self, source: Union[str, bytes], name: str = "") -> CompiledTemplate:
        """
        Компилирует текст шаблона.

        Raises:
            ParseError: При синтаксической ошибке
        """
        if isinstance(source, bytes):
            source = source.decode("utf-8")
        return compile_template(source, name)

    def compile_file(self, path: Union[str, Path]) -> CompiledTemplate:
        """Компилирует файл шаблона. Ошибки чтения файла пробрасываются как есть."""
        path = Path(path)
        return self.compile(path.read_bytes(), path.stem)

    def get_template(self, name: str) -> CompiledTemplate:
        """
        Получает именованный шаблон из загрузчика.

        Raises:
            TemplateLookupError: Если загрузчик не задан или шаблон не найден
        """
        if self.loader is None:
            raise TemplateLookupError(f"No template loader configured for '{name}'", name)
        return self.loader.load_template(name)

    # ---- Рендеринг ----

    def render_with_diagnostics(self, template: TemplateRef, data: Data, options: Optional[RenderOptions] = None) -> RenderResult:
        """
        Рендерит шаблон (скомпилированный или по имени из загрузчика).

        Returns:
            Текст и диагностики
        """
        if isinstance(template, str):
            template = self.get_template(template)
        return self.renderer.render(template, data, options or self.options)

    def render(self, template: TemplateRef, data: Data, options: Optional[RenderOptions] = None) -> str:
        return self.render_with_diagnostics(template, data, options).text

    def render_text(self, template: TemplateRef, data: Data, options: Optional[RenderOptions] = None) -> str:
        return self.render(template, data, options)

    def render_bytes(self, template: TemplateRef, data: Data, options: Optional[RenderOptions] = None,
                     encoding: str = "utf-8") -> bytes:
        return self.render(template, data, options).encode(encoding)


__all__ = ["TemplateEngine"]
