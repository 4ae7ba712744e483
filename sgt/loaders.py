"""
Загрузчики шаблонов для директив $include$ и $map name ...$.

Загрузчик по имени возвращает скомпилированный шаблон. Кэширования нет:
каждый поиск компилирует шаблон заново, кэшированием занимается вызывающий код.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from .errors import SgtUserError
from .template.nodes import CompiledTemplate
from .template.parser import compile_template

logger = logging.getLogger(__name__)


class TemplateLookupError(SgtUserError):
    """Шаблон с указанным именем не найден."""

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name


@runtime_checkable
class TemplateLoader(Protocol):
    """
    Протокол загрузчика шаблонов.

    load_template бросает TemplateLookupError для отсутствующего шаблона
    и ParseError для шаблона, который не компилируется.
    """

    def load_template(self, name: str) -> CompiledTemplate:
        ...


class DictLoader:
    """Реестр шаблонов в памяти: имя → исходный текст или CompiledTemplate."""

    def __init__(self, templates: Mapping[str, Union[str, CompiledTemplate]]):
        self.templates = dict(templates)

    def load_template(self, name: str) -> CompiledTemplate:
        if name not in self.templates:
            raise TemplateLookupError(f"Template not found: {name}", name)
        template = self.templates[name]
        if isinstance(template, CompiledTemplate):
            return template
        return compile_template(template, name)


class FileSystemLoader:
    """
    Загрузчик шаблонов из каталога: <directory>/<name><suffix>.

    Имена могут содержать подкаталоги ("mail/footer"), но не выходить
    за пределы корня.
    """

    def __init__(self, directory: Union[str, Path], suffix: str = ".tpl", encoding: str = "utf-8"):
        self.directory = Path(directory)
        self.suffix = suffix
        self.encoding = encoding

    def template_path(self, name: str) -> Path:
        """Путь к файлу шаблона с проверкой выхода за корень."""
        root = self.directory.resolve()
        path = (root / f"{name}{self.suffix}").resolve()
        if not path.is_relative_to(root):
            raise TemplateLookupError(f"Template name escapes template directory: {name}", name)
        return path

    def load_template(self, name: str) -> CompiledTemplate:
        path = self.template_path(name)
        if not path.is_file():
            raise TemplateLookupError(f"Template not found: {name} ({path})", name)
        logger.debug("Loading template '%s' from %s", name, path)
        return compile_template(path.read_text(encoding=self.encoding), name)


class ChainLoader:
    """Опрашивает загрузчики по порядку; побеждает первый, нашедший шаблон."""

    def __init__(self, *loaders: TemplateLoader):
        self.loaders = list(loaders)

    def load_template(self, name: str) -> CompiledTemplate:
        for loader in self.loaders:
            try:
                return loader.load_template(name)
            except TemplateLookupError:
                continue
        raise TemplateLookupError(f"Template not found: {name}", name)


__all__ = [
    "TemplateLookupError",
    "TemplateLoader",
    "DictLoader",
    "FileSystemLoader",
    "ChainLoader",
]
