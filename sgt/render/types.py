from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .diagnostics import Diagnostic
from ..i18n.catalog import DEFAULT_DOMAIN


@dataclass(frozen=True)
class RenderOptions:
    """
    Опции одного рендеринга.

    quiet подавляет диагностику неразрешенных атрибутов и включений,
    но никогда не меняет сам результат.
    """
    quiet: bool = False
    locale: Optional[str] = None        # локаль для $txt$; None означает локаль движка по умолчанию
    domain: str = DEFAULT_DOMAIN        # домен каталога переводов для $txt$


@dataclass
class RenderResult:
    """Текст рендеринга и побочный список диагностик (пустой в режиме quiet)."""
    text: str
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def __str__(self) -> str:
        return self.text


__all__ = ["RenderOptions", "RenderResult"]
