"""
Рендеринг скомпилированных шаблонов.
"""

from __future__ import annotations

from .diagnostics import Diagnostic, DiagnosticKind
from .renderer import TemplateRenderer
from .types import RenderOptions, RenderResult

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "RenderOptions",
    "RenderResult",
    "TemplateRenderer",
]
