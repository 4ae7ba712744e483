"""
Компилятор шаблонов: лексер, парсер и AST.
"""

from __future__ import annotations

from .keys import KeyOccurrence, extract_keys, extract_keys_from_file
from .nodes import CompiledTemplate
from .parser import compile_template
from .tokens import ParseError

__all__ = [
    "CompiledTemplate",
    "ParseError",
    "KeyOccurrence",
    "compile_template",
    "extract_keys",
    "extract_keys_from_file",
]
