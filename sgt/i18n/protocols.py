"""
Протокол хука локализации, который рендерер вызывает для $txt:{...}$.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class Translator(Protocol):
    """
    Источник переводов.

    translate возвращает перевод или None, если его нет; рендерер
    в этом случае выводит ключ как есть.
    """

    def translate(self, key: str, locale: str, domain: str) -> Optional[str]:
        ...


__all__ = ["Translator"]
