"""
Конфигурация движка шаблонов.

Необязательный файл sgt.yaml:

    templates_dir: templates
    template_suffix: .tpl
    catalog_dir: locale
    default_locale: en
    domain: messages
    quiet: false

Относительные пути отсчитываются от каталога, где лежит файл.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import SgtUserError
from .i18n.catalog import DEFAULT_DOMAIN, DEFAULT_LOCALE
from .yamlio import read_yaml_map

CONFIG_FILE = "sgt.yaml"


class ConfigError(SgtUserError):
    """Ошибка загрузки конфигурации с указанием поля."""
    pass


@dataclass(frozen=True)
class EngineConfig:
    templates_dir: Optional[Path] = None
    template_suffix: str = ".tpl"
    catalog_dir: Optional[Path] = None
    default_locale: str = DEFAULT_LOCALE
    domain: str = DEFAULT_DOMAIN
    quiet: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Path) -> EngineConfig:
        """Создание экземпляра из словаря (из YAML)."""
        known = {"templates_dir", "template_suffix", "catalog_dir", "default_locale", "domain", "quiet"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        quiet = data.get("quiet", False)
        if not isinstance(quiet, bool):
            raise ConfigError(f"quiet: expected boolean, got {type(quiet).__name__}")

        return cls(
            templates_dir=_dir_field(data, "templates_dir", base_dir),
            template_suffix=_str_field(data, "template_suffix", ".tpl"),
            catalog_dir=_dir_field(data, "catalog_dir", base_dir),
            default_locale=_str_field(data, "default_locale", DEFAULT_LOCALE),
            domain=_str_field(data, "domain", DEFAULT_DOMAIN),
            quiet=quiet,
        )


def _str_field(data: Dict[str, Any], name: str, default: str) -> str:
    value = data.get(name, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{name}: expected non-empty string, got {value!r}")
    return value


def _dir_field(data: Dict[str, Any], name: str, base_dir: Path) -> Optional[Path]:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{name}: expected path string, got {value!r}")
    return (base_dir / value).resolve()


def load_config(path: Path) -> EngineConfig:
    """
    Загружает конфигурацию. Для отсутствующего файла возвращает конфигурацию по умолчанию.

    Raises:
        ConfigError: Если документ не отображение или поля некорректны
    """
    path = Path(path)
    if not path.is_file():
        return EngineConfig()
    try:
        raw = read_yaml_map(path)
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return EngineConfig.from_dict(raw, path.parent.resolve())


def find_config(start: Path) -> Optional[Path]:
    """Ищет sgt.yaml в start и его родителях."""
    start = Path(start).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


__all__ = ["CONFIG_FILE", "ConfigError", "EngineConfig", "load_config", "find_config"]
