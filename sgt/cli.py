from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional

from .config import EngineConfig, find_config, load_config
from .engine import TemplateEngine
from .errors import SgtUserError
from .i18n.builder import build_catalog
from .jsonic import dumps as jdumps
from .render.types import RenderOptions
from .report_schema import DiagnosticModel, KeyEntry, KeysReport, RenderReport
from .template.keys import extract_keys_from_file
from .version import tool_version
from .yamlio import read_yaml


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sgt",
        description="Simple text templates with $...$ directives",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="отладочный вывод в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Рендеринг шаблона в stdout")
    sp_render.add_argument(
        "template",
        help="путь к файлу шаблона или имя шаблона в templates_dir",
    )
    sp_render.add_argument("--data", metavar="FILE", help="данные в YAML или JSON (отображение верхнего уровня)")
    sp_render.add_argument("--locale", help="локаль для $txt$ (по умолчанию default_locale из конфига)")
    sp_render.add_argument("--domain", help="домен каталога переводов для $txt$")
    sp_render.add_argument("--quiet", action="store_true", help="не сообщать о неразрешенных атрибутах и шаблонах")
    sp_render.add_argument("--config", metavar="FILE", help="путь к sgt.yaml (по умолчанию ищется от текущего каталога)")
    sp_render.add_argument("--report", action="store_true", help="JSON-отчёт: текст и диагностики")

    sp_keys = sub.add_parser("keys", help="Локализуемые ключи шаблонов (JSON)")
    sp_keys.add_argument("files", nargs="+", metavar="FILE")

    sp_catalog = sub.add_parser("catalog", help="Сгенерировать заготовку каталога переводов")
    sp_catalog.add_argument("--target", required=True, metavar="DIR", help="каталог для <domain>.yaml")
    sp_catalog.add_argument("--domain", default="messages", help="имя домена (имя файла каталога)")
    sp_catalog.add_argument("files", nargs="+", metavar="FILE")

    return p


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("SGT_DEBUG") else logging.WARNING
    log = logging.getLogger("sgt")
    log.setLevel(level)
    # Повторный main() в одном процессе: stderr мог быть подменен
    for old in [h for h in log.handlers if getattr(h, "_sgt_cli", False)]:
        log.removeHandler(old)
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    h._sgt_cli = True  # type: ignore[attr-defined]
    log.addHandler(h)


def _load_engine_config(config_arg: Optional[str]) -> EngineConfig:
    if config_arg:
        path = Path(config_arg)
        if not path.is_file():
            raise SgtUserError(f"Config file not found: {path}")
        return load_config(path)
    found = find_config(Path.cwd())
    return load_config(found) if found is not None else EngineConfig()


def _load_data(data_arg: Optional[str]) -> Dict[str, Any]:
    if not data_arg:
        return {}
    path = Path(data_arg)
    if not path.is_file():
        raise SgtUserError(f"Data file not found: {path}")
    try:
        raw = read_yaml(path)
    except ValueError as e:
        raise SgtUserError(str(e)) from e
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise SgtUserError(f"Data file must contain a mapping at top level: {path}")
    return dict(raw)


def _run_render(ns: argparse.Namespace) -> int:
    cfg = _load_engine_config(ns.config)
    engine = TemplateEngine.from_config(cfg)

    # Существующий файл компилируем напрямую, иначе ищем по имени в загрузчике
    template_path = Path(ns.template)
    if template_path.is_file():
        template = engine.compile_file(template_path)
    else:
        template = engine.get_template(ns.template)

    options = RenderOptions(
        quiet=bool(ns.quiet) or cfg.quiet,
        locale=ns.locale or cfg.default_locale,
        domain=ns.domain or cfg.domain,
    )
    result = engine.render_with_diagnostics(template, _load_data(ns.data), options)

    if ns.report:
        report = RenderReport(
            template=ns.template,
            locale=options.locale,
            domain=options.domain,
            text=result.text,
            diagnostics=[
                DiagnosticModel(
                    kind=d.kind.value,
                    message=d.message,
                    target=d.target,
                    line=d.line,
                    column=d.column,
                )
                for d in result.diagnostics
            ],
        )
        sys.stdout.write(jdumps(report.model_dump(mode="json")))
        return 0

    sys.stdout.write(result.text)
    return 0


def _run_keys(ns: argparse.Namespace) -> int:
    entries = []
    for name in ns.files:
        for occ in extract_keys_from_file(Path(name)):
            entries.append(KeyEntry(file=Path(name).as_posix(), key=occ.key, line=occ.line))
    report = KeysReport(keys=entries)
    sys.stdout.write(jdumps(report.model_dump(mode="json")["keys"]))
    return 0


def _run_catalog(ns: argparse.Namespace) -> int:
    written = build_catalog(Path(ns.target), [Path(f) for f in ns.files], domain=ns.domain)
    sys.stdout.write(f"{written.as_posix()}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.verbose))

    try:
        if ns.cmd == "render":
            return _run_render(ns)

        if ns.cmd == "keys":
            return _run_keys(ns)

        if ns.cmd == "catalog":
            return _run_catalog(ns)

    except SgtUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
