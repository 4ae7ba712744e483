"""
Тесты публичного API пакета sgt и движка TemplateEngine.
"""

from pathlib import Path

import pytest

import sgt
from sgt import (
    DictLoader,
    RenderOptions,
    TemplateEngine,
    TemplateLookupError,
    TranslationCatalog,
)
from sgt.config import load_config

from tests.infrastructure import write


class TestFacade:

    def test_compile_and_render(self):
        compiled = sgt.compile("Hello $name$!")

        assert sgt.render(compiled, {"name": "Filippo"}) == "Hello Filippo!"

    def test_compile_bytes(self):
        compiled = sgt.compile("Città: $x$".encode("utf-8"))

        assert sgt.render(compiled, {"x": 1}) == "Città: 1"

    def test_compile_error(self):
        with pytest.raises(sgt.ParseError):
            sgt.compile("$if a$")

    def test_compile_file(self, tmp_path: Path):
        path = write(tmp_path / "greet.tpl", "Hi $name$")

        compiled = sgt.compile_file(path)

        assert compiled.name == "greet"
        assert sgt.render(compiled, {"name": "A"}) == "Hi A"

    def test_compile_file_read_error_untouched(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            sgt.compile_file(tmp_path / "absent.tpl")

    def test_render_text_and_bytes(self):
        compiled = sgt.compile("è $x$")

        assert sgt.render_text(compiled, {"x": "ok"}) == "è ok"
        assert sgt.render_bytes(compiled, {"x": "ok"}) == "è ok".encode("utf-8")
        assert sgt.render_bytes(compiled, {"x": "ok"}, encoding="latin-1") == "è ok".encode("latin-1")

    def test_render_with_collaborators(self, loader, catalog):
        compiled = sgt.compile("$include header$ $txt:{Hello World}$")

        text = sgt.render(compiled, {"title": "T"}, RenderOptions(locale="it"), loader=loader, translator=catalog)

        assert text == "<h1>T</h1> Ciao Mondo"

    def test_render_none_data(self):
        assert sgt.render(sgt.compile("x$y$"), None, RenderOptions(quiet=True)) == "x"

    def test_public_names(self):
        for name in sgt.__all__:
            assert hasattr(sgt, name), name


class TestTemplateEngine:

    def test_render_compiled(self):
        engine = TemplateEngine()

        assert engine.render(engine.compile("$a$"), {"a": 1}) == "1"

    def test_render_by_name(self, loader):
        engine = TemplateEngine(loader=loader)

        assert engine.render("header", {"title": "T"}) == "<h1>T</h1>"

    def test_get_template_without_loader(self):
        with pytest.raises(TemplateLookupError, match="No template loader configured"):
            TemplateEngine().get_template("x")

    def test_default_options(self):
        engine = TemplateEngine(options=RenderOptions(quiet=True))

        assert engine.render_with_diagnostics(engine.compile("$missing$"), {}).diagnostics == []

    def test_explicit_options_override_defaults(self):
        engine = TemplateEngine(options=RenderOptions(quiet=True))
        result = engine.render_with_diagnostics(engine.compile("$missing$"), {}, RenderOptions())

        assert len(result.diagnostics) == 1

    def test_default_locale(self):
        catalog = TranslationCatalog()
        catalog.add("it", "messages", {"Hi": "Ciao"})
        engine = TemplateEngine(translator=catalog.freeze(), default_locale="it")

        assert engine.render(engine.compile("$txt:{Hi}$"), {}) == "Ciao"

    def test_render_bytes(self):
        engine = TemplateEngine(loader=DictLoader({"t": "ü"}))

        assert engine.render_bytes("t", {}) == "ü".encode("utf-8")
        assert engine.render_text("t", {}) == "ü"

    def test_compile_file(self, tmp_path: Path):
        path = write(tmp_path / "x.tpl", "$a$")

        assert TemplateEngine().compile_file(path).name == "x"

    def test_from_config(self, project: Path):
        engine = TemplateEngine.from_config(load_config(project / "sgt.yaml"))
        data = {"title": "Users", "users": [{"username": "a"}]}

        assert engine.render("page", data) == "<h1>Users</h1><ul><li>a</li></ul>"
        assert isinstance(engine.translator, TranslationCatalog)
        assert engine.translator.frozen
        assert engine.render("mail/footer", {}, RenderOptions(locale="it")) == "-- Saluti"
        assert engine.render("mail/footer", {}) == "-- Regards"

    def test_from_config_options(self, tmp_path: Path):
        write(tmp_path / "sgt.yaml", "quiet: true\ndomain: errors\n")
        engine = TemplateEngine.from_config(load_config(tmp_path / "sgt.yaml"))

        assert engine.loader is None
        assert engine.translator is None
        assert engine.options == RenderOptions(quiet=True, domain="errors")

    def test_from_config_missing_catalog_dir(self, tmp_path: Path):
        write(tmp_path / "sgt.yaml", "catalog_dir: nope\n")

        with pytest.raises(sgt.CatalogError):
            TemplateEngine.from_config(load_config(tmp_path / "sgt.yaml"))
