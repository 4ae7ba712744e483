"""Тесты генерации шаблона каталога build_catalog."""

from pathlib import Path

import pytest
from ruamel.yaml import YAML

from sgt import ParseError, TranslationCatalog, build_catalog
from sgt.i18n.builder import collect_occurrences

from tests.infrastructure import write


@pytest.fixture
def sources(tmp_path: Path):
    a = write(tmp_path / "src" / "a.tpl", "$txt:{Hello World}$\n\n$txt:{Bye}$\n")
    b = write(tmp_path / "src" / "b.tpl", "x\n$if y$$txt:{Hello World}$$end if$\n")
    return [a, b]


class TestCollectOccurrences:

    def test_first_seen_order_and_all_refs(self, sources):
        occ = collect_occurrences(sources)

        assert list(occ) == ["Hello World", "Bye"]
        assert occ["Hello World"] == [f"{sources[0].as_posix()}:1", f"{sources[1].as_posix()}:2"]
        assert occ["Bye"] == [f"{sources[0].as_posix()}:3"]


class TestBuildCatalog:

    def test_writes_domain_file(self, tmp_path: Path, sources):
        target = tmp_path / "out" / "it"

        written = build_catalog(target, sources)

        assert written == target / "messages.yaml"
        assert written.is_file()
        data = YAML(typ="safe").load(written.read_text(encoding="utf-8"))
        assert data == {"Hello World": "", "Bye": ""}

    def test_comments_list_occurrences(self, tmp_path: Path, sources):
        written = build_catalog(tmp_path / "out", sources)

        lines = written.read_text(encoding="utf-8").splitlines()
        hello = next(line for line in lines if line.startswith("Hello World:"))
        assert f"{sources[0].as_posix()}:1" in hello
        assert f"{sources[1].as_posix()}:2" in hello
        assert "#" in hello

    def test_custom_domain(self, tmp_path: Path, sources):
        written = build_catalog(tmp_path, sources, domain="admin")

        assert written.name == "admin.yaml"

    def test_no_keys(self, tmp_path: Path):
        src = write(tmp_path / "plain.tpl", "no keys here")

        written = build_catalog(tmp_path / "out", [src])

        assert YAML(typ="safe").load(written.read_text(encoding="utf-8")) in (None, {})

    def test_output_loads_as_catalog(self, tmp_path: Path, sources):
        """Пустые переводы пропускаются: рендерер выведет сам ключ."""
        build_catalog(tmp_path / "locale" / "it", sources)

        cat = TranslationCatalog.from_dir(tmp_path / "locale")

        assert cat.translate("Hello World", "it") is None

    def test_invalid_source_raises(self, tmp_path: Path):
        bad = write(tmp_path / "bad.tpl", "$txt:{unterminated")

        with pytest.raises(ParseError):
            build_catalog(tmp_path / "out", [bad])

        assert not (tmp_path / "out" / "messages.yaml").exists()

    def test_missing_source_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            build_catalog(tmp_path / "out", [tmp_path / "absent.tpl"])
