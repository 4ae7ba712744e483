import logging
from pathlib import Path

import pytest

from sgt import DictLoader, TranslationCatalog

from tests.infrastructure import write_project


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Минимальный проект: sgt.yaml, каталог шаблонов и каталоги переводов en/it."""
    return write_project(tmp_path, {
        "sgt.yaml": """
            templates_dir: templates
            catalog_dir: locale
            default_locale: en
        """,
        "templates/header.tpl": "<h1>$title$</h1>",
        "templates/li.tpl": "<li>$username$</li>",
        "templates/page.tpl": "$include header$<ul>$map li users$</ul>",
        "templates/mail/footer.tpl": "-- $txt:{Regards}$",
        "locale/en/messages.yaml": """
            Hello World: Hello World
            Regards: Regards
        """,
        "locale/it/messages.yaml": """
            Hello World: Ciao Mondo
            Regards: Saluti
        """,
        "locale/it/errors.yaml": """
            Not found: Non trovato
        """,
    })


@pytest.fixture
def loader() -> DictLoader:
    """Реестр шаблонов в памяти для $include$ и $map name ...$."""
    return DictLoader({
        "header": "<h1>$title$</h1>",
        "li": "<li>$username$</li>",
        "broken": "$if x$never closed",
    })


@pytest.fixture
def catalog() -> TranslationCatalog:
    """Замороженный каталог с итальянскими переводами."""
    cat = TranslationCatalog()
    cat.add("it", "messages", {"Hello World": "Ciao Mondo", "Empty": ""})
    cat.add("it", "errors", {"Not found": "Non trovato"})
    return cat.freeze()


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    # уровень логирования CLI не должен зависеть от окружения разработчика
    monkeypatch.delenv("SGT_DEBUG", raising=False)


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    # main() вешает обработчик на логгер "sgt"; между тестами он не нужен
    yield
    log = logging.getLogger("sgt")
    for handler in [h for h in log.handlers if getattr(h, "_sgt_cli", False)]:
        log.removeHandler(handler)
    log.setLevel(logging.NOTSET)
