"""Full pipeline: scan a page, consolidate, translate, rebuild, resolve."""

import json
from pathlib import Path

from textmark.catalog import CatalogStore
from textmark.config import Settings
from textmark.consolidate import consolidate_project
from textmark.resolver import Resolver, locale_scope
from textmark.scanner import TextScanner

KEY = "074a1dff1df05759"


def _build(project: Path, page: Path, config: Settings) -> str:
    code = TextScanner(config).transform(page, page.read_text(encoding="utf-8"))
    assert consolidate_project(project, config).ran
    return code


class TestPipeline:
    def test_first_build(self, project: Path, page: Path, config: Settings) -> None:
        code = _build(project, page, config)

        assert f"<h1>{{t('{KEY}')}}</h1>" in code
        data = json.loads(config.catalog_file(project).read_text(encoding="utf-8"))
        assert data == {
            KEY: {
                "text": "Hello",
                "hash": KEY,
                "translations": {"en": "Hello", "ru": "", "pseudo": "[Ĥéļļó···]"},
                "context": {
                    "file": "apps/web/src/app/page.tsx",
                    "component": "Home",
                    "path": "main > h1",
                },
            }
        }
        assert not config.sink_path(project).exists()

        resolver = Resolver(store=CatalogStore.for_project(project, config))
        assert resolver.resolve(KEY, "en") == "Hello"
        assert resolver.resolve(KEY, "ru") == "Hello"

    def test_translation_survives_rebuild(self, project: Path, page: Path, config: Settings) -> None:
        _build(project, page, config)

        path = config.catalog_file(project)
        data = json.loads(path.read_text(encoding="utf-8"))
        data[KEY]["translations"]["ru"] = "Привет"
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

        _build(project, page, config)

        resolver = Resolver(store=CatalogStore.for_project(project, config))
        assert resolver.resolve(KEY, "ru") == "Привет"
        with locale_scope("pseudo"):
            assert resolver.resolve(KEY) == "[Ĥéļļó···]"
        assert resolver.resolve(KEY) == "Hello"

    def test_removed_string_dropped(self, project: Path, page: Path, config: Settings) -> None:
        _build(project, page, config)
        page.write_text(page.read_text(encoding="utf-8").replace("Hello", "Welcome"), encoding="utf-8")
        _build(project, page, config)

        catalog = CatalogStore.for_project(project, config).load()
        assert [entry.source_text for entry in catalog.values()] == ["Welcome"]
