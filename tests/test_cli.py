"""Tests for the textmark command line."""

from pathlib import Path

from typer.testing import CliRunner

from textmark.catalog import CatalogStore
from textmark.cli import app
from textmark.config import Settings

runner = CliRunner()


class TestPseudo:
    def test_prints_pseudo_text(self) -> None:
        result = runner.invoke(app, ["pseudo", "Hello"])
        assert result.exit_code == 0
        assert result.stdout == "[Ĥéļļó···]\n"


class TestScanAndConsolidate:
    def test_scan_writes_sources(self, project: Path, page: Path) -> None:
        result = runner.invoke(app, ["scan", str(project / "src"), "--write", "--project-root", str(project)])
        assert result.exit_code == 0, result.output
        assert "{t('074a1dff1df05759')}" in page.read_text(encoding="utf-8")
        assert (project / ".text-extraction.tmp").is_file()

    def test_scan_without_write_keeps_sources(self, project: Path, page: Path) -> None:
        before = page.read_text(encoding="utf-8")
        result = runner.invoke(app, ["scan", str(page), "--project-root", str(project)])
        assert result.exit_code == 0, result.output
        assert page.read_text(encoding="utf-8") == before

    def test_scan_then_consolidate(self, project: Path, page: Path, config: Settings) -> None:
        runner.invoke(app, ["scan", str(page), "--project-root", str(project)])
        result = runner.invoke(app, ["consolidate", "--project-root", str(project)])
        assert result.exit_code == 0, result.output
        catalog = CatalogStore.for_project(project, config).load()
        assert list(catalog) == ["074a1dff1df05759"]

    def test_consolidate_without_sink(self, project: Path) -> None:
        result = runner.invoke(app, ["consolidate", "--project-root", str(project)])
        assert result.exit_code == 1


class TestResolve:
    def test_resolve(self, project: Path, page: Path) -> None:
        runner.invoke(app, ["scan", str(page), "--project-root", str(project)])
        runner.invoke(app, ["consolidate", "--project-root", str(project)])

        result = runner.invoke(
            app, ["resolve", "074a1dff1df05759", "--locale", "pseudo", "--project-root", str(project)]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout == "[Ĥéļļó···]\n"

    def test_unknown_key(self, project: Path) -> None:
        result = runner.invoke(app, ["resolve", "0123456789abcdef", "--project-root", str(project)])
        assert result.stdout == "[01234567]\n"


class TestStats:
    def test_no_catalog(self, project: Path) -> None:
        result = runner.invoke(app, ["stats", "--project-root", str(project)])
        assert result.exit_code == 0
        assert "No catalog" in result.stdout

    def test_coverage_table(self, project: Path, page: Path) -> None:
        runner.invoke(app, ["scan", str(page), "--project-root", str(project)])
        runner.invoke(app, ["consolidate", "--project-root", str(project)])
        result = runner.invoke(app, ["stats", "--project-root", str(project)])
        assert result.exit_code == 0, result.output
        assert "pseudo" in result.stdout
        assert "100.0%" in result.stdout
