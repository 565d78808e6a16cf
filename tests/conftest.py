"""Shared fixtures for textmark tests.

The ``project`` fixture builds a small monorepo on disk:

    repo/
      pnpm-workspace.yaml
      apps/web/
        next.config.js
        src/app/
"""

from pathlib import Path

import pytest
import structlog

from textmark.catalog import CatalogStore
from textmark.config import Settings
from textmark.models import Locale
from textmark.resolver import set_locale, use_resolver
from textmark.sink import ExtractionSink

HOME_PAGE = """\
export default function Home() {
  return (
    <main>
      <h1>Hello</h1>
    </main>
  );
}
"""


@pytest.fixture(autouse=True)
def reset_runtime():
    """Restore process-wide state touched by a test."""
    yield
    set_locale(Locale.EN)
    use_resolver(None)
    structlog.reset_defaults()


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    (root / "pnpm-workspace.yaml").write_text("packages:\n  - apps/*\n", encoding="utf-8")
    return root


@pytest.fixture
def project(monorepo: Path) -> Path:
    """Next.js app inside the monorepo."""
    web = monorepo / "apps" / "web"
    (web / "src" / "app").mkdir(parents=True)
    (web / "next.config.js").write_text("module.exports = {};\n", encoding="utf-8")
    return web


@pytest.fixture
def config(project: Path) -> Settings:
    return Settings(_env_file=None, project_root=project)


@pytest.fixture
def sink(project: Path, config: Settings) -> ExtractionSink:
    return ExtractionSink(config.sink_path(project))


@pytest.fixture
def store(project: Path, config: Settings) -> CatalogStore:
    return CatalogStore.for_project(project, config)


@pytest.fixture
def page(project: Path) -> Path:
    path = project / "src" / "app" / "page.tsx"
    path.write_text(HOME_PAGE, encoding="utf-8")
    return path


@pytest.fixture
def home_source() -> str:
    return HOME_PAGE
