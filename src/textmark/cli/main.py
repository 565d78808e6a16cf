"""Main CLI application.

Entry point for the ``textmark`` command: scan sources, consolidate the
catalog after a build, and inspect lookups.
"""

from pathlib import Path
from typing import Annotated

import typer

from textmark import __version__
from textmark.catalog import CatalogStore, catalog_stats
from textmark.cli.common import console, create_table, error, format_coverage, info, success, warn
from textmark.config import Settings, settings
from textmark.consolidate import consolidate_project
from textmark.errors import TextmarkError
from textmark.logging import configure_logging
from textmark.models import Locale
from textmark.paths import iter_source_files
from textmark.pseudo import pseudolocalize
from textmark.resolver import Resolver
from textmark.scanner import TextScanner

app = typer.Typer(
    name="textmark",
    help="Extract, key and resolve user-facing text in JSX/TSX sources.",
    add_completion=False,
    no_args_is_help=True,
)

ProjectRootOption = Annotated[
    Path | None,
    typer.Option(
        "--project-root",
        "-r",
        help="Project root holding the sink and catalog (default: discovered / cwd)",
        file_okay=False,
        resolve_path=True,
    ),
]


def _config(project_root: Path | None) -> Settings:
    if project_root is None:
        return settings
    return settings.model_copy(update={"project_root": project_root})


def _root(config: Settings) -> Path:
    return config.project_root or Path.cwd()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"textmark {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Emit log events as JSON lines")
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = False,
) -> None:
    configure_logging(level=log_level or settings.log_level, json_output=json_logs)


@app.command()
def scan(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to scan", exists=True)],
    write: Annotated[
        bool, typer.Option("--write", "-w", help="Write rewritten sources back in place")
    ] = False,
    project_root: ProjectRootOption = None,
) -> None:
    """Extract text from sources and append the records to the sink."""
    config = _config(project_root)
    scanner = TextScanner(config)
    files = iter_source_files(paths, config)
    if not files:
        warn("No JSX/TSX sources found")
        return

    table = create_table("Scanned sources", "File", "Strings")
    total = 0
    for path in files:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            warn(f"Cannot read {path}: {e}")
            continue
        result = scanner.scan(path, source)
        if not result.changed:
            continue
        total += len(result.records)
        table.add_row(str(path), str(len(result.records)))
        if write:
            path.write_text(result.code, encoding="utf-8")

    if total:
        console.print(table)
    verb = "Rewrote" if write else "Scanned"
    success(f"{verb} {len(files)} files, extracted {total} strings")


@app.command()
def consolidate(project_root: ProjectRootOption = None) -> None:
    """Merge the sink into the published catalog and clear the sink."""
    config = _config(project_root)
    report = consolidate_project(_root(config), config)
    if not report.ran:
        warn("Catalog left unchanged")
        raise typer.Exit(1)
    success(
        f"Catalog holds {report.strings} strings "
        f"({report.preserved} with translations kept, {report.dropped} dropped, {report.stale} stale)"
    )
    if report.skipped_lines:
        warn(f"Skipped {report.skipped_lines} corrupt sink lines")


@app.command()
def resolve(
    key: Annotated[str, typer.Argument(help="String key")],
    locale: Annotated[
        str, typer.Option("--locale", "-l", help="Locale to resolve for")
    ] = Locale.EN.value,
    project_root: ProjectRootOption = None,
) -> None:
    """Print the display text for KEY."""
    config = _config(project_root)
    resolver = Resolver(store=CatalogStore.for_project(_root(config), config))
    typer.echo(resolver.resolve(key, locale))


@app.command()
def pseudo(text: Annotated[str, typer.Argument(help="Text to pseudolocalize")]) -> None:
    """Print the pseudolocalized form of TEXT."""
    typer.echo(pseudolocalize(text))


@app.command()
def stats(project_root: ProjectRootOption = None) -> None:
    """Show per-locale translation coverage of the published catalog."""
    config = _config(project_root)
    store = CatalogStore.for_project(_root(config), config)
    if not store.exists():
        info(f"No catalog at {store.catalog_path}")
        return
    try:
        catalog = store.load()
    except TextmarkError as e:
        error(e.message)
        raise typer.Exit(1) from e

    table = create_table(f"{store.catalog_path.name}", "Locale", "Total", "Translated", "Pending", "Coverage")
    for locale, row in catalog_stats(catalog).items():
        table.add_row(
            locale,
            str(int(row["total"])),
            str(int(row["translated"])),
            str(int(row["pending"])),
            format_coverage(row["coverage"]),
        )
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
