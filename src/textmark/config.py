"""Configuration for the textmark extraction pipeline."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables.

    Relative paths (sink, catalog, lookup module) are resolved against the
    project root, which is discovered from the file being processed unless
    ``project_root`` pins it.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXTMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Locations
    project_root: Path | None = Field(
        default=None,
        description="Project root holding the sink and catalog (discovered when unset)",
    )
    sink_filename: str = Field(
        default=".text-extraction.tmp",
        description="Append-only extraction log, relative to the project root",
    )
    catalog_path: str = Field(
        default=".next/extracted-strings.json",
        description="Published catalog data, relative to the project root",
    )
    lookup_module_path: str = Field(
        default=".next/extracted-strings.js",
        description="Generated standalone lookup module, relative to the project root",
    )

    # Rewriting
    runtime_module: str = Field(
        default="textmark/runtime",
        description=(
            "Import source injected into rewritten files. textmark ships no module at this "
            "path: the host bundler must resolve it, e.g. by aliasing it to the generated "
            "lookup module (lookup_module_path), which exports `t`"
        ),
    )
    lookup_function: str = Field(default="t", description="Name of the lookup call")
    locale_hook: str = Field(
        default="useLocale",
        description="Call whose destructured `locale` is forwarded to lookups",
    )
    extensions: list[str] = Field(
        default=[".jsx", ".tsx"],
        description="Markup-bearing file extensions",
    )
    skip_dirs: list[str] = Field(
        default=["node_modules", ".next", "dist"],
        description="Dependency and generated directories never scanned",
    )

    # Consolidation
    sort_catalog_keys: bool = Field(
        default=True,
        description="Serialize the catalog with keys in sorted order",
    )
    prune_stale: bool = Field(
        default=True,
        description="Drop catalog keys that were not extracted in the latest build",
    )

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        """Lower-case extensions and ensure the leading dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in value]

    def sink_path(self, project_root: Path) -> Path:
        return project_root / self.sink_filename

    def catalog_file(self, project_root: Path) -> Path:
        return project_root / self.catalog_path

    def lookup_module_file(self, project_root: Path) -> Path:
        return project_root / self.lookup_module_path


# Default settings instance
settings = Settings()
