"""Tests for settings loading."""

from pathlib import Path

import pytest

from textmark.config import Settings


class TestSettings:
    def test_defaults(self) -> None:
        config = Settings(_env_file=None)
        assert config.runtime_module == "textmark/runtime"
        assert config.extensions == [".jsx", ".tsx"]

    def test_runtime_module_must_be_provided_by_host(self) -> None:
        """The injected import is an alias the host resolves to the generated lookup module."""
        description = Settings.model_fields["runtime_module"].description
        assert "lookup_module_path" in description

    def test_runtime_module_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEXTMARK_RUNTIME_MODULE", "@/strings")
        assert Settings(_env_file=None).runtime_module == "@/strings"

    def test_extensions_normalized(self) -> None:
        assert Settings(_env_file=None, extensions=["JSX", ".TSX"]).extensions == [".jsx", ".tsx"]

    def test_paths_under_project_root(self, tmp_path: Path) -> None:
        config = Settings(_env_file=None)
        assert config.sink_path(tmp_path) == tmp_path / ".text-extraction.tmp"
        assert config.lookup_module_file(tmp_path) == tmp_path / ".next" / "extracted-strings.js"
