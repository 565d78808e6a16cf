"""Tests for key derivation."""

from textmark.identity import KEY_LENGTH, context_string, identify, identify_in
from textmark.models import StringContext

PAGE = "apps/web/src/app/page.tsx"


class TestIdentify:
    """Keys are stable across builds and machines."""

    def test_known_keys(self) -> None:
        """Keys match catalogs produced by earlier builds."""
        assert identify("Hello", f"{PAGE}:Home:main > h1") == "074a1dff1df05759"
        assert (
            identify("Turbopack File List Plugin Demo", f"{PAGE}:Home:main > h1")
            == "e26aa56ec27b4d9c"
        )
        assert (
            identify("After building, check", f"{PAGE}:Home:main > p:nth-child(2)")
            == "bde3a871ff902beb"
        )
        assert (
            identify(".next/list.json", f"{PAGE}:Home:main > p:nth-child(2) > code")
            == "0517b43d09692dd0"
        )

    def test_key_shape(self) -> None:
        key = identify("Hello", "a.tsx:App:div")
        assert len(key) == KEY_LENGTH
        assert all(c in "0123456789abcdef" for c in key)

    def test_deterministic(self) -> None:
        assert identify("Save", "a.tsx:Form:button") == identify("Save", "a.tsx:Form:button")

    def test_same_text_different_context(self) -> None:
        """Identical text in two places gets two keys."""
        assert identify("Save", "a.tsx:Form:button") != identify("Save", "b.tsx:Form:button")
        assert identify("Save", "a.tsx:Form:button") != identify("Save", "a.tsx:Dialog:button")

    def test_unicode_text(self) -> None:
        assert len(identify("Привет", "a.tsx:App:p")) == KEY_LENGTH


class TestContextString:
    def test_joins_in_order(self) -> None:
        assert context_string(PAGE, "Home", "main > h1") == f"{PAGE}:Home:main > h1"

    def test_structured_context(self) -> None:
        """identify_in and identify agree."""
        context = StringContext(file=PAGE, component="Home", path="main > h1")
        assert identify_in("Hello", context) == "074a1dff1df05759"

    def test_context_defaults(self) -> None:
        context = StringContext(file="a.tsx")
        assert identify_in("Hi", context) == identify("Hi", "a.tsx:default:root")
