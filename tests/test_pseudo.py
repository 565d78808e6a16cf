"""Tests for pseudolocalization."""

from textmark.pseudo import PADDING, pseudolocalize


class TestPseudolocalize:
    def test_hello(self) -> None:
        assert pseudolocalize("Hello") == "[Ĥéļļó···]"

    def test_empty(self) -> None:
        """Empty input stays empty, no brackets."""
        assert pseudolocalize("") == ""

    def test_passthrough(self) -> None:
        """Digits, punctuation and non-Latin letters are not mapped."""
        assert pseudolocalize("42!") == f"[42!{PADDING}]"
        assert pseudolocalize("Привет") == f"[Привет{PADDING}]"

    def test_every_ascii_letter_is_mapped(self) -> None:
        letters = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
        body = pseudolocalize(letters)[1 : -1 - len(PADDING)]
        assert len(body) == len(letters)
        assert not any(a == b for a, b in zip(letters, body, strict=True))

    def test_spaces_kept(self) -> None:
        assert pseudolocalize("a b") == "[á ƀ···]"
