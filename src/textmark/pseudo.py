"""Pseudolocalization: accented, padded, bracketed text.

Makes hardcoded (never extracted) strings stand out when the pseudo locale is
active, and roughly simulates longer translations.
"""

from __future__ import annotations

PADDING = "···"

CHAR_MAP: dict[str, str] = {
    "a": "á", "b": "ƀ", "c": "ç", "d": "ð", "e": "é", "f": "ƒ", "g": "ĝ",
    "h": "ĥ", "i": "í", "j": "ĵ", "k": "ķ", "l": "ļ", "m": "ɱ", "n": "ñ",
    "o": "ó", "p": "þ", "q": "ǫ", "r": "ŕ", "s": "š", "t": "ţ", "u": "ú",
    "v": "ṽ", "w": "ŵ", "x": "ẋ", "y": "ý", "z": "ž",
    "A": "Á", "B": "Ɓ", "C": "Ç", "D": "Ð", "E": "É", "F": "Ƒ", "G": "Ĝ",
    "H": "Ĥ", "I": "Í", "J": "Ĵ", "K": "Ķ", "L": "Ļ", "M": "Ṁ", "N": "Ñ",
    "O": "Ó", "P": "Þ", "Q": "Ǫ", "R": "Ŕ", "S": "Š", "T": "Ţ", "U": "Ú",
    "V": "Ṽ", "W": "Ŵ", "X": "Ẋ", "Y": "Ý", "Z": "Ž",
}  # fmt: skip

_TABLE = str.maketrans(CHAR_MAP)


def pseudolocalize(text: str) -> str:
    """Return the pseudolocalized form of ``text``; empty input is returned as is."""
    if not text:
        return text
    return f"[{text.translate(_TABLE)}{PADDING}]"
