"""Stable keys for extracted strings.

A key is the first 16 hex characters of ``sha256(text | file:component:path)``.
16 hex characters are 64 bits: with n strings the collision probability is
about n**2 / 2**65, which is below one in a billion for 100k strings. Two
strings share a key only when both text and context match.
"""

from __future__ import annotations

import hashlib

from textmark.models import StringContext

KEY_LENGTH = 16
TEXT_SEPARATOR = "|"
CONTEXT_SEPARATOR = ":"


def context_string(file: str, component: str, path: str) -> str:
    """Join the context parts in their fixed order."""
    return CONTEXT_SEPARATOR.join((file, component, path))


def identify(text: str, context: str) -> str:
    """Derive the key for ``text`` found at ``context``."""
    combined = f"{text}{TEXT_SEPARATOR}{context}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()[:KEY_LENGTH]


def identify_in(text: str, context: StringContext) -> str:
    """Derive the key for ``text`` from a structured context."""
    return identify(text, context_string(context.file, context.component, context.path))
