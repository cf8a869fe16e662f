"""Escaping helpers for option data embedded in a single-quoted script string.

The userscript template stores the option array as ``JSON.parse('...')``.
The JSON text therefore travels through a JavaScript string literal first,
which means quotes and JSON escape sequences carry one extra level of
escaping in the script source.
"""
from __future__ import annotations

from typing import Final, Tuple

# Ordered (embedded, plain) pairs; ``from_embedded`` applies them in order.
_UNESCAPE_STEPS: Final[Tuple[Tuple[str, str], ...]] = (
    ("\\'", "'"),
    ('\\\\"', '\\"'),
    ("\\\\n", "\\n"),
)

# Ordered (plain, embedded) pairs; ``to_embedded`` applies them in order.
_ESCAPE_STEPS: Final[Tuple[Tuple[str, str], ...]] = (
    ("'", "\\'"),
    ('\\"', '\\\\"'),
)


def from_embedded(text: str) -> str:
    """Return the JSON text carried by the script literal ``text``."""

    for embedded, plain in _UNESCAPE_STEPS:
        text = text.replace(embedded, plain)
    return text


def to_embedded(text: str) -> str:
    """Escape JSON ``text`` so it can sit inside ``JSON.parse('...')``."""

    for plain, embedded in _ESCAPE_STEPS:
        text = text.replace(plain, embedded)
    return text


__all__ = ["from_embedded", "to_embedded"]
