"""Text normalisation applied before sentence-based chunking."""

from __future__ import annotations

import re

_REPLACEMENTS = {
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
}
_TRANSLATION = str.maketrans(_REPLACEMENTS)
_NON_ASCII = re.compile(r"[^\x20-\x7E\n\r\t]")


def sanitize_text(text: str) -> str:
    """Reduce *text* to printable ASCII plus tabs and line breaks.

    Smart quotes and en/em dashes are mapped to their ASCII equivalents
    first, so they survive the stripping of every other non-ASCII character.
    """
    return _NON_ASCII.sub("", text.translate(_TRANSLATION))
