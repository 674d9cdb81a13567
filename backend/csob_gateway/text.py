"""
Text shortening for gateway length limits.

The gateway rejects over-long fields instead of cutting them, so every
length-limited value goes through shorten() before it is signed.
"""
import re
from typing import Optional

WORD_SEPARATOR = re.compile(r"[\s.,/\-]")


def shorten(
    text: Optional[str],
    limit: int,
    ending: str = "",
    word_safe: bool = False
) -> str:
    """
    Trim text and cut it to at most `limit` characters.

    Args:
        text: Value to shorten (None is treated as empty)
        limit: Maximum length of the result, ending included
        ending: Marker appended when the text was cut (e.g. "...")
        word_safe: Cut at the last word boundary instead of mid-word

    Returns:
        The shortened text; unchanged (but trimmed) when it already fits
    """
    text = (text or "").strip()
    if len(text) <= limit:
        return text

    room = max(limit - len(ending), 0)
    cut = text[:room]

    if word_safe and not WORD_SEPARATOR.match(text[room:room + 1]):
        boundaries = [m.start() for m in WORD_SEPARATOR.finditer(cut)]
        # A single long word is cut hard rather than dropped
        if boundaries and boundaries[-1] > 0:
            cut = cut[:boundaries[-1]]

    cut = cut.rstrip(" \t\r\n.,/-")
    return cut + ending
