"""Cleaning of free text typed by members and physicians before it is stored"""

import html
import re

# Chat messages, ticket bodies and medical questions share this cap
MAX_TEXT_LENGTH = 5000
MAX_TITLE_LENGTH = 255

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def clean_text(value, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Trim, drop control characters and HTML-escape user text.

    The length cap applies to what the user typed, before escaping, so text
    with a few "<" characters is not rejected for growing when escaped.
    Returns "" for empty input; raises ValueError when the text is too long.
    """
    if not value:
        return ""

    text = _CONTROL_CHARS.sub("", str(value).replace("\r\n", "\n")).strip()
    if len(text) > max_length:
        raise ValueError(f"Text exceeds maximum length of {max_length} characters")

    return html.escape(text, quote=True)
