"""Mark query occurrences inside display strings for result rendering."""

from __future__ import annotations

import re


HIGHLIGHT_STYLES = ("html", "plain")


def _wrap(matched_text: str, style: str) -> str:
    return f"<mark>{matched_text}</mark>" if style == "html" else f"[[{matched_text}]]"


def highlight(text: str, query: str, style: str = "html") -> str:
    """Wrap every case-insensitive occurrence of the trimmed query.

    Args:
        text: Display string to decorate.
        query: Raw query; regex metacharacters are matched literally.
        style: "html" for <mark>term</mark> or "plain" for [[term]].

    Returns:
        The text with matches wrapped, original casing preserved. Text is
        returned unchanged when either argument is empty.
    """
    if style not in HIGHLIGHT_STYLES:
        raise ValueError(f"Unknown highlight style: {style!r}")

    term = (query or "").strip()
    if not text or not term:
        return text

    pattern = re.compile(re.escape(term), re.IGNORECASE)
    return pattern.sub(lambda match: _wrap(match.group(0), style), text)
