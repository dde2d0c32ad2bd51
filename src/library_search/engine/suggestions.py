"""Autocomplete candidates drawn from names, developers and aliases.

Priorities (higher first):
    4  candidate equals the query
    3  candidate starts with the query
    2  query found in the romanization of a CJK title
    1  candidate contains the query, or query found in the pinyin initials
       (initials need at least 2 characters)

A pinyin hit suggests the original CJK title, never the romanized text.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from library_search.engine.indexer import normalize_text
from library_search.models import SearchableRecord, SuggestionItem


DEFAULT_SUGGESTION_LIMIT = 8
PINYIN_INITIALS_MIN_LENGTH = 2

PRIORITY_EXACT = 4
PRIORITY_PREFIX = 3
PRIORITY_PINYIN = 2
PRIORITY_CONTAINS = 1
PRIORITY_PINYIN_INITIALS = 1


def _candidates(record: SearchableRecord) -> Iterator[str]:
    # Developer placeholder entries are not suggestions
    developers = record.developer_names if record.developer_keys else ()
    for text in (record.primary_name, record.alternate_name, *developers, *record.alias_names):
        if text:
            yield text


def _literal_priority(query: str, text: str) -> int | None:
    lowered = text.lower()
    if lowered == query:
        return PRIORITY_EXACT
    if lowered.startswith(query):
        return PRIORITY_PREFIX
    if query in lowered:
        return PRIORITY_CONTAINS
    return None


def _pinyin_priority(query: str, record: SearchableRecord) -> int | None:
    if not record.has_cjk or not record.pinyin_full:
        return None
    if query in record.pinyin_full or query in record.pinyin_spaced:
        return PRIORITY_PINYIN
    if len(query) >= PINYIN_INITIALS_MIN_LENGTH and query in record.pinyin_initials:
        return PRIORITY_PINYIN_INITIALS
    return None


def collect_suggestions(query: str, records: Sequence[SearchableRecord]) -> list[SuggestionItem]:
    """Every candidate for an already normalized query, in collection order."""
    items: list[SuggestionItem] = []
    for record in records:
        for text in _candidates(record):
            priority = _literal_priority(query, text)
            if priority is not None:
                items.append(SuggestionItem(text, priority))

        pinyin_priority = _pinyin_priority(query, record)
        if pinyin_priority is not None:
            items.extend(SuggestionItem(name, pinyin_priority) for name in record.cjk_names)
    return items


def suggest(
    query: str,
    records: Sequence[SearchableRecord],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """Distinct suggestion strings, best first, at most ``limit`` of them."""
    normalized = normalize_text(query or "")
    if not normalized or limit <= 0:
        return []

    items = collect_suggestions(normalized, records)
    # Stable: equal priorities keep collection order, so the first copy of a
    # string is also its highest-priority copy.
    items.sort(key=lambda item: item.priority, reverse=True)

    seen: set[str] = set()
    results: list[str] = []
    for item in items:
        if item.text in seen:
            continue
        seen.add(item.text)
        results.append(item.text)
        if len(results) >= limit:
            break
    return results
