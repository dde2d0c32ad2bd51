"""Priority-cascade ranking of indexed records against a free-text query.

Each record is scored by the first tier that matches; lower tiers are never
consulted once a higher one fires, and scores are never combined.

    Tier                       Score   Gate
    exact name                 1.0
    name prefix                0.9
    name substring             0.8
    developer substring        0.6
    pinyin exact               0.9     has_cjk
    pinyin (spaced) contains   0.8     has_cjk
    pinyin (full) contains     0.7     has_cjk, len(query) >= 2
    pinyin initials exact      0.6     has_cjk, len(query) >= 2
    pinyin initials contains   0.5     has_cjk, len(query) >= 2
    fuzzy                      s*0.4   len(query) >= 3, s > 0.6

The weights are part of the ranking contract and must not be re-tuned;
prefix and pinyin-exact share 0.9.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from library_search.engine.fuzzy import fuzzy_score
from library_search.engine.indexer import normalize_text
from library_search.models import MatchField, ScoredMatch, SearchableRecord


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
PINYIN_PARTIAL_MIN_LENGTH = 2

TIER_SCORES: dict[MatchField, float] = {
    MatchField.EXACT: 1.0,
    MatchField.PREFIX: 0.9,
    MatchField.SUBSTRING: 0.8,
    MatchField.DEVELOPER: 0.6,
    MatchField.PINYIN_EXACT: 0.9,
    MatchField.PINYIN_CONTAINS: 0.8,
    MatchField.PINYIN_PARTIAL: 0.7,
    MatchField.PINYIN_INITIALS_EXACT: 0.6,
    MatchField.PINYIN_INITIALS_PARTIAL: 0.5,
}

_NO_MATCH: tuple[MatchField, float] = (MatchField.NONE, 0.0)


def _match_names(query: str, record: SearchableRecord) -> MatchField | None:
    names = [name for name in (record.primary_key, record.alternate_key) if name]
    if not names:
        return None
    if any(name == query for name in names):
        return MatchField.EXACT
    if any(name.startswith(query) for name in names):
        return MatchField.PREFIX
    if any(query in name for name in names):
        return MatchField.SUBSTRING
    return None


def _match_pinyin(query: str, record: SearchableRecord) -> MatchField | None:
    if not record.has_cjk or not record.pinyin_full:
        return None
    if record.pinyin_full == query:
        return MatchField.PINYIN_EXACT
    if query in record.pinyin_spaced:
        return MatchField.PINYIN_CONTAINS
    if len(query) < PINYIN_PARTIAL_MIN_LENGTH:
        return None
    if query in record.pinyin_full:
        return MatchField.PINYIN_PARTIAL
    if record.pinyin_initials == query:
        return MatchField.PINYIN_INITIALS_EXACT
    if query in record.pinyin_initials:
        return MatchField.PINYIN_INITIALS_PARTIAL
    return None


def score_record(query: str, record: SearchableRecord) -> tuple[MatchField, float]:
    """Score one record against an already normalized, non-empty query.

    Returns ``(MatchField.NONE, 0.0)`` when no tier fires.
    """
    tier = _match_names(query, record)
    if tier is None and any(query in developer for developer in record.developer_keys):
        tier = MatchField.DEVELOPER
    if tier is None:
        tier = _match_pinyin(query, record)
    if tier is not None:
        return tier, TIER_SCORES[tier]

    score = fuzzy_score(query, record.fuzzy_key)
    if score > 0.0:
        return MatchField.FUZZY, score
    return _NO_MATCH


def rank(
    query: str,
    records: Sequence[SearchableRecord],
    limit: int | None = DEFAULT_LIMIT,
) -> list[ScoredMatch]:
    """Rank records for a query.

    Args:
        query: Raw query text; trimmed and lower-cased here.
        records: Indexed collection, in the caller's display order.
        limit: Maximum number of matches; ``None`` for no limit.

    Returns:
        Matches by descending score. Equal scores keep collection order. An
        empty query returns every record at 1.0 with ``MatchField.NONE``.
    """
    if limit is not None and limit <= 0:
        return []

    normalized = normalize_text(query or "")
    if not normalized:
        baseline = [ScoredMatch(record.id, 1.0, MatchField.NONE) for record in records]
        return baseline if limit is None else baseline[:limit]

    matches: list[ScoredMatch] = []
    for record in records:
        tier, score = score_record(normalized, record)
        if tier is MatchField.NONE:
            continue
        matches.append(ScoredMatch(record.id, score, tier))

    # list.sort is stable: ties stay in collection order
    matches.sort(key=lambda match: match.score, reverse=True)

    logger.debug(
        "Ranked %d of %d records",
        len(matches),
        len(records),
        extra={"query_length": len(normalized)},
    )
    return matches if limit is None else matches[:limit]
