"""Ranked fuzzy search and autocomplete for a personal game library."""

from library_search.facade import configure, highlight, index, search, suggest
from library_search.models import MatchField, RawRecord, RecordFilter, ScoredMatch, SearchableRecord
from library_search.sequencing import RequestSequencer


__all__ = [
    "MatchField",
    "RawRecord",
    "RecordFilter",
    "RequestSequencer",
    "ScoredMatch",
    "SearchableRecord",
    "configure",
    "highlight",
    "index",
    "search",
    "suggest",
]
