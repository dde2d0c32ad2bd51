"""Stateless entry points used by the UI and data-layer collaborators.

Every call is a pure function of its arguments; the facade only adds
configuration defaults, tracing, metrics and logging around the engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
from typing import Any

from library_search.config import Settings, get_settings
from library_search.engine.highlight import highlight as highlight_text
from library_search.engine.indexer import filter_records, index_records
from library_search.engine.scoring import rank
from library_search.engine.suggestions import suggest as suggest_candidates
from library_search.models import RawRecord, RecordFilter, ScoredMatch, SearchableRecord
from library_search.observability.logging import configure_logging
from library_search.observability.metrics import (
    INDEXED_RECORDS,
    MATCHES,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    init_metrics,
    set_metrics_enabled,
    track_latency,
)
from library_search.observability.tracing import create_span, init_tracing, set_tracing_enabled


logger = logging.getLogger(__name__)


def configure(settings: Settings | None = None) -> Settings:
    """Apply logging, tracing and metrics settings. Call once at startup."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)

    set_tracing_enabled(settings.tracing_enabled)
    if settings.tracing_enabled:
        init_tracing(service_name=settings.service_name)

    set_metrics_enabled(settings.metrics_enabled)
    if settings.metrics_enabled:
        init_metrics(service_name=settings.service_name)

    logger.info("library-search configured", extra={"service_name": settings.service_name})
    return settings


def index(raw_records: Iterable[RawRecord | Mapping[str, Any]] | None) -> list[SearchableRecord]:
    """Build the searchable view of a collection.

    Run this when the collection changes, never per keystroke.
    """
    settings = get_settings()
    SEARCH_REQUESTS.labels(operation="index").inc()
    with create_span("library_search.index") as span, track_latency(SEARCH_LATENCY, operation="index"):
        records = index_records(raw_records, unknown_developer=settings.unknown_developer_label)
        span.set_attribute("search.record_count", len(records))

    INDEXED_RECORDS.labels().set(len(records))
    logger.debug("Indexed %d records", len(records))
    return records


def search(
    query: str,
    records: Sequence[SearchableRecord],
    limit: int | None = None,
    *,
    record_filter: RecordFilter = "all",
) -> list[ScoredMatch]:
    """Rank ``records`` against ``query``.

    Args:
        query: Text as typed; blank shows every (filtered) record.
        records: Output of :func:`index`.
        limit: Maximum matches; defaults to ``Settings.default_search_limit``.
        record_filter: Library category to search within.

    Returns:
        Matches by descending score, ties in collection order.
    """
    if limit is None:
        limit = get_settings().default_search_limit

    SEARCH_REQUESTS.labels(operation="search").inc()
    attributes = {
        "search.query_length": len(query or ""),
        "search.record_count": len(records),
        "search.record_filter": record_filter,
    }
    with create_span("library_search.search", attributes=attributes) as span, track_latency(
        SEARCH_LATENCY, operation="search"
    ):
        candidates = filter_records(records, record_filter)
        matches = rank(query, candidates, limit)
        span.set_attribute("search.result_count", len(matches))

    for match in matches:
        MATCHES.labels(tier=match.matched_field.value).inc()

    logger.debug(
        "Search returned %d matches",
        len(matches),
        extra={"record_count": len(records), "record_filter": record_filter},
    )
    return matches


def suggest(query: str, records: Sequence[SearchableRecord], limit: int | None = None) -> list[str]:
    """Autocomplete candidates for a partial query."""
    if limit is None:
        limit = get_settings().default_suggest_limit

    SEARCH_REQUESTS.labels(operation="suggest").inc()
    attributes = {"search.query_length": len(query or ""), "search.record_count": len(records)}
    with create_span("library_search.suggest", attributes=attributes) as span, track_latency(
        SEARCH_LATENCY, operation="suggest"
    ):
        suggestions = suggest_candidates(query, records, limit)
        span.set_attribute("search.result_count", len(suggestions))

    logger.debug("Suggest returned %d candidates", len(suggestions))
    return suggestions


def highlight(text: str, query: str, style: str = "html") -> str:
    """Mark occurrences of ``query`` in ``text`` for display."""
    return highlight_text(text, query, style)
