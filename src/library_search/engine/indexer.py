"""Build ``SearchableRecord`` views from raw catalog records.

Indexing is the only place where romanization and key normalization happen;
the scoring and suggestion loops read precomputed fields exclusively.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
from typing import Any

from pydantic import ValidationError

from library_search.engine.romanization import contains_han, romanize_all
from library_search.models import RECORD_FILTERS, RawRecord, RecordFilter, SearchableRecord


logger = logging.getLogger(__name__)

DEVELOPER_SEPARATOR = "/"
DEFAULT_UNKNOWN_DEVELOPER = "Unknown Developer"
# Records without an id are keyed "#<position>"; a string never equals an integer row id
MISSING_ID_PREFIX = "#"


def normalize_text(text: str) -> str:
    """Normalize a name or query for comparison: trim and lower-case."""
    return text.strip().lower() if text else ""


def _developer_parts(developer: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in (developer or "").split(DEVELOPER_SEPARATOR) if part.strip())


def split_developers(developer: str, placeholder: str = DEFAULT_UNKNOWN_DEVELOPER) -> tuple[str, ...]:
    """Split a raw ``"A / B"`` developer field into trimmed names.

    An empty field (or one made only of separators) yields ``(placeholder,)``.
    """
    return _developer_parts(developer) or (placeholder,)


def _coerce_raw(raw: Any, position: int) -> RawRecord:
    if isinstance(raw, RawRecord):
        record = raw
    else:
        try:
            data = dict(raw) if isinstance(raw, Mapping) or hasattr(raw, "keys") else raw
            record = RawRecord.model_validate(data)
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning(
                "Unreadable record at position %d, indexing it with empty fields",
                position,
                extra={"error": str(exc)},
            )
            record = RawRecord()

    if record.id is None:
        record = record.model_copy(update={"id": f"{MISSING_ID_PREFIX}{position}"})
    return record


def build_record(raw: RawRecord, *, unknown_developer: str = DEFAULT_UNKNOWN_DEVELOPER) -> SearchableRecord:
    """Derive every search field for one record."""
    primary = raw.primary_name.strip()
    alternate = raw.alternate_name.strip()
    aliases = tuple(alias.strip() for alias in raw.aliases if alias and alias.strip())

    real_developers = _developer_parts(raw.developer)
    # The placeholder is display data only; it must never match a query
    developers = real_developers or (unknown_developer,)

    cjk_names = tuple(name for name in (primary, alternate) if contains_han(name))
    romanization = romanize_all(cjk_names)

    primary_key = normalize_text(primary)
    alternate_key = normalize_text(alternate)

    return SearchableRecord(
        id=raw.id,
        primary_name=primary,
        alternate_name=alternate,
        alias_names=aliases,
        developer_names=developers,
        has_cjk=bool(cjk_names),
        pinyin_full=romanization.full,
        pinyin_spaced=romanization.spaced,
        pinyin_initials=romanization.initials,
        is_local=bool(raw.local_path.strip()),
        is_cleared=raw.cleared,
        primary_key=primary_key,
        alternate_key=alternate_key,
        developer_keys=tuple(normalize_text(name) for name in real_developers),
        fuzzy_key=primary_key or alternate_key,
        cjk_names=cjk_names,
    )


def index_records(
    records: Iterable[RawRecord | Mapping[str, Any]] | None,
    *,
    unknown_developer: str = DEFAULT_UNKNOWN_DEVELOPER,
) -> list[SearchableRecord]:
    """Index a collection, preserving input order.

    Never raises for record content: unreadable entries are logged and indexed
    with empty fields. Records without an id are keyed ``"#<position>"``.
    """
    if not records:
        return []
    return [
        build_record(_coerce_raw(raw, position), unknown_developer=unknown_developer)
        for position, raw in enumerate(records)
    ]


def filter_records(records: Sequence[SearchableRecord], record_filter: RecordFilter = "all") -> list[SearchableRecord]:
    """Keep records of one library category, preserving order.

    - ``all``: everything
    - ``local`` / ``online``: installed locally or not
    - ``clear`` / ``noclear``: finished or not
    """
    if record_filter not in RECORD_FILTERS:
        raise ValueError(f"Unknown record filter: {record_filter!r} (expected one of {', '.join(RECORD_FILTERS)})")

    if record_filter == "all":
        return list(records)
    if record_filter == "local":
        return [record for record in records if record.is_local]
    if record_filter == "online":
        return [record for record in records if not record.is_local]
    if record_filter == "clear":
        return [record for record in records if record.is_cleared]
    return [record for record in records if not record.is_cleared]
