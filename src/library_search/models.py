"""Record and result models for the library search engine.

``RawRecord`` is the lenient pydantic boundary model for whatever the data
layer hands over (SQLite rows, browser-local JSON, API payloads). Everything
downstream of the indexer works on frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

import orjson
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


RecordFilter = Literal["all", "local", "online", "clear", "noclear"]
RECORD_FILTERS: tuple[str, ...] = ("all", "local", "online", "clear", "noclear")

_TRUTHY_STRINGS = frozenset({"1", "true", "yes", "y", "on"})


class MatchField(str, Enum):
    """Cascade tier that produced a match."""

    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    DEVELOPER = "developer"
    PINYIN_EXACT = "pinyin_exact"
    PINYIN_CONTAINS = "pinyin_contains"
    PINYIN_PARTIAL = "pinyin_partial"
    PINYIN_INITIALS_EXACT = "pinyin_initials_exact"
    PINYIN_INITIALS_PARTIAL = "pinyin_initials_partial"
    FUZZY = "fuzzy"
    NONE = "none"

    @property
    def is_pinyin(self) -> bool:
        return self.value.startswith("pinyin_")


class RawRecord(BaseModel):
    """A catalog record as persisted by the data layer.

    Accepts both the engine's own field names and the game library's column
    names (``name``, ``name_cn``, ``all_titles``, ``localpath``, ``clear``).
    Every field coerces instead of failing: ``None`` and wrong types fall back
    to empty values.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Any = None
    primary_name: str = Field(default="", validation_alias=AliasChoices("primary_name", "name"))
    alternate_name: str = Field(default="", validation_alias=AliasChoices("alternate_name", "name_cn"))
    aliases: list[str] = Field(default_factory=list, validation_alias=AliasChoices("aliases", "all_titles"))
    developer: str = ""
    local_path: str = Field(default="", validation_alias=AliasChoices("local_path", "localpath"))
    cleared: bool = Field(default=False, validation_alias=AliasChoices("cleared", "clear"))

    @field_validator("primary_name", "alternate_name", "developer", "local_path", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return ""

    @field_validator("aliases", mode="before")
    @classmethod
    def _coerce_aliases(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (str, bytes)):
            # SQLite rows store the title list JSON-encoded
            try:
                value = orjson.loads(value)
            except orjson.JSONDecodeError:
                return []
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("cleared", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY_STRINGS
        return False


@dataclass(frozen=True, slots=True)
class SearchableRecord:
    """Indexed view of one record with every search key precomputed."""

    id: Any
    primary_name: str = ""
    alternate_name: str = ""
    alias_names: tuple[str, ...] = ()
    developer_names: tuple[str, ...] = ()
    has_cjk: bool = False
    pinyin_full: str = ""
    pinyin_spaced: str = ""
    pinyin_initials: str = ""
    is_local: bool = False
    is_cleared: bool = False
    # Lower-cased keys used by the scoring loop
    primary_key: str = ""
    alternate_key: str = ""
    developer_keys: tuple[str, ...] = ()
    fuzzy_key: str = ""
    # Display names that contain Han characters (suggestion text for pinyin hits)
    cjk_names: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    """A record that matched a query, with the tier that decided its score."""

    record_id: Any
    score: float
    matched_field: MatchField

    def to_dict(self) -> dict[str, Any]:
        return {"record_id": self.record_id, "score": self.score, "matched_field": self.matched_field.value}


@dataclass(frozen=True, slots=True)
class SuggestionItem:
    """Autocomplete candidate before dedup and truncation."""

    text: str
    priority: int
