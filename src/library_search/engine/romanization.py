"""Pinyin romanization for titles written in Han characters.

Romanization is derived once per distinct string and memoized, so rebuilding
the index after an unrelated edit costs nothing for unchanged names.

Output shape for "素晴日 Fate":
- spaced:   "su qing ri fate"
- full:     "suqingrifate"
- initials: "sqrf"

Non-Han runs inside a CJK title keep their ASCII words (lower-cased); kana,
punctuation and other scripts are dropped. Tones are never emitted; "ü" is
written as "v" the way pinyin IMEs expect it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
import logging
import re

from pypinyin import Style, lazy_pinyin

from library_search.observability.metrics import ROMANIZATION_FAILURES


logger = logging.getLogger(__name__)

# CJK Unified Ideographs, Extension A, Compatibility Ideographs, Extension B
HAN_PATTERN = re.compile("[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002a6df]")
_WORD_PATTERN = re.compile(r"[a-z0-9]+")

ROMANIZATION_CACHE_SIZE = 4096


@dataclass(frozen=True, slots=True)
class Romanization:
    """Three renderings of the same pinyin syllable sequence."""

    full: str = ""
    spaced: str = ""
    initials: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.full


EMPTY_ROMANIZATION = Romanization()


def contains_han(text: str) -> bool:
    """Return True if text has at least one Han ideograph."""
    return bool(text) and HAN_PATTERN.search(text) is not None


def _keep_words(chars: str) -> list[str]:
    # pypinyin hands over every run it has no reading for: Latin words, kana,
    # rare ideographs. Only ASCII words survive so the pinyin fields stay Latin.
    return _WORD_PATTERN.findall(chars.lower())


def _syllables(text: str) -> list[str]:
    segments = lazy_pinyin(text, style=Style.NORMAL, errors=_keep_words)
    return [segment.strip().lower() for segment in segments if segment and segment.strip()]


@lru_cache(maxsize=ROMANIZATION_CACHE_SIZE)
def romanize(text: str) -> Romanization:
    """Romanize a single string.

    Returns ``EMPTY_ROMANIZATION`` for text without Han characters and when
    the conversion fails; a failure is logged and counted, never raised.
    """
    if not contains_han(text):
        return EMPTY_ROMANIZATION

    try:
        syllables = _syllables(text)
    except Exception:
        logger.warning(
            "Pinyin romanization failed, treating as unavailable",
            exc_info=True,
            extra={"text_length": len(text)},
        )
        ROMANIZATION_FAILURES.labels().inc()
        return EMPTY_ROMANIZATION

    if not syllables:
        return EMPTY_ROMANIZATION

    return Romanization(
        full="".join(syllables),
        spaced=" ".join(syllables),
        initials="".join(syllable[0] for syllable in syllables),
    )


def romanize_all(texts: Iterable[str]) -> Romanization:
    """Concatenate the romanizations of several strings, skipping non-Han ones."""
    parts = [romanize(text) for text in texts if contains_han(text)]
    parts = [part for part in parts if not part.is_empty]
    if not parts:
        return EMPTY_ROMANIZATION
    return Romanization(
        full="".join(part.full for part in parts),
        spaced=" ".join(part.spaced for part in parts),
        initials="".join(part.initials for part in parts),
    )


def clear_romanization_cache() -> None:
    romanize.cache_clear()
