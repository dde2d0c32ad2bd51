"""Edit distance for the typo-tolerant fallback tier.

Python ``str`` indexes by Unicode codepoint, so a Han or kana character is a
single edit unit here; no code-unit splitting can occur.

Defaults used by the cascade:
- No fuzzy matching for queries shorter than 3 codepoints
- A candidate qualifies only when similarity is strictly above 0.6
- Qualifying similarity is scaled by 0.4 so fuzzy hits rank below every
  literal or pinyin tier
"""

from __future__ import annotations


FUZZY_MIN_QUERY_LENGTH = 3
FUZZY_SIMILARITY_THRESHOLD = 0.6
FUZZY_SCORE_WEIGHT = 0.4


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming over two rows, with optional early termination
    when the distance is guaranteed to exceed ``max_distance``.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 as soon as the
            distance is known to exceed this threshold.

    Returns:
        The minimum number of single-codepoint insertions, deletions and
        substitutions needed to change s1 into s2.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("素晴日", "素晴らしき日々")
        4
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        char2 = s2[j - 1]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == char2 else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            if curr_row[i] < row_min:
                row_min = curr_row[i]

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def similarity(query: str, candidate: str) -> float:
    """Normalized similarity ``1 - distance / max(len(query), len(candidate))``.

    Two empty strings are considered identical (1.0).
    """
    longest = max(len(query), len(candidate))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(query, candidate) / longest


def fuzzy_score(query: str, candidate: str) -> float:
    """Score for the fuzzy tier, or 0.0 when the pair does not qualify.

    ``query`` and ``candidate`` are expected to be normalized already.
    """
    if len(query) < FUZZY_MIN_QUERY_LENGTH or not candidate:
        return 0.0

    longest = max(len(query), len(candidate))
    # Any distance above this keeps similarity at or below the threshold
    max_distance = int(longest * (1.0 - FUZZY_SIMILARITY_THRESHOLD))
    distance = levenshtein_distance(query, candidate, max_distance=max_distance)
    if distance > max_distance:
        return 0.0

    value = 1.0 - distance / longest
    if value > FUZZY_SIMILARITY_THRESHOLD:
        return value * FUZZY_SCORE_WEIGHT
    return 0.0
