"""
Client-side ranking and autocomplete over an in-memory record collection.

- romanization: Han detection and memoized pinyin derivation
- fuzzy: codepoint edit distance and the fuzzy-tier score
- indexer: RawRecord -> SearchableRecord, record-type filters
- scoring: priority-cascade ranking
- suggestions: autocomplete candidates
- highlight: query marking for display
"""
