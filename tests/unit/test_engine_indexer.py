"""Unit tests for building SearchableRecords and category filters."""

import logging
from unittest.mock import patch

import pytest

from library_search.engine import romanization
from library_search.engine.indexer import (
    build_record,
    filter_records,
    index_records,
    normalize_text,
    split_developers,
)
from library_search.models import RawRecord


@pytest.mark.unit
class TestSplitDevelopers:
    def test_splits_and_trims(self):
        assert split_developers("Key / VisualArts") == ("Key", "VisualArts")

    def test_empty_developer_yields_placeholder(self):
        assert split_developers("") == ("Unknown Developer",)
        assert split_developers("  /  ") == ("Unknown Developer",)

    def test_custom_placeholder(self):
        assert split_developers("", "不明") == ("不明",)


@pytest.mark.unit
class TestNormalizeText:
    def test_trims_and_lowercases(self):
        assert normalize_text("  CLANNAD ") == "clannad"

    def test_empty(self):
        assert normalize_text("") == ""


@pytest.mark.unit
class TestBuildRecord:
    def test_latin_record_has_no_pinyin(self):
        record = build_record(RawRecord(id=1, primary_name="Clannad", alternate_name="クラナド"))

        assert record.has_cjk is False
        assert (record.pinyin_full, record.pinyin_spaced, record.pinyin_initials) == ("", "", "")
        assert record.cjk_names == ()

    def test_chinese_record_is_romanized(self):
        record = build_record(RawRecord(id=2, primary_name="", alternate_name="素晴日"))

        assert record.has_cjk is True
        assert record.pinyin_full == "suqingri"
        assert record.pinyin_spaced == "su qing ri"
        assert record.pinyin_initials == "sqr"
        assert record.cjk_names == ("素晴日",)

    def test_search_keys_are_normalized(self):
        record = build_record(RawRecord(id=1, primary_name=" CLANNAD ", developer="Key / VisualArts"))

        assert record.primary_name == "CLANNAD"
        assert record.primary_key == "clannad"
        assert record.developer_keys == ("key", "visualarts")
        assert record.fuzzy_key == "clannad"

    def test_fuzzy_key_falls_back_to_alternate_name(self):
        record = build_record(RawRecord(id=2, alternate_name="Wonderful Everyday"))
        assert record.fuzzy_key == "wonderful everyday"

    def test_placeholder_developer_is_not_searchable(self):
        record = build_record(RawRecord(id=4, primary_name="Steins;Gate"))

        assert record.developer_names == ("Unknown Developer",)
        assert record.developer_keys == ()

    def test_blank_aliases_are_dropped(self):
        record = build_record(RawRecord(id=1, aliases=["CLANNAD", "  ", ""]))
        assert record.alias_names == ("CLANNAD",)


@pytest.mark.unit
class TestIndexRecords:
    def test_accepts_library_rows(self, library_rows):
        records = index_records(library_rows)

        assert [record.id for record in records] == [1, 2, 3, 4, 5]
        clannad, subahibi, senren, steins, fate = records
        assert clannad.alias_names == ("CLANNAD", "クラナド")
        assert clannad.is_local is True
        assert clannad.is_cleared is True
        assert subahibi.alternate_name == "素晴日"
        assert subahibi.alias_names == ("素晴らしき日々", "Wonderful Everyday")
        assert subahibi.is_local is False
        assert senren.pinyin_initials == "qlwh"
        assert steins.developer_names == ("Unknown Developer",)
        assert fate.has_cjk is False

    def test_custom_placeholder(self, library_rows):
        records = index_records(library_rows, unknown_developer="不明")
        assert records[3].developer_names == ("不明",)

    def test_empty_and_none_collections(self):
        assert index_records([]) == []
        assert index_records(None) == []

    def test_missing_id_gets_positional_key(self):
        records = index_records([{"name": "A"}, {"name": "B", "id": None}])
        assert [record.id for record in records] == ["#0", "#1"]

    def test_positional_keys_never_collide_with_explicit_ids(self):
        rows = [{"id": 1, "name": "Clannad"}, {"name": "Kanon"}, {"id": 0, "name": "Air"}, {"name": "Rewrite"}]
        ids = [record.id for record in index_records(rows)]

        assert ids == [1, "#1", 0, "#3"]
        assert len(set(ids)) == len(ids)

    def test_null_and_mistyped_fields_default(self):
        records = index_records(
            [{"id": 7, "name": None, "name_cn": ["oops"], "developer": 42, "all_titles": "not json", "clear": "yes"}]
        )
        record = records[0]

        assert record.primary_name == ""
        assert record.alternate_name == ""
        assert record.developer_names == ("42",)
        assert record.alias_names == ()
        assert record.is_cleared is True

    def test_unreadable_entry_is_indexed_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="library_search.engine.indexer"):
            records = index_records([{"id": 1, "name": "Rewrite"}, 42, None])

        assert [record.id for record in records] == [1, "#1", "#2"]
        assert records[1].primary_name == ""
        assert records[2].developer_names == ("Unknown Developer",)
        assert sum("Unreadable record" in record.getMessage() for record in caplog.records) == 2

    def test_romanization_failure_does_not_abort_the_scan(self, caplog):
        rows = [
            {"id": 1, "name_cn": "千恋万花"},
            {"id": 2, "name": "Rewrite"},
        ]
        with (
            caplog.at_level(logging.WARNING),
            patch.object(romanization, "lazy_pinyin", side_effect=RuntimeError("boom")),
        ):
            records = index_records(rows)

        assert len(records) == 2
        assert records[0].has_cjk is True
        assert records[0].pinyin_full == ""
        assert records[1].primary_key == "rewrite"

    def test_accepts_raw_record_instances(self):
        records = index_records([RawRecord(id="vn-1", name="Rewrite")])
        assert records[0].id == "vn-1"
        assert records[0].primary_name == "Rewrite"


@pytest.mark.unit
class TestFilterRecords:
    @pytest.mark.parametrize(
        ("record_filter", "expected_ids"),
        [
            ("all", [1, 2, 3, 4, 5]),
            ("local", [1, 4]),
            ("online", [2, 3, 5]),
            ("clear", [1, 3]),
            ("noclear", [2, 4, 5]),
        ],
    )
    def test_filters_keep_collection_order(self, library_rows, record_filter, expected_ids):
        records = index_records(library_rows)
        assert [record.id for record in filter_records(records, record_filter)] == expected_ids

    def test_unknown_filter(self, library_rows):
        with pytest.raises(ValueError, match="Unknown record filter"):
            filter_records(index_records(library_rows), "installed")
