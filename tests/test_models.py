"""Unit tests for the models module."""

from pydantic import ValidationError
import pytest

from library_search.models import RECORD_FILTERS, MatchField, RawRecord, ScoredMatch, SearchableRecord


class TestRawRecord:
    """Test the lenient RawRecord boundary model."""

    def test_engine_field_names(self):
        """Test construction with the engine's own field names."""
        record = RawRecord(
            id=7,
            primary_name="Rewrite",
            alternate_name="改写",
            aliases=["Rewrite+"],
            developer="Key",
            local_path="C:/Games/Rewrite",
            cleared=True,
        )

        assert record.id == 7
        assert record.primary_name == "Rewrite"
        assert record.alternate_name == "改写"
        assert record.aliases == ["Rewrite+"]
        assert record.developer == "Key"
        assert record.local_path == "C:/Games/Rewrite"
        assert record.cleared is True

    def test_library_column_names(self):
        """Test validation from a library database row."""
        record = RawRecord.model_validate(
            {
                "id": 2,
                "name": "Subahibi",
                "name_cn": "素晴日",
                "all_titles": '["素晴らしき日々"]',
                "localpath": "D:/sca-ji/subahibi.exe",
                "clear": 1,
                "developer": "SCA-JI",
                "score": 9.1,
            }
        )

        assert record.primary_name == "Subahibi"
        assert record.alternate_name == "素晴日"
        assert record.aliases == ["素晴らしき日々"]
        assert record.local_path == "D:/sca-ji/subahibi.exe"
        assert record.cleared is True

    def test_defaults(self):
        """Test that a bare record has empty fields."""
        record = RawRecord()

        assert record.id is None
        assert record.primary_name == ""
        assert record.aliases == []
        assert record.cleared is False

    def test_none_and_mistyped_text_fields_become_empty(self):
        """Test that None, lists and dicts coerce to empty strings."""
        record = RawRecord.model_validate({"name": None, "name_cn": ["x"], "developer": {"a": 1}, "localpath": None})

        assert record.primary_name == ""
        assert record.alternate_name == ""
        assert record.developer == ""
        assert record.local_path == ""

    def test_numeric_names_become_text(self):
        """Test that numeric titles are kept as text."""
        assert RawRecord.model_validate({"name": 428}).primary_name == "428"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ('["A", "B"]', ["A", "B"]),
            (b'["A"]', ["A"]),
            ("not json", []),
            ('{"a": 1}', []),
            (["A", 3, None, "B"], ["A", "B"]),
            (("A",), ["A"]),
            (None, []),
            (42, []),
        ],
    )
    def test_aliases_coercion(self, value, expected):
        """Test alias lists from JSON text, sequences and junk."""
        assert RawRecord.model_validate({"all_titles": value}).aliases == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1, True),
            (0, False),
            (True, True),
            ("1", True),
            ("yes", True),
            (" TRUE ", True),
            ("0", False),
            ("no", False),
            (None, False),
            ([], False),
        ],
    )
    def test_cleared_flag_coercion(self, value, expected):
        """Test completion flags stored as ints, bools and strings."""
        assert RawRecord.model_validate({"clear": value}).cleared is expected

    def test_non_mapping_rejected(self):
        """Test that non-mapping input fails validation."""
        with pytest.raises(ValidationError):
            RawRecord.model_validate(42)


class TestMatchField:
    """Test the MatchField enum."""

    def test_values_are_strings(self):
        """Test that members compare equal to their wire values."""
        assert MatchField.EXACT == "exact"
        assert MatchField("pinyin_initials_partial") is MatchField.PINYIN_INITIALS_PARTIAL

    def test_is_pinyin(self):
        """Test pinyin tier detection."""
        pinyin = {field for field in MatchField if field.is_pinyin}
        assert pinyin == {
            MatchField.PINYIN_EXACT,
            MatchField.PINYIN_CONTAINS,
            MatchField.PINYIN_PARTIAL,
            MatchField.PINYIN_INITIALS_EXACT,
            MatchField.PINYIN_INITIALS_PARTIAL,
        }


class TestResultModels:
    """Test the immutable record and result types."""

    def test_scored_match_to_dict(self):
        """Test serialization of a match."""
        match = ScoredMatch(record_id=3, score=0.8, matched_field=MatchField.PINYIN_CONTAINS)
        assert match.to_dict() == {"record_id": 3, "score": 0.8, "matched_field": "pinyin_contains"}

    def test_searchable_record_is_frozen(self):
        """Test that indexed records cannot be mutated."""
        record = SearchableRecord(id=1, primary_name="Clannad")
        with pytest.raises(AttributeError):
            record.primary_name = "Kanon"  # type: ignore[misc]

    def test_record_filters(self):
        """Test the supported library categories."""
        assert RECORD_FILTERS == ("all", "local", "online", "clear", "noclear")
