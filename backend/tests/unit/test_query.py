"""
Unit tests for SortSpec and Projection parsing.
"""

import pytest
from pydantic import ValidationError

from docdao.schemas.query import ASCENDING, DESCENDING, Projection, SortSpec


class TestSortSpec:
    """Test suite for SortSpec.parse."""

    def test_parse_default_identity_descending(self):
        """
        Test the default listing sort.

        Arrange: "_id:-1"
        Act: Parse it
        Assert: Single descending key on _id
        """
        # Act
        spec = SortSpec.parse("_id:-1")

        # Assert
        assert spec.keys == [("_id", DESCENDING)]

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("name", [("name", ASCENDING)]),
            ("+name", [("name", ASCENDING)]),
            ("-name", [("name", DESCENDING)]),
            ("name:1", [("name", ASCENDING)]),
            ("name:asc", [("name", ASCENDING)]),
            ("name:DESC", [("name", DESCENDING)]),
            ("name:descending", [("name", DESCENDING)]),
            (
                "rank:-1, name:asc",
                [("rank", DESCENDING), ("name", ASCENDING)],
            ),
        ],
    )
    def test_parse_string_forms(self, raw, expected):
        """Test each supported string form."""
        assert SortSpec.parse(raw).keys == expected

    def test_parse_blank_parts_ignored(self):
        """Test empty segments (trailing commas, spaces) are skipped."""
        assert SortSpec.parse("name:1,, ").keys == [("name", ASCENDING)]

    def test_parse_none_and_empty(self):
        """Test None and "" produce an empty (falsy) spec."""
        assert not SortSpec.parse(None)
        assert not SortSpec.parse("")

    def test_parse_pairs(self):
        """Test (field, direction) pairs are accepted."""
        spec = SortSpec.parse([("created_at", -1), ("name", 1)])

        assert spec.keys == [("created_at", DESCENDING), ("name", ASCENDING)]

    def test_parse_existing_spec_returned(self):
        """Test an existing SortSpec passes through."""
        spec = SortSpec.parse("name")

        assert SortSpec.parse(spec) is spec

    @pytest.mark.parametrize("raw", ["name:up", ":1", "-", "name:0"])
    def test_parse_invalid(self, raw):
        """Test malformed sort strings raise ValueError."""
        with pytest.raises(ValueError):
            SortSpec.parse(raw)

    def test_invalid_direction_in_pairs(self):
        """Test pairs with a direction other than 1 / -1 fail validation."""
        with pytest.raises(ValidationError):
            SortSpec.parse([("name", 2)])


class TestProjection:
    """Test suite for Projection.parse."""

    def test_parse_comma_separated(self):
        """
        Test comma separated select strings.

        Arrange: "name,color"
        Act: Parse and convert
        Assert: Inclusion projection with both fields
        """
        # Act
        projection = Projection.parse("name,color")

        # Assert
        assert projection.names == ("name", "color")
        assert projection.to_mongo() == {"name": 1, "color": 1}

    def test_parse_strips_blanks_and_duplicates(self):
        """Test whitespace, empty entries and repeats are dropped."""
        projection = Projection.parse(" name , , rank,name,")

        assert projection.to_mongo() == {"name": 1, "rank": 1}

    def test_parse_iterable(self):
        """Test a list of field names is accepted."""
        assert Projection.parse(["a", "b"]).names == ("a", "b")

    def test_empty_means_all_fields(self):
        """Test None and "" produce an empty (falsy) projection."""
        assert not Projection.parse(None)
        assert not Projection.parse("")
        assert Projection.parse("").to_mongo() == {}
