"""
Unit tests for collection argument normalization.
"""

import pytest

from c8client.database.options import (import_query, normalize_count_options, normalize_fields,
                                       normalize_unique_options, normalize_write_options,
                                       resolve_edge_save_args, serialize_import_rows,
                                       split_revision)
from c8client.exceptions import InvalidArgumentError


class TestWriteOptions:
    """Test write option shorthands."""

    @pytest.mark.parametrize(
        "opts,expected",
        [
            (None, {}),
            (True, {"returnNew": True}),
            (False, {"returnNew": False}),
            ("123", {"rev": "123"}),
            ({"waitForSync": True}, {"waitForSync": True}),
        ],
    )
    def test_normalize(self, opts, expected):
        assert normalize_write_options(opts) == expected

    def test_mapping_is_copied(self):
        opts = {"rev": "1"}
        normalized = normalize_write_options(opts)
        normalized["x"] = 1
        assert opts == {"rev": "1"}

    def test_invalid_type(self):
        with pytest.raises(InvalidArgumentError):
            normalize_write_options(3)


class TestSplitRevision:
    """Test where the revision travels per dialect."""

    def test_current_dialect_uses_header(self):
        qs, headers = split_revision({"rev": "9", "silent": True}, 3)
        assert qs == {"silent": True}
        assert headers == {"if-match": "9"}

    def test_legacy_dialect_keeps_query(self):
        qs, headers = split_revision({"rev": "9"}, 2)
        assert qs == {"rev": "9"}
        assert headers == {}

    def test_no_revision(self):
        assert split_revision({}, 3) == ({}, {})


class TestShorthands:
    def test_count_options(self):
        assert normalize_count_options(None, "count") == {}
        assert normalize_count_options(5, "size") == {"size": 5}
        assert normalize_count_options({"count": 2}, "count") == {"count": 2}

    def test_count_rejects_bool(self):
        with pytest.raises(InvalidArgumentError):
            normalize_count_options(True, "count")

    def test_fields(self):
        assert normalize_fields("a") == ["a"]
        assert normalize_fields(("a", "b")) == ["a", "b"]

    def test_unique_options(self):
        assert normalize_unique_options(None) == {}
        assert normalize_unique_options(True) == {"unique": True}
        assert normalize_unique_options({"sparse": True}) == {"sparse": True}
        with pytest.raises(InvalidArgumentError):
            normalize_unique_options("yes")


class TestImportHelpers:
    """Test bulk import serialization."""

    def test_rows_end_with_terminator(self):
        assert serialize_import_rows([{"a": 1}, [1, 2]]) == '{"a": 1}\r\n[1, 2]\r\n'

    def test_no_rows(self):
        assert serialize_import_rows([]) == ""

    def test_query_defaults_to_auto(self):
        assert import_query(None, "users") == {"type": "auto", "collection": "users"}

    def test_query_keeps_explicit_none(self):
        assert import_query({"type": None, "complete": True}, "users") == {
            "type": None,
            "complete": True,
            "collection": "users",
        }


class TestEdgeSaveArgs:
    """Test the edge save call shapes."""

    def test_handles(self):
        assert resolve_edge_save_args({}, "a/1", "a/2", True) == ("a/1", "a/2", True)

    def test_options_only(self):
        assert resolve_edge_save_args({}, {"waitForSync": True}) == (
            None,
            None,
            {"waitForSync": True},
        )

    def test_nothing(self):
        assert resolve_edge_save_args({}) == (None, None, None)

    @pytest.mark.parametrize(
        "args",
        [
            ("a/1",),
            (None, "a/2"),
            (None, None, {"waitForSync": True}),
        ],
    )
    def test_ambiguous(self, args):
        with pytest.raises(InvalidArgumentError):
            resolve_edge_save_args({}, *args)
