"""Tests for the named character reference table."""

import pytest

from html_entity_codec.entities.table import (
    ENTITIES,
    NamedEntity,
    get_entity,
    iter_entities,
    lookup,
)


class TestLookup:
    """Test exact-match lookup."""

    @pytest.mark.parametrize("reference,expected", [
        ("&amp;", "&"),
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&quot;", '"'),
        ("&apos;", "'"),
        ("&nbsp;", "\xa0"),
        ("&eacute;", "é"),
        ("&Eacute;", "É"),
        ("&hearts;", "\u2665"),
    ])
    def test_known_entities(self, reference, expected):
        """Test common entities resolve to their characters."""
        assert lookup(reference) == expected

    def test_multi_character_replacement(self):
        """Test entities that expand to more than one code point."""
        assert lookup("&NotEqualTilde;") == "\u2242\u0338"

    @pytest.mark.parametrize("reference", [
        "&nosuchentity;",
        "&Amp;",
        "&AMP;x",
        "amp;",
        "&amp",
        "&;",
        "",
    ])
    def test_misses(self, reference):
        """Test that lookup requires the exact, case-sensitive reference."""
        assert lookup(reference) is None

    def test_legacy_names_without_semicolon_excluded(self):
        """Test that only semicolon-terminated names are in the table."""
        assert all(name.startswith("&") and name.endswith(";") for name in ENTITIES)


class TestTable:
    """Test the table as a whole."""

    def test_read_only(self):
        """Test that the table cannot be modified."""
        with pytest.raises(TypeError):
            ENTITIES["&custom;"] = "x"

    def test_size(self):
        """Test the table holds the full HTML5 list."""
        assert len(ENTITIES) > 2000

    def test_get_entity(self):
        """Test fetching a record."""
        entity = get_entity("&copy;")

        assert entity == NamedEntity("&copy;", "©")
        assert entity.bare_name == "copy"

    def test_get_entity_unknown(self):
        """Test that unknown references raise KeyError."""
        with pytest.raises(KeyError):
            get_entity("&nosuchentity;")

    def test_iter_entities_sorted(self):
        """Test iteration in name order."""
        names = [entity.name for entity in iter_entities()]

        assert names == sorted(names)
        assert len(names) == len(ENTITIES)

    def test_record_is_immutable(self):
        """Test NamedEntity is frozen."""
        entity = get_entity("&amp;")

        with pytest.raises(AttributeError):
            entity.characters = "x"
