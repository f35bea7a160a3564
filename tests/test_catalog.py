"""
Tests for the catalog data model and wire-format parsing.
"""

import pytest

from linguard.i18n import catalog as catalog_module
from linguard.i18n.catalog import (
    Branch,
    KeyPath,
    Leaf,
    NodeKind,
    PluralCategory,
    PluralGroup,
    parse_catalog,
    to_data,
)
from linguard.i18n.errors import CatalogFormatError, InvalidKeyPathError


class TestKeyPath:
    """Tests for KeyPath."""

    def test_parses_dotted_string(self):
        path = KeyPath("user.profile.greeting")
        assert path.segments == ("user", "profile", "greeting")
        assert str(path) == "user.profile.greeting"

    def test_sequence_and_string_are_equal(self):
        assert KeyPath(["user", "profile"]) == KeyPath("user.profile")
        assert hash(KeyPath(("a", "b"))) == hash(KeyPath("a.b"))

    def test_copy_constructor(self):
        path = KeyPath("a.b")
        assert KeyPath(path) == path

    @pytest.mark.parametrize("bad", ["", "a..b", ".a", "a.", []])
    def test_rejects_empty_segments(self, bad):
        with pytest.raises(InvalidKeyPathError):
            KeyPath(bad)

    def test_rejects_separator_in_segment(self):
        with pytest.raises(ValueError):
            KeyPath(["a.b", "c"])

    def test_parent_and_child(self):
        path = KeyPath("user.profile")
        assert path.parent == KeyPath("user")
        assert KeyPath("user").parent is None
        assert path.child("greeting") == KeyPath("user.profile.greeting")

    def test_is_descendant_of(self):
        assert KeyPath("a.b.c").is_descendant_of(KeyPath("a"))
        assert not KeyPath("a").is_descendant_of(KeyPath("a"))
        assert not KeyPath("ab.c").is_descendant_of(KeyPath("a"))

    def test_ordering_is_segment_wise(self):
        paths = [KeyPath("b"), KeyPath("a.z"), KeyPath("a")]
        assert sorted(paths) == [KeyPath("a"), KeyPath("a.z"), KeyPath("b")]


class TestParseCatalog:
    """Tests for turning nested mappings into catalog trees."""

    def test_strings_become_leaves(self):
        catalog = parse_catalog("en", {"user": {"greeting": "Hello, {{name}}!"}})
        node = catalog.lookup("user.greeting")
        assert node == Leaf("Hello, {{name}}!")
        assert node.kind is NodeKind.LEAF

    def test_plural_mapping_becomes_plural_group(self):
        catalog = parse_catalog(
            "en", {"reviews": {"one": "{{count}} review", "other": "{{count}} reviews"}}
        )
        node = catalog.lookup("reviews")
        assert isinstance(node, PluralGroup)
        assert node.categories == {PluralCategory.ONE, PluralCategory.OTHER}
        assert node.get(PluralCategory.OTHER) == "{{count}} reviews"
        assert node.get(PluralCategory.FEW) is None

    def test_mixed_mapping_is_a_branch(self):
        catalog = parse_catalog("en", {"menu": {"one": "First", "settings": "Settings"}})
        assert isinstance(catalog.lookup("menu"), Branch)
        assert catalog.lookup("menu.one") == Leaf("First")

    def test_empty_mapping_is_a_branch(self):
        catalog = parse_catalog("en", {"empty": {}})
        assert isinstance(catalog.lookup("empty"), Branch)

    def test_root_is_never_plural(self):
        catalog = parse_catalog("en", {"other": "Other"})
        assert catalog.lookup("other") == Leaf("Other")

    def test_none_is_an_empty_catalog(self):
        catalog = parse_catalog("en", None)
        assert list(catalog.walk()) == []

    def test_non_mapping_root_raises(self):
        with pytest.raises(CatalogFormatError):
            parse_catalog("en", ["not", "a", "mapping"])

    def test_root_that_is_not_a_branch_raises_format_error(self, monkeypatch):
        monkeypatch.setattr(catalog_module, "parse_node", lambda data, locale: Leaf("x"))
        with pytest.raises(CatalogFormatError):
            parse_catalog("en", {"title": "Title"})

    @pytest.mark.parametrize("value", [42, True, None, ["a"], 1.5])
    def test_unsupported_values_raise_with_location(self, value):
        with pytest.raises(CatalogFormatError) as exc:
            parse_catalog("es", {"user": {"age": value}})
        assert "user.age" in str(exc.value)
        assert exc.value.locale == "es"

    def test_dotted_key_names_raise(self):
        with pytest.raises(CatalogFormatError):
            parse_catalog("en", {"user.name": "Name"})

    def test_lookup_missing_and_through_leaf(self):
        catalog = parse_catalog("en", {"user": {"name": "Name"}})
        assert catalog.lookup("user.age") is None
        assert catalog.lookup("user.name.first") is None
        assert catalog.lookup("nothing") is None

    def test_nodes_are_read_only(self):
        catalog = parse_catalog("en", {"user": {"name": "Name"}})
        with pytest.raises(TypeError):
            catalog.root.children["x"] = Leaf("x")

    def test_walk_is_sorted_depth_first(self):
        catalog = parse_catalog("en", {"b": "B", "a": {"y": "Y", "x": "X"}})
        assert [str(path) for path, _ in catalog.walk()] == ["a", "a.x", "a.y", "b"]

    def test_to_data_round_trips_structure(self):
        data = {
            "user": {"greeting": "Hi"},
            "reviews": {"other": "{{count}} reviews", "one": "{{count}} review"},
        }
        catalog = parse_catalog("en", data)
        assert to_data(catalog.root) == data
