"""
Tests for template scanning and schema building.
"""

import pytest

from linguard.i18n.catalog import KeyPath, NodeKind, PluralCategory, parse_catalog
from linguard.i18n.errors import ParameterKindConflict, SchemaBuildError
from linguard.i18n.scanner import ParameterContract, ParamKind, scan
from linguard.i18n.schema import build_schema


class TestScan:
    """Tests for scan()."""

    def test_extracts_names_in_order_of_first_use(self):
        contract = scan("{{b}} then {{a}} then {{b}} again")
        assert contract.names == ("b", "a")

    def test_no_markers(self):
        assert scan("Plain text") == ParameterContract.empty()
        assert not scan("")

    def test_typed_markers(self):
        contract = scan("{{count:number}} items for {{name:string}}, {{note}}")
        assert contract.kind("count") is ParamKind.NUMBER
        assert contract.kind("name") is ParamKind.STRING
        assert contract.kind("note") is ParamKind.UNKNOWN

    def test_whitespace_inside_braces(self):
        contract = scan("Hello, {{ name }} ({{ age : number }})")
        assert contract.names == ("name", "age")
        assert contract.kind("age") is ParamKind.NUMBER

    @pytest.mark.parametrize(
        "template",
        ["{{}}", "{name}", "{{ 1abc }}", "{{first name}}", "{{name", "{{when:date}}"],
    )
    def test_malformed_markers_are_literal_text(self, template):
        assert scan(template).names == ()

    def test_untyped_then_typed_merges_to_concrete(self):
        assert scan("{{n}} and {{n:number}}").kind("n") is ParamKind.NUMBER

    def test_conflicting_kinds_raise(self):
        with pytest.raises(ParameterKindConflict) as exc:
            scan("{{n:number}} vs {{n:string}}")
        assert exc.value.name == "n"


class TestParamKind:
    """Tests for ParamKind compatibility."""

    def test_unknown_is_compatible_with_everything(self):
        for kind in ParamKind:
            assert ParamKind.UNKNOWN.is_compatible(kind)
            assert kind.is_compatible(ParamKind.UNKNOWN)

    def test_concrete_kinds_are_incompatible(self):
        assert not ParamKind.NUMBER.is_compatible(ParamKind.STRING)

    def test_merge_prefers_concrete(self):
        assert ParamKind.UNKNOWN.merge(ParamKind.STRING) is ParamKind.STRING
        assert ParamKind.NUMBER.merge(ParamKind.UNKNOWN) is ParamKind.NUMBER


class TestParameterContract:
    """Tests for ParameterContract."""

    def test_union_keeps_order_and_merges_kinds(self):
        a = scan("{{count}} {{name}}")
        b = scan("{{count:number}} {{extra}}")
        merged = a.union(b)
        assert merged.names == ("count", "name", "extra")
        assert merged.kind("count") is ParamKind.NUMBER

    def test_union_conflict_raises(self):
        with pytest.raises(ParameterKindConflict):
            scan("{{n:string}}").union(scan("{{n:number}}"))

    def test_equality_ignores_order(self):
        assert scan("{{a}} {{b}}") == scan("{{b}} {{a}}")
        assert hash(scan("{{a}} {{b}}")) == hash(scan("{{b}} {{a}}"))

    def test_container_protocol(self):
        contract = scan("{{a}} {{b}}")
        assert "a" in contract
        assert "c" not in contract
        assert len(contract) == 2
        assert list(contract) == ["a", "b"]
        assert contract.get("c") is None


class TestBuildSchema:
    """Tests for build_schema()."""

    def test_entries_for_every_node(self):
        catalog = parse_catalog(
            "en",
            {
                "user": {"profile": {"greeting": "Hello, {{name}}!"}},
                "reviews": {"one": "{{count}} review", "other": "{{count}} reviews"},
            },
        )
        schema = build_schema(catalog)

        assert schema.locale == "en"
        assert schema["user"].kind is NodeKind.BRANCH
        assert schema["user.profile"].kind is NodeKind.BRANCH
        assert schema["user.profile.greeting"].kind is NodeKind.LEAF
        assert schema["user.profile.greeting"].contract.names == ("name",)
        assert schema["reviews"].kind is NodeKind.PLURAL
        assert schema["reviews"].categories == {PluralCategory.ONE, PluralCategory.OTHER}

    def test_message_keys_excludes_branches(self):
        catalog = parse_catalog("en", {"b": {"y": "Y"}, "a": "A"})
        assert build_schema(catalog).message_keys() == [KeyPath("a"), KeyPath("b.y")]

    def test_plural_contract_is_union_of_forms(self):
        catalog = parse_catalog(
            "en",
            {"files": {"one": "One file in {{folder}}", "other": "{{count:number}} files"}},
        )
        contract = build_schema(catalog)["files"].contract
        assert set(contract.names) == {"folder", "count"}
        assert contract.kind("count") is ParamKind.NUMBER

    def test_plural_conflict_is_a_build_error(self):
        catalog = parse_catalog(
            "en",
            {"files": {"one": "{{n:string}} file", "other": "{{n:number}} files"}},
        )
        with pytest.raises(SchemaBuildError):
            build_schema(catalog)

    def test_leaf_conflict_is_a_build_error(self):
        catalog = parse_catalog("en", {"bad": "{{n:string}} {{n:number}}"})
        with pytest.raises(SchemaBuildError):
            build_schema(catalog)

    def test_lookup_by_string_sequence_and_keypath(self):
        schema = build_schema(parse_catalog("en", {"a": {"b": "B"}}))
        assert schema["a.b"] == schema[("a", "b")] == schema[KeyPath("a.b")]
        assert "a.b" in schema
        assert "a.c" not in schema
        assert "" not in schema

    def test_empty_catalog(self):
        schema = build_schema(parse_catalog("en", {}))
        assert len(schema) == 0
        assert schema.message_keys() == []
