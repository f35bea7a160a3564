"""
Tests for typed accessor generation.
"""

import ast

import pytest

from linguard.i18n.catalog import KeyPath, parse_catalog
from linguard.i18n.codegen import generate_accessors, method_name
from linguard.i18n.engine import CatalogEngine
from linguard.i18n.schema import build_schema

EN = {
    "user": {"profile": {"greeting": "Hello, {{name}}!", "title": "Profile"}},
    "product": {
        "reviews": {
            "zero": "No reviews yet",
            "one": "{{count}} review",
            "other": "{{count}} reviews",
        },
        "price": "Price: {{amount:number}}",
    },
    "cart": {
        "summary": {
            "one": "One item for {{name:string}}",
            "other": "{{count}} items for {{name}}",
        },
    },
}


def load_module(source, engine, locale="en", class_name="Messages"):
    namespace = {}
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace[class_name](engine, locale)


@pytest.fixture
def engine():
    engine = CatalogEngine(reference_locale="en")
    engine.publish(parse_catalog("en", EN))
    return engine


class TestMethodName:
    """Tests for method_name()."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("user.profile.greeting", "user_profile_greeting"),
            ("auth.sign-in", "auth_sign_in"),
            ("class", "class_"),
            ("1st", "msg_1st"),
        ],
    )
    def test_names(self, path, expected):
        assert method_name(KeyPath(path)) == expected


class TestGenerateAccessors:
    """Tests for generate_accessors()."""

    def test_source_is_valid_python(self, engine):
        source = generate_accessors(engine.schema("en"))
        tree = ast.parse(source)
        classes = [node for node in tree.body if isinstance(node, ast.ClassDef)]
        assert [c.name for c in classes] == ["Messages"]

    def test_one_method_per_message(self, engine):
        source = generate_accessors(engine.schema("en"))
        for name in (
            "user_profile_greeting",
            "user_profile_title",
            "product_reviews",
            "product_price",
            "cart_summary",
        ):
            assert f"def {name}(" in source
        assert "def user_profile(" not in source

    def test_signatures_follow_contracts(self, engine):
        source = generate_accessors(engine.schema("en"))
        assert "def product_price(self, *, amount: int | float) -> str:" in source
        assert "def product_reviews(self, count: int | float) -> str:" in source
        assert "def cart_summary(self, count: int | float, *, name: str) -> str:" in source
        assert "def user_profile_greeting(self, *, name: str | int | float) -> str:" in source

    def test_generated_methods_translate(self, engine):
        messages = load_module(generate_accessors(engine.schema("en")), engine)

        assert messages.locale == "en"
        assert messages.user_profile_greeting(name="Ana") == "Hello, Ana!"
        assert messages.user_profile_title() == "Profile"
        assert messages.product_reviews(0) == "No reviews yet"
        assert messages.product_reviews(3) == "3 reviews"
        assert messages.cart_summary(2, name="Bo") == "2 items for Bo"
        assert messages.product_price(amount=5) == "Price: 5"

    def test_generated_methods_use_bound_locale(self, engine):
        engine.publish(parse_catalog("es", {"user": {"profile": {"title": "Perfil"}}}))
        messages = load_module(generate_accessors(engine.schema("en")), engine, locale="es")
        assert messages.user_profile_title() == "Perfil"
        assert messages.user_profile_greeting(name="Ana") == "Hello, Ana!"

    def test_keyword_only_parameters(self, engine):
        messages = load_module(generate_accessors(engine.schema("en")), engine)
        with pytest.raises(TypeError):
            messages.user_profile_greeting("Ana")

    def test_duplicate_names_get_suffix(self):
        schema = build_schema(parse_catalog("en", {"a_b": "One", "a": {"b": "Two"}, "locale": "L"}))
        source = generate_accessors(schema)
        assert "def a_b(" in source
        assert "def a_b_2(" in source
        assert "def locale_2(" in source

    def test_awkward_parameter_names(self):
        engine = CatalogEngine(reference_locale="en")
        engine.publish(parse_catalog("en", {"odd": "{{self}} {{class}}"}))
        messages = load_module(generate_accessors(engine.schema("en")), engine)
        assert messages.odd(self_="a", class_="b") == "a b"

    def test_renamed_parameters_do_not_collide(self):
        engine = CatalogEngine(reference_locale="en")
        engine.publish(
            parse_catalog("en", {"x": "{{self}} {{self_}}", "y": "{{class}} {{class_}}"})
        )
        source = generate_accessors(engine.schema("en"))
        ast.parse(source)

        messages = load_module(source, engine)
        assert messages.x(self_2="a", self_="b") == "a b"
        assert messages.y(class_2="c", class_="d") == "c d"

    def test_custom_class_name(self, engine):
        source = generate_accessors(engine.schema("en"), class_name="Strings")
        assert "class Strings:" in source

    @pytest.mark.parametrize("name", ["", "1Bad", "with space", "class"])
    def test_invalid_class_name(self, engine, name):
        with pytest.raises(ValueError):
            generate_accessors(engine.schema("en"), class_name=name)
