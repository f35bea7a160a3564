"""
Tests for the catalog doctor and the linguard command line.

Tests cover:
- Exit code policy (clean, warnings, failures, strict mode)
- Load failures and missing reference catalogs
- JSON output for CI
- translate / keys / codegen / detect / config commands
"""

import json
from pathlib import Path

import pytest

from linguard.cli import main, parse_params
from linguard.doctor import CatalogDoctor, run_doctor
from linguard.i18n.config import ENV_VARS

FIXTURES = Path(__file__).parent / "fixtures" / "catalogs"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


def write_catalogs(directory, **files):
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / f"{name}.yaml").write_text(content, encoding="utf-8")
    return directory


class TestCatalogDoctor:
    """Tests for CatalogDoctor."""

    def test_clean_catalogs(self):
        doctor = CatalogDoctor(FIXTURES, "en")
        assert doctor.run_checks() == 0
        assert doctor.failures == []
        assert doctor.warnings == []
        assert sorted(doctor.reports) == ["en", "es", "fr"]

    def test_extra_key_is_a_warning(self, tmp_path):
        catalogs = write_catalogs(
            tmp_path / "locales", en="title: Title\n", es="title: Título\nextra: Extra\n"
        )
        assert run_doctor(catalogs, "en") == 1
        assert run_doctor(catalogs, "en", strict=True) == 2

    def test_missing_key_fails(self, tmp_path):
        catalogs = write_catalogs(
            tmp_path / "locales", en="title: Title\nbody: Body\n", es="title: Título\n"
        )
        doctor = CatalogDoctor(catalogs, "en")
        assert doctor.run_checks() == 2
        assert [str(d.key_path) for d in doctor.reports["es"]] == ["body"]

    def test_parameter_mismatch_fails(self, tmp_path):
        catalogs = write_catalogs(
            tmp_path / "locales",
            en='greeting: "Hello, {{name}}!"\n',
            es='greeting: "¡Hola!"\n',
        )
        assert run_doctor(catalogs, "en") == 2

    def test_reference_missing_other_form_fails(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", en="items:\n  one: One item\n")
        doctor = CatalogDoctor(catalogs, "en")
        assert doctor.run_checks() == 2
        assert doctor.reports["en"].blocking

    def test_malformed_catalog_fails(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", en="title: Title\n", es="title: [oops\n")
        doctor = CatalogDoctor(catalogs, "en")
        assert doctor.run_checks() == 2
        assert "es" in doctor.load_errors
        assert "es" not in doctor.reports

    def test_schema_build_error_fails(self, tmp_path):
        catalogs = write_catalogs(
            tmp_path / "locales",
            en='title: "{{n:number}} {{n:string}}"\n',
        )
        doctor = CatalogDoctor(catalogs, "en")
        assert doctor.run_checks() == 2
        assert "en" in doctor.load_errors

    def test_missing_reference_fails(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", es="title: Título\n")
        doctor = CatalogDoctor(catalogs, "en")
        assert doctor.run_checks() == 2
        assert doctor.reports["es"].is_empty

    def test_empty_directory_fails(self, tmp_path):
        assert run_doctor(tmp_path / "empty", "en") == 2

    def test_collect_does_not_print(self, capsys):
        doctor = CatalogDoctor(FIXTURES, "en")
        doctor.collect()
        assert capsys.readouterr().out == ""
        assert doctor.exit_code() == 0

    def test_to_dict(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", en="a: A\n", fr="a: A\nb: B\n")
        doctor = CatalogDoctor(catalogs, "en")
        doctor.collect()
        data = doctor.to_dict()

        assert data["exit_code"] == 1
        assert data["reference"] == "en"
        assert data["reports"]["fr"]["divergences"][0]["type"] == "extra_key"
        assert data["reports"]["en"]["divergences"] == []


class TestParseParams:
    """Tests for --param parsing."""

    def test_numbers_and_strings(self):
        assert parse_params(["name=Ana", "count=3", "price=9.5", "code=007x"]) == {
            "name": "Ana",
            "count": 3,
            "price": 9.5,
            "code": "007x",
        }

    def test_plain_decimals_become_numbers(self):
        assert parse_params(["a=0", "b=-2", "c=10.25", "d=-0.5"]) == {
            "a": 0,
            "b": -2,
            "c": 10.25,
            "d": -0.5,
        }

    @pytest.mark.parametrize(
        "value",
        ["02134", "Nan", "Infinity", "inf", "1_000", "1e3", "+5", " 7", "1.", ".5", ""],
    )
    def test_other_values_stay_strings(self, value):
        assert parse_params([f"v={value}"]) == {"v": value}

    def test_value_may_contain_equals(self):
        assert parse_params(["expr=a=b"]) == {"expr": "a=b"}

    def test_none(self):
        assert parse_params(None) == {}

    @pytest.mark.parametrize("pair", ["novalue", "=x"])
    def test_invalid(self, pair):
        with pytest.raises(ValueError):
            parse_params([pair])


class TestMain:
    """Tests for the linguard entry point."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "linguard" in capsys.readouterr().out

    def test_check_clean(self):
        assert main(["check", str(FIXTURES)]) == 0

    def test_check_json(self, tmp_path, capsys):
        catalogs = write_catalogs(tmp_path / "locales", en="a: A\nb: B\n", es="a: A\n")
        assert main(["check", str(catalogs), "--format", "json"]) == 2

        data = json.loads(capsys.readouterr().out)
        assert data["exit_code"] == 2
        assert data["reports"]["es"]["divergences"][0]["key"] == "b"

    def test_check_strict_flag(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", en="a: A\n", es="a: A\nz: Z\n")
        assert main(["check", str(catalogs)]) == 1
        assert main(["check", str(catalogs), "--strict"]) == 2

    def test_check_strict_from_config(self, tmp_path, monkeypatch):
        catalogs = write_catalogs(tmp_path / "locales", en="a: A\n", es="a: A\nz: Z\n")
        monkeypatch.setenv("LINGUARD_STRICT", "true")
        assert main(["check", str(catalogs)]) == 2

    def test_check_uses_configured_directory(self, tmp_path):
        write_catalogs(tmp_path / "i18n", en="a: A\n", es="a: A\n")
        (tmp_path / "linguard.yaml").write_text("catalog_dir: i18n\n", encoding="utf-8")
        assert main(["check"]) == 0

    def test_check_with_other_reference(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", en="a: A\nb: B\n", es="a: A\n")
        # Against es, en only has an extra key
        assert main(["check", str(catalogs), "--reference", "es"]) == 1

    def test_translate(self, capsys):
        code = main(
            [
                "translate",
                "user.profile.greeting",
                "--dir",
                str(FIXTURES),
                "--locale",
                "es",
                "--param",
                "name=Ana",
            ]
        )
        assert code == 0
        assert "¡Hola, Ana!" in capsys.readouterr().out

    def test_translate_plural(self, capsys):
        code = main(["translate", "product.reviews", "-d", str(FIXTURES), "--count", "0"])
        assert code == 0
        assert "No reviews yet" in capsys.readouterr().out

    def test_translate_falls_back_to_reference(self, capsys):
        code = main(["translate", "user.profile.title", "-d", str(FIXTURES), "-l", "de"])
        assert code == 0
        assert "Profile" in capsys.readouterr().out

    def test_translate_missing_parameter(self, capsys):
        code = main(["translate", "user.profile.greeting", "-d", str(FIXTURES)])
        assert code == 1
        assert "name" in capsys.readouterr().out

    def test_translate_unknown_key(self):
        assert main(["translate", "nope.nothing", "-d", str(FIXTURES)]) == 1

    def test_translate_number_parameter(self, capsys):
        code = main(["translate", "product.price", "-d", str(FIXTURES), "-p", "amount=12"])
        assert code == 0
        assert "Price: 12" in capsys.readouterr().out

    def test_translate_keeps_leading_zeros(self, tmp_path, capsys):
        catalogs = write_catalogs(tmp_path / "locales", en='"zip": "Postcode {{zip}}"\n')
        assert main(["translate", "zip", "-d", str(catalogs), "-p", "zip=02134"]) == 0
        assert "Postcode 02134" in capsys.readouterr().out

    def test_translate_bad_param(self):
        assert main(["translate", "user.profile.title", "-d", str(FIXTURES), "-p", "oops"]) == 1

    def test_translate_without_reference_catalog(self, tmp_path):
        catalogs = write_catalogs(tmp_path / "locales", es="a: A\n")
        assert main(["translate", "a", "-d", str(catalogs)]) == 1

    def test_keys(self, capsys):
        assert main(["keys", "-d", str(FIXTURES)]) == 0
        out = capsys.readouterr().out
        assert "product.reviews" in out
        assert "plural" in out

    def test_keys_unknown_locale(self):
        assert main(["keys", "-d", str(FIXTURES), "-l", "de"]) == 1

    def test_codegen_to_file(self, tmp_path):
        output = tmp_path / "out" / "messages.py"
        code = main(
            ["codegen", "-d", str(FIXTURES), "-o", str(output), "--class-name", "Strings"]
        )
        assert code == 0
        source = output.read_text(encoding="utf-8")
        assert "class Strings:" in source
        assert "def product_reviews(self, count: int | float)" in source

    def test_codegen_to_stdout(self, capsys):
        assert main(["codegen", "-d", str(FIXTURES)]) == 0
        assert "def user_profile_greeting(" in capsys.readouterr().out

    def test_codegen_invalid_class_name(self):
        assert main(["codegen", "-d", str(FIXTURES), "--class-name", "1x"]) == 1

    def test_detect(self, monkeypatch, capsys):
        monkeypatch.setenv("LANG", "es_ES.UTF-8")
        monkeypatch.delenv("LANGUAGE", raising=False)
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        assert main(["detect"]) == 0
        assert "es-ES" in capsys.readouterr().out

    def test_config(self, capsys):
        assert main(["config"]) == 0
        assert "reference_locale" in capsys.readouterr().out
