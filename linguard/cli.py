import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape

from linguard import VERSION
from linguard.doctor import CatalogDoctor
from linguard.i18n.codegen import generate_accessors
from linguard.i18n.config import LinguardConfig, Settings
from linguard.i18n.detector import get_os_locale_info, normalize_locale
from linguard.i18n.engine import CatalogEngine
from linguard.i18n.errors import (
    CatalogError,
    CatalogIntegrityError,
    CatalogNotFoundError,
    LinguardError,
    TranslationError,
)
from linguard.i18n.loader import CatalogLoader
from linguard.i18n.schema import build_schema
from linguard.ui import console, data_table, error, info, status_box, success, warning


_NUMBER_RE = re.compile(r"-?(0|[1-9]\d*)(\.\d+)?")


def _coerce(text: str) -> int | float | str:
    match = _NUMBER_RE.fullmatch(text)
    if not match:
        return text
    return float(text) if match.group(2) else int(text)


def parse_params(pairs: list[str] | None) -> dict[str, Any]:
    """
    Parse --param KEY=VALUE pairs.

    Plain decimals ("3", "-2", "9.5") are passed as numbers so they satisfy
    {{name:number}} markers. Anything else, including "02134", "1_000" and
    "Infinity", stays a string.

    Raises:
        ValueError: if a pair has no '=' or an empty name
    """
    params: dict[str, Any] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid parameter '{pair}', expected KEY=VALUE")
        params[name] = _coerce(value)
    return params


class LinguardCLI:
    def __init__(self, verbose: bool = False, config: LinguardConfig | None = None):
        self.verbose = verbose
        self.config = config or LinguardConfig()
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self.config.load()
        return self._settings

    def _debug(self, message: str):
        """Print debug info only in verbose mode"""
        if self.verbose:
            console.print(f"[dim][DEBUG] {escape(message)}[/dim]")

    def _catalog_dir(self, directory: str | None) -> Path:
        return Path(directory) if directory else self.settings.catalog_dir

    def _reference(self, reference: str | None) -> str:
        if reference:
            normalized = normalize_locale(reference)
            if normalized is None:
                raise ValueError(f"Invalid reference locale '{reference}'")
            return normalized
        return self.settings.reference_locale

    def _load_engine(self, catalog_dir: Path, reference: str) -> CatalogEngine:
        """
        Publish every catalog in a directory, reference locale first.

        Catalogs that fail to load or are rejected are reported and skipped;
        only a missing reference catalog is fatal.
        """
        loader = CatalogLoader(catalog_dir)
        locales = loader.available_locales()
        if reference not in locales:
            raise CatalogNotFoundError(reference, str(catalog_dir))

        engine = CatalogEngine(reference_locale=reference, debug=self.settings.debug)
        for locale in [reference] + [loc for loc in locales if loc != reference]:
            try:
                result = engine.reload(locale, loader)
            except CatalogError as e:
                warning(f"Skipping '{locale}': {escape(str(e))}")
                continue
            if not result.published:
                warning(f"Catalog for '{locale}' was not published ({result.status})")
                if result.report is not None:
                    self._debug(result.report.render())
            else:
                self._debug(f"Published '{locale}'")

        if not engine.is_published(reference):
            raise CatalogError(f"Reference catalog '{reference}' could not be published")
        return engine

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def check(self, directory: str | None, reference: str | None, strict: bool, fmt: str) -> int:
        """Validate all catalogs against the reference locale."""
        catalog_dir = self._catalog_dir(directory)
        doctor = CatalogDoctor(
            catalog_dir,
            self._reference(reference),
            strict=strict or self.settings.strict,
        )

        if fmt == "json":
            doctor.collect()
            sys.stdout.write(json.dumps(doctor.to_dict(), indent=2, ensure_ascii=False) + "\n")
            return doctor.exit_code()

        return doctor.run_checks()

    def translate(
        self,
        key: str,
        directory: str | None,
        locale: str | None,
        count: str | None,
        params: list[str] | None,
    ) -> int:
        """Translate a single key, as the runtime would."""
        reference = self._reference(None)
        engine = self._load_engine(self._catalog_dir(directory), reference)
        target = locale or reference
        quantity = _coerce(count) if count is not None else None

        try:
            text = engine.translate(key, target, parse_params(params), quantity)
        except TranslationError as e:
            error(escape(str(e)))
            return 1
        except CatalogIntegrityError as e:
            error(escape(str(e)), details="Run 'linguard check' to find the broken catalog")
            return 2

        console.print(text, markup=False, highlight=False)
        return 0

    def keys(self, directory: str | None, locale: str | None) -> int:
        """List message keys with their kinds and parameters."""
        reference = self._reference(None)
        engine = self._load_engine(self._catalog_dir(directory), reference)
        target = normalize_locale(locale) if locale else reference
        if target is None or not engine.is_published(target):
            error(f"Locale '{escape(locale or '')}' is not published")
            return 1

        schema = engine.schema(target)
        rows = []
        for path in schema.message_keys():
            entry = schema[path]
            params = ", ".join(f"{name}:{kind.value}" for name, kind in entry.contract.items())
            rows.append([escape(str(path)), entry.kind.value, escape(params) or "-"])

        data_table(
            columns=[("Key", "cyan"), ("Kind", "yellow"), ("Parameters", "white")],
            rows=rows,
            title=f"{target} ({len(rows)} keys)",
        )
        return 0

    def codegen(self, directory: str | None, output: str | None, class_name: str) -> int:
        """Generate typed accessors from the reference catalog."""
        reference = self._reference(None)
        loader = CatalogLoader(self._catalog_dir(directory))
        schema = build_schema(loader.load_catalog(reference))
        source = generate_accessors(schema, class_name=class_name)

        if output is None:
            sys.stdout.write(source)
            return 0

        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        success(f"Wrote {len(schema.message_keys())} accessors to {escape(str(path))}")
        return 0

    def detect(self) -> int:
        """Show the locale detected from the environment."""
        loader = CatalogLoader(self.settings.catalog_dir)
        supported = loader.available_locales() or None
        locale_info = get_os_locale_info(supported)

        items = {name: value or "-" for name, value in locale_info.items()}
        status_box("LOCALE", items)
        if supported:
            info(f"Catalogs available: {', '.join(supported)}")
        return 0

    def show_config(self) -> int:
        """Show effective settings and where they came from."""
        config_info = self.config.get_info()
        sources = config_info["sources"]
        items = {
            name: f"{escape(str(config_info[name]))} [dim]({sources[name]})[/dim]"
            for name in ("reference_locale", "catalog_dir", "strict", "debug")
        }
        items["project file"] = config_info["project_file"] or "-"
        items["user file"] = config_info["user_file"] or "-"
        status_box("CONFIGURATION", items)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linguard",
        description="Build-time verified translation catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global flags
    parser.add_argument("--version", "-V", action="version", version=f"linguard {VERSION}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Validate catalogs against the reference")
    check_parser.add_argument("directory", nargs="?", help="Catalog directory")
    check_parser.add_argument("--reference", "-r", help="Reference locale")
    check_parser.add_argument("--strict", action="store_true", help="Treat extra keys as failures")
    check_parser.add_argument("--format", choices=["text", "json"], default="text")

    translate_parser = subparsers.add_parser("translate", help="Translate a key")
    translate_parser.add_argument("key", help="Key path, e.g. user.profile.greeting")
    translate_parser.add_argument("--dir", "-d", dest="directory", help="Catalog directory")
    translate_parser.add_argument("--locale", "-l", help="Target locale")
    translate_parser.add_argument("--count", "-n", help="Quantity for plural messages")
    translate_parser.add_argument(
        "--param", "-p", action="append", metavar="KEY=VALUE", help="Message parameter"
    )

    keys_parser = subparsers.add_parser("keys", help="List message keys")
    keys_parser.add_argument("--dir", "-d", dest="directory", help="Catalog directory")
    keys_parser.add_argument("--locale", "-l", help="Locale to list (default: reference)")

    codegen_parser = subparsers.add_parser("codegen", help="Generate typed accessors")
    codegen_parser.add_argument("--dir", "-d", dest="directory", help="Catalog directory")
    codegen_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    codegen_parser.add_argument("--class-name", default="Messages", help="Generated class name")

    subparsers.add_parser("detect", help="Show the locale detected from the environment")
    subparsers.add_parser("config", help="Show effective configuration")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    cli = LinguardCLI(verbose=args.verbose)

    try:
        if args.command == "check":
            return cli.check(args.directory, args.reference, args.strict, args.format)
        elif args.command == "translate":
            return cli.translate(args.key, args.directory, args.locale, args.count, args.param)
        elif args.command == "keys":
            return cli.keys(args.directory, args.locale)
        elif args.command == "codegen":
            return cli.codegen(args.directory, args.output, args.class_name)
        elif args.command == "detect":
            return cli.detect()
        elif args.command == "config":
            return cli.show_config()
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        console.print()
        error("Operation cancelled")
        return 130
    except (LinguardError, ValueError, OSError) as e:
        console.print()
        error(f"Error: {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
