"""
Catalog health check for linguard.

Loads every locale in a catalog directory, validates each against the
reference locale and turns the reports into a CI exit code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.markup import escape

from linguard.i18n.checker import ValidationReport, check, check_self
from linguard.i18n.detector import normalize_locale
from linguard.i18n.errors import CatalogError
from linguard.i18n.loader import CatalogLoader
from linguard.i18n.schema import CatalogSchema, build_schema
from linguard.ui import (
    console,
    data_table,
    error,
    info,
    section,
    success,
    summary_box,
    warning,
)

logger = logging.getLogger(__name__)

# Divergence rows shown per locale before truncating
MAX_ROWS = 50


class CatalogDoctor:
    """
    Validates a directory of locale catalogs.

    Checks for:
    - A catalog for the reference locale
    - Catalog files that fail to load or parse
    - Templates whose parameters conflict in kind
    - Structural divergences of each locale from the reference

    Attributes:
        warnings: Non-blocking findings (extra keys)
        failures: Blocking findings (missing keys, mismatches, load errors)
        suggestions: Hints for fixing the findings
        passes: Locales that validated cleanly
        reports: ValidationReport per successfully loaded locale
    """

    def __init__(
        self,
        catalog_dir: str | Path,
        reference_locale: str = "en",
        strict: bool = False,
    ) -> None:
        self.catalog_dir = Path(catalog_dir)
        self.reference_locale = normalize_locale(reference_locale) or reference_locale
        self.strict = strict
        self.loader = CatalogLoader(self.catalog_dir)

        self.warnings: list[str] = []
        self.failures: list[str] = []
        self.suggestions: list[str] = []
        self.passes: list[str] = []
        self.reports: dict[str, ValidationReport] = {}
        self.load_errors: dict[str, str] = {}
        self._checks: list[tuple[str, str, str | None]] = []

    def _record(self, status: str, message: str, suggestion: str | None = None) -> None:
        """
        Track a check result.

        Args:
            status: One of "PASS", "WARN", "FAIL"
            message: Description of the check result
            suggestion: Optional fix suggestion
        """
        self._checks.append((status, message, suggestion))
        if status == "PASS":
            self.passes.append(message)
        elif status == "WARN":
            self.warnings.append(message)
        else:
            self.failures.append(message)
        if suggestion and status != "PASS":
            self.suggestions.append(suggestion)

    def _load_schemas(self, locales: list[str]) -> dict[str, CatalogSchema]:
        schemas: dict[str, CatalogSchema] = {}
        for locale in locales:
            try:
                schemas[locale] = build_schema(self.loader.load_catalog(locale))
            except CatalogError as e:
                logger.debug(f"Failed to load '{locale}': {e}")
                self.load_errors[locale] = str(e)
                self._record("FAIL", f"{locale}: could not load catalog", str(e))
        return schemas

    def collect(self) -> dict[str, ValidationReport]:
        """
        Run all checks without printing.

        Returns:
            ValidationReport per locale that loaded
        """
        self.warnings, self.failures, self.suggestions, self.passes = [], [], [], []
        self.reports, self.load_errors, self._checks = {}, {}, []

        locales = self.loader.available_locales()
        if not locales:
            self._record(
                "FAIL",
                f"No catalogs found in {self.catalog_dir}",
                "Add <locale>.yaml, <locale>.json or <locale>/ namespace directories",
            )
            return self.reports

        if self.reference_locale not in locales:
            self._record(
                "FAIL",
                f"Reference locale '{self.reference_locale}' has no catalog",
                f"Create {self.catalog_dir / (self.reference_locale + '.yaml')}",
            )

        schemas = self._load_schemas(locales)
        reference = schemas.get(self.reference_locale)

        for locale, schema in sorted(schemas.items()):
            if reference is None or locale == self.reference_locale:
                report = check_self(schema)
            else:
                report = check(reference, schema, locale)
            self.reports[locale] = report
            self._record_report(report)

        return self.reports

    def _record_report(self, report: ValidationReport) -> None:
        locale = report.locale
        blocking, warnings = report.blocking, report.warnings

        if report.is_empty:
            if locale == self.reference_locale:
                self._record("PASS", f"{locale}: reference catalog is well formed")
            else:
                self._record("PASS", f"{locale}: matches '{report.reference_locale}'")
            return

        if blocking:
            self._record(
                "FAIL",
                f"{locale}: {len(blocking)} blocking divergence(s)",
                f"Align {locale} with the '{report.reference_locale}' catalog",
            )
        if warnings:
            self._record(
                "FAIL" if self.strict else "WARN",
                f"{locale}: {len(warnings)} extra key(s) not in '{report.reference_locale}'",
                f"Remove unused keys from {locale} or add them to the reference",
            )

    def exit_code(self) -> int:
        """
        Exit code for the collected results.

        Exit codes:
            0: Every locale matches the reference
            1: Warnings only
            2: Blocking divergences or load failures
        """
        if self.failures:
            return 2
        if self.warnings:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Collected results as plain data, for JSON output."""
        return {
            "catalog_dir": str(self.catalog_dir),
            "reference": self.reference_locale,
            "strict": self.strict,
            "exit_code": self.exit_code(),
            "load_errors": dict(sorted(self.load_errors.items())),
            "reports": {locale: r.to_dict() for locale, r in sorted(self.reports.items())},
        }

    def run_checks(self) -> int:
        """
        Run all checks, print the results and return the exit code.

        Returns:
            int: Exit code (0 = clean, 1 = warnings, 2 = failures)
        """
        console.print()
        success("linguard catalog check")
        info(f"Catalogs: {escape(str(self.catalog_dir))}  Reference: {self.reference_locale}")

        self.collect()

        section("Locales")
        for status, message, suggestion in self._checks:
            self._print_check(status, message, suggestion)

        for locale, report in sorted(self.reports.items()):
            if not report.is_empty:
                self._print_report(report)

        self._print_summary()
        return self.exit_code()

    def _print_check(self, status: str, message: str, suggestion: str | None) -> None:
        details = escape(suggestion or "")
        if status == "PASS":
            success(escape(message))
        elif status == "WARN":
            warning(escape(message), details=details)
        else:
            error(escape(message), details=details)

    def _print_report(self, report: ValidationReport) -> None:
        rows = [
            [d.kind.value, escape(str(d.key_path)), escape(d.describe())]
            for d in report.divergences[:MAX_ROWS]
        ]
        data_table(
            columns=[("Type", "yellow"), ("Key", "cyan"), ("Problem", "white")],
            rows=rows,
            title=f"{report.locale} vs {report.reference_locale}",
        )
        if len(report) > MAX_ROWS:
            info(f"... and {len(report) - MAX_ROWS} more")

    def _print_summary(self) -> None:
        """Print summary and suggested fixes using UI helpers."""
        console.print()

        summary_items: list[str] = []
        if self.passes:
            summary_items.append(f"Passed: {len(self.passes)} locale(s)")
        if self.warnings:
            summary_items.append(f"Warnings: {len(self.warnings)}")
        if self.failures:
            summary_items.append(f"Failures: {len(self.failures)}")

        success_state = not (self.failures or self.warnings)
        summary_box("CATALOG CHECK SUMMARY", summary_items, ok=success_state)

        if self.suggestions:
            console.print()
            console.print("[bold cyan]Suggested fixes:[/bold cyan]")
            for i, suggestion in enumerate(self.suggestions, 1):
                console.print(f"   [dim]{i}.[/dim] {escape(suggestion)}")
            console.print()

        if self.failures:
            error(f"{len(self.failures)} failure(s) found")
        elif self.warnings:
            warning(f"{len(self.warnings)} warning(s) found")
        else:
            success("All catalogs are in sync.")


def run_doctor(catalog_dir: str | Path, reference_locale: str = "en", strict: bool = False) -> int:
    """
    Run the catalog doctor and return exit code.

    Returns:
        int: Exit code (0 = all good, 1 = warnings, 2 = failures)
    """
    doctor = CatalogDoctor(catalog_dir, reference_locale, strict)
    return doctor.run_checks()
