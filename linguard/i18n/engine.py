"""
Catalog engine for linguard.

The runtime facade applications call. It provides:
- Atomic publishing of validated catalogs (build and check off to the side,
  then swap in a new immutable snapshot)
- Key lookup with fallback: requested locale, its family, reference locale
- Parameter validation against the contract extracted from the templates
- Pluralization and interpolation
- Debug mode for showing translation keys

translate() takes no locks and does no I/O: it reads one snapshot reference
and works on immutable data.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Protocol

from linguard.i18n.catalog import KeyLike, KeyPath, Leaf, LocaleCatalog, PluralGroup
from linguard.i18n.checker import (
    PLURAL_COUNT_PARAM,
    Divergence,
    KindMismatch,
    MissingOtherForm,
    ParameterMismatch,
    ValidationReport,
    check,
    check_self,
)
from linguard.i18n.detector import DEFAULT_LOCALE, fallback_chain, normalize_locale
from linguard.i18n.errors import (
    KeyNotFoundError,
    MissingParameterError,
    ParameterTypeError,
    SchemaBuildError,
    WrongArityError,
)
from linguard.i18n.formatter import LocaleFormatter
from linguard.i18n.interpolate import Localized, interpolate
from linguard.i18n.plurals import PluralRules, Quantity, default_rules, resolve
from linguard.i18n.scanner import ParamKind
from linguard.i18n.schema import CatalogSchema, build_schema

logger = logging.getLogger(__name__)

# Divergences that would make translate() fail at runtime; a reload
# carrying any of them is discarded
REJECTING_DIVERGENCES: tuple[type[Divergence], ...] = (
    KindMismatch,
    ParameterMismatch,
    MissingOtherForm,
)


class CatalogSource(Protocol):
    """Anything that can supply catalogs, e.g. loader.CatalogLoader."""

    def load_catalog(self, locale: str) -> LocaleCatalog: ...


@dataclass(frozen=True)
class PublishedLocale:
    """Everything the engine holds for one published locale."""

    catalog: LocaleCatalog
    schema: CatalogSchema
    report: ValidationReport


@dataclass(frozen=True)
class ReloadResult:
    """
    Outcome of publishing a catalog.

    status is one of:
        published    the catalog is now active
        rejected     validation found divergences that would break translate()
        build_error  the schema could not be built
        superseded   a newer reload of the same locale started meanwhile
    """

    locale: str
    status: str
    report: ValidationReport | None = None
    error: Exception | None = None

    @property
    def published(self) -> bool:
        return self.status == "published"


def _is_number(value: Any) -> bool:
    if isinstance(value, Localized):
        value = value.value
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class CatalogEngine:
    """
    Validated, multi-locale message catalog.

    Example:
        engine = CatalogEngine(reference_locale="en")
        engine.publish(parse_catalog("en", {"user": {"greeting": "Hello, {{name}}!"}}))
        engine.translate("user.greeting", "es", {"name": "Ana"})
    """

    def __init__(
        self,
        reference_locale: str = DEFAULT_LOCALE,
        plural_rules: PluralRules | None = None,
        debug: bool = False,
        reject: tuple[type[Divergence], ...] = REJECTING_DIVERGENCES,
    ):
        """
        Initialize the engine.

        Args:
            reference_locale: Locale all others are validated against and fall back to
            plural_rules: Plural rule registry (defaults to the built-in rules)
            debug: If True, translate() returns "[key.path]" instead of text
            reject: Divergence types that cause a reload to be discarded
        """
        self._reference = normalize_locale(reference_locale) or reference_locale
        self._rules = plural_rules or default_rules()
        self._debug = debug
        self._reject = reject

        self._state: Mapping[str, PublishedLocale] = MappingProxyType({})
        self._write_lock = threading.Lock()
        self._generations: dict[str, int] = {}
        self._formatters: dict[str, LocaleFormatter] = {}

    @property
    def reference_locale(self) -> str:
        return self._reference

    @property
    def debug(self) -> bool:
        """Get debug mode status."""
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        """Set debug mode."""
        self._debug = value

    @property
    def plural_rules(self) -> PluralRules:
        return self._rules

    # -------------------------------------------------------------------------
    # Publishing
    # -------------------------------------------------------------------------

    def _validate(
        self, locale: str, schema: CatalogSchema, state: Mapping[str, PublishedLocale]
    ) -> ValidationReport:
        reference = state.get(self._reference)
        if locale == self._reference or reference is None:
            return check_self(schema)
        return check(reference.schema, schema, locale)

    def publish(self, catalog: LocaleCatalog) -> ReloadResult:
        """
        Validate a catalog and make it the active one for its locale.

        The schema is built before taking the writer lock. Validation and the
        swap happen under the lock, so concurrent publishers serialize while
        readers keep using the previous snapshot.

        Args:
            catalog: Catalog to publish

        Returns:
            ReloadResult describing whether the catalog was published
        """
        locale = normalize_locale(catalog.locale) or catalog.locale

        with self._write_lock:
            generation = self._generations.get(locale, 0) + 1
            self._generations[locale] = generation

        try:
            schema = build_schema(catalog)
        except SchemaBuildError as e:
            logger.error(f"Discarding catalog for '{locale}': {e}")
            return ReloadResult(locale, "build_error", error=e)

        with self._write_lock:
            if self._generations[locale] != generation:
                logger.warning(f"Discarding superseded reload of '{locale}'")
                return ReloadResult(locale, "superseded")

            current = self._state
            report = self._validate(locale, schema, current)

            rejected = report.of_type(*self._reject)
            if rejected:
                logger.error(
                    f"Discarding catalog for '{locale}': {len(rejected)} divergence(s), "
                    f"first: {rejected[0]}"
                )
                return ReloadResult(locale, "rejected", report=report)

            new_state = dict(current)
            new_state[locale] = PublishedLocale(catalog, schema, report)

            if locale == self._reference:
                # Secondary reports are relative to the reference
                for other, published in current.items():
                    if other == locale:
                        continue
                    new_state[other] = PublishedLocale(
                        published.catalog,
                        published.schema,
                        check(schema, published.schema, other),
                    )

            self._state = MappingProxyType(new_state)

        if report.is_empty:
            logger.info(f"Published catalog for '{locale}' ({len(schema)} entries)")
        else:
            logger.warning(
                f"Published catalog for '{locale}' with {len(report)} divergence(s); "
                "missing keys fall back to the reference locale"
            )
        return ReloadResult(locale, "published", report=report)

    def reload(self, locale: str, source: CatalogSource) -> ReloadResult:
        """Load a locale from a catalog source and publish it."""
        return self.publish(source.load_catalog(locale))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def locales(self) -> list[str]:
        """Published locales, sorted."""
        return sorted(self._state)

    def is_published(self, locale: str) -> bool:
        return (normalize_locale(locale) or locale) in self._state

    def _published(self, locale: str) -> PublishedLocale:
        normalized = normalize_locale(locale) or locale
        try:
            return self._state[normalized]
        except KeyError:
            raise LookupError(f"Locale '{locale}' is not published") from None

    def catalog(self, locale: str) -> LocaleCatalog:
        return self._published(locale).catalog

    def schema(self, locale: str) -> CatalogSchema:
        return self._published(locale).schema

    def report(self, locale: str) -> ValidationReport:
        return self._published(locale).report

    def reports(self) -> dict[str, ValidationReport]:
        """Current validation report of every published locale."""
        return {locale: published.report for locale, published in sorted(self._state.items())}

    def keys(self, locale: str | None = None) -> list[KeyPath]:
        """Sorted message keys of a locale (reference locale by default)."""
        return self.schema(locale or self._reference).message_keys()

    def has(self, key: KeyLike, locale: str) -> bool:
        """True if translate() would find the key for this locale."""
        return self._lookup(KeyPath(key), locale, self._state) is not None

    # -------------------------------------------------------------------------
    # Translation
    # -------------------------------------------------------------------------

    def _lookup(
        self, path: KeyPath, locale: str, state: Mapping[str, PublishedLocale]
    ) -> tuple[str, PublishedLocale, Leaf | PluralGroup] | None:
        for candidate in fallback_chain(locale, self._reference):
            published = state.get(candidate)
            if published is None:
                continue
            node = published.catalog.lookup(path)
            if isinstance(node, (Leaf, PluralGroup)):
                if candidate != locale:
                    logger.debug(f"Key '{path}' resolved from fallback locale '{candidate}'")
                return candidate, published, node
            logger.debug(f"Key '{path}' missing in '{candidate}'")
        return None

    def _formatter(self, locale: str) -> LocaleFormatter:
        formatter = self._formatters.get(locale)
        if formatter is None:
            formatter = self._formatters[locale] = LocaleFormatter(locale)
        return formatter

    def translate(
        self,
        key: KeyLike,
        locale: str,
        params: Mapping[str, Any] | None = None,
        quantity: Quantity | None = None,
    ) -> str:
        """
        Translate a message key.

        Args:
            key: Key path as a dotted string, a sequence of segments or a KeyPath
            locale: Requested locale
            params: Values for the message's parameters; extras are ignored
            quantity: Number for plural messages (required for them, refused otherwise)

        Returns:
            The translated, interpolated message

        Raises:
            KeyNotFoundError: key absent from the locale, its family and the reference
            WrongArityError: quantity given for a simple message or missing for a plural one
            MissingParameterError: a parameter the message uses was not supplied
            ParameterTypeError: a number parameter received a non-number
            PluralFormMissingError: fatal, the plural group has no 'other' form

        Examples:
            >>> engine.translate("user.profile.greeting", "es", {"name": "Ana"})
            '¡Hola, Ana!'

            >>> engine.translate("product.reviews", "en", quantity=5)
            '5 reviews'
        """
        path = key if isinstance(key, KeyPath) else KeyPath(key)

        if self._debug:
            return f"[{path}]"

        requested = normalize_locale(locale) or locale
        found = self._lookup(path, requested, self._state)
        if found is None:
            raise KeyNotFoundError(path, requested, fallback_chain(requested, self._reference))
        resolved_locale, published, node = found

        is_plural = isinstance(node, PluralGroup)
        if is_plural and quantity is None:
            raise WrongArityError(path, resolved_locale, plural=True)
        if not is_plural and quantity is not None:
            raise WrongArityError(path, resolved_locale, plural=False)

        values: dict[str, Any] = dict(params or {})
        if is_plural:
            values.setdefault(PLURAL_COUNT_PARAM, quantity)

        contract = published.schema[path].contract
        missing = [name for name in contract if name not in values]
        if missing:
            raise MissingParameterError(path, resolved_locale, missing)

        for name, kind in contract.items():
            if kind is ParamKind.NUMBER and not _is_number(values[name]):
                raise ParameterTypeError(path, resolved_locale, name, kind.value, values[name])

        if is_plural:
            template = resolve(node, resolved_locale, quantity, self._rules, path)
        else:
            template = node.template

        return interpolate(template, values, self._formatter(resolved_locale))

    def for_locale(self, locale: str) -> LocaleTranslator:
        """A translator bound to one locale, for request-scoped use."""
        return LocaleTranslator(self, locale)


class LocaleTranslator:
    """
    Engine view bound to a single locale.

    Pass one of these through a request instead of switching a global
    language setting; translators for different locales never interfere.
    """

    def __init__(self, engine: CatalogEngine, locale: str):
        self._engine = engine
        self._locale = normalize_locale(locale) or locale

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def engine(self) -> CatalogEngine:
        return self._engine

    def t(self, key: KeyLike, quantity: Quantity | None = None, **params: Any) -> str:
        """
        Translate a key in this translator's locale (shorthand).

        Examples:
            >>> es.t("user.profile.greeting", name="Ana")
            '¡Hola, Ana!'
        """
        return self._engine.translate(key, self._locale, params, quantity)

    def has(self, key: KeyLike) -> bool:
        return self._engine.has(key, self._locale)
