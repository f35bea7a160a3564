"""
Verified translation catalogs.

Provides:
- Catalog model and wire-format parsing
- Template parameter extraction and schema building
- Structural validation of every locale against a reference locale
- CLDR pluralization and interpolation
- A runtime engine with locale fallback and atomic catalog publishing

Usage:
    from linguard.i18n import CatalogEngine, CatalogLoader

    engine = CatalogEngine(reference_locale="en")
    loader = CatalogLoader("locales")
    for locale in loader.available_locales():
        engine.reload(locale, loader)

    es = engine.for_locale("es")
    print(es.t("user.profile.greeting", name="Ana"))
    print(es.t("product.reviews", quantity=3))
"""

from linguard.i18n.catalog import (
    Branch,
    KeyPath,
    Leaf,
    LocaleCatalog,
    NodeKind,
    PluralCategory,
    PluralGroup,
    parse_catalog,
)
from linguard.i18n.checker import (
    Divergence,
    ExtraKey,
    KindMismatch,
    MissingKey,
    MissingOtherForm,
    ParameterMismatch,
    ValidationReport,
    check,
)
from linguard.i18n.config import LinguardConfig
from linguard.i18n.detector import detect_os_locale, normalize_locale
from linguard.i18n.engine import CatalogEngine, LocaleTranslator, ReloadResult
from linguard.i18n.errors import (
    CatalogError,
    CatalogIntegrityError,
    KeyNotFoundError,
    LinguardError,
    MissingParameterError,
    PluralFormMissingError,
    TranslationError,
    WrongArityError,
)
from linguard.i18n.formatter import LocaleFormatter
from linguard.i18n.interpolate import Localized, interpolate
from linguard.i18n.loader import CatalogLoader
from linguard.i18n.plurals import PluralRules, resolve
from linguard.i18n.scanner import ParameterContract, ParamKind, scan
from linguard.i18n.schema import CatalogSchema, build_schema

__all__ = [
    # Model
    "Branch",
    "KeyPath",
    "Leaf",
    "LocaleCatalog",
    "NodeKind",
    "PluralCategory",
    "PluralGroup",
    "parse_catalog",
    # Scanning and schema
    "ParameterContract",
    "ParamKind",
    "scan",
    "CatalogSchema",
    "build_schema",
    # Validation
    "check",
    "Divergence",
    "ExtraKey",
    "KindMismatch",
    "MissingKey",
    "MissingOtherForm",
    "ParameterMismatch",
    "ValidationReport",
    # Runtime
    "CatalogEngine",
    "LocaleTranslator",
    "ReloadResult",
    "PluralRules",
    "resolve",
    "interpolate",
    "Localized",
    # Collaborators
    "CatalogLoader",
    "LinguardConfig",
    "LocaleFormatter",
    "detect_os_locale",
    "normalize_locale",
    # Errors
    "LinguardError",
    "CatalogError",
    "TranslationError",
    "KeyNotFoundError",
    "MissingParameterError",
    "WrongArityError",
    "CatalogIntegrityError",
    "PluralFormMissingError",
]
