"""
Exception taxonomy for linguard.

Three families:
- CatalogError: problems found while loading or building a catalog
- TranslationError: call-time contract violations the caller may recover from
- CatalogIntegrityError: states that validation should have made impossible

Divergences between locales are reported as data (see checker.py), never raised.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class LinguardError(Exception):
    """Base exception for linguard errors"""

    pass


class InvalidKeyPathError(LinguardError, ValueError):
    """Raised when a key path is empty or has an invalid segment"""

    pass


# =============================================================================
# Load time
# =============================================================================


class CatalogError(LinguardError):
    """Base exception for catalog loading and schema building"""

    pass


class CatalogNotFoundError(CatalogError):
    """Raised when no catalog source exists for a locale"""

    def __init__(self, locale: str, searched: str = ""):
        self.locale = locale
        message = f"No catalog found for locale '{locale}'"
        if searched:
            message += f" in {searched}"
        super().__init__(message)


class CatalogFormatError(CatalogError):
    """Raised when catalog data does not follow the wire format"""

    def __init__(self, message: str, locale: str | None = None, key_path: Any = None):
        self.locale = locale
        self.key_path = key_path
        where = []
        if locale:
            where.append(f"locale '{locale}'")
        if key_path is not None:
            where.append(f"key '{key_path}'")
        if where:
            message = f"{message} ({', '.join(where)})"
        super().__init__(message)


class ParameterKindConflict(CatalogError):
    """Raised when one template uses a parameter with two different kinds"""

    def __init__(self, name: str, first: Any, second: Any, template: str = ""):
        self.name = name
        self.kinds = (first, second)
        self.template = template
        super().__init__(
            f"Parameter '{name}' is used as both {first} and {second}"
            + (f" in template {template!r}" if template else "")
        )


class SchemaBuildError(CatalogError):
    """Raised when a catalog cannot be turned into a schema"""

    def __init__(self, message: str, locale: str, key_path: Any = None):
        self.locale = locale
        self.key_path = key_path
        if key_path is not None:
            message = f"{message} (locale '{locale}', key '{key_path}')"
        else:
            message = f"{message} (locale '{locale}')"
        super().__init__(message)


# =============================================================================
# Call time (recoverable)
# =============================================================================


class TranslationError(LinguardError):
    """Base exception for translate() contract violations"""

    def __init__(self, message: str, key_path: Any, locale: str):
        self.key_path = key_path
        self.locale = locale
        super().__init__(message)


class KeyNotFoundError(TranslationError, KeyError):
    """Raised when a key exists in neither the requested nor the reference locale"""

    def __init__(self, key_path: Any, locale: str, searched: Iterable[str] = ()):
        self.searched = tuple(searched)
        message = f"Key '{key_path}' not found for locale '{locale}'"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message, key_path, locale)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class MissingParameterError(TranslationError):
    """Raised when params lack a name the message contract requires"""

    def __init__(self, key_path: Any, locale: str, missing: Iterable[str]):
        self.missing = tuple(sorted(missing))
        names = ", ".join(f"'{name}'" for name in self.missing)
        super().__init__(
            f"Missing parameter(s) {names} for key '{key_path}' in locale '{locale}'",
            key_path,
            locale,
        )


class WrongArityError(TranslationError):
    """Raised when quantity is given for a simple message or omitted for a plural one"""

    def __init__(self, key_path: Any, locale: str, plural: bool):
        self.plural = plural
        if plural:
            message = f"Key '{key_path}' is a plural message and requires a quantity"
        else:
            message = f"Key '{key_path}' is not a plural message but a quantity was given"
        super().__init__(f"{message} (locale '{locale}')", key_path, locale)


class ParameterTypeError(TranslationError, TypeError):
    """Raised when a value does not match the declared kind of its parameter"""

    def __init__(self, key_path: Any, locale: str, name: str, expected: str, value: Any):
        self.name = name
        self.expected = expected
        self.value = value
        super().__init__(
            f"Parameter '{name}' of key '{key_path}' expects a {expected}, "
            f"got {type(value).__name__} (locale '{locale}')",
            key_path,
            locale,
        )


# =============================================================================
# Fatal
# =============================================================================


class CatalogIntegrityError(LinguardError, RuntimeError):
    """Raised when runtime data violates an invariant validation guarantees"""

    pass


class PluralFormMissingError(CatalogIntegrityError):
    """Raised when a plural group reaching resolution has no 'other' form"""

    def __init__(self, locale: str, key_path: Any = None):
        self.locale = locale
        self.key_path = key_path
        where = f" for key '{key_path}'" if key_path is not None else ""
        super().__init__(
            f"Plural group{where} in locale '{locale}' has no 'other' form; "
            "catalog validation was bypassed"
        )
