"""
Pluralization for linguard.

Plural rules map a quantity to a CLDR plural category. Built-in rules cover
common languages; more can be registered per locale. A locale without a rule
falls back to its family (es-MX -> es) and then to an English-like rule, and
each fallback is logged as a missing rule.

Rules operate on CLDR operands derived from the quantity's decimal form:
    n  absolute value
    i  integer digits
    v  number of visible fraction digits
    f  visible fraction digits as an integer
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Union

from linguard.i18n.catalog import PluralCategory, PluralGroup
from linguard.i18n.detector import locale_family, normalize_locale
from linguard.i18n.errors import PluralFormMissingError

logger = logging.getLogger(__name__)

Quantity = Union[int, float, Decimal]

ZERO = PluralCategory.ZERO
ONE = PluralCategory.ONE
TWO = PluralCategory.TWO
FEW = PluralCategory.FEW
MANY = PluralCategory.MANY
OTHER = PluralCategory.OTHER


class Operands(NamedTuple):
    n: Decimal
    i: int
    v: int
    f: int

    @classmethod
    def of(cls, quantity: Quantity) -> Operands:
        if isinstance(quantity, bool):
            raise TypeError("Plural quantity must be a number, not bool")
        try:
            value = abs(Decimal(str(quantity)))
        except InvalidOperation as e:
            raise ValueError(f"Invalid plural quantity: {quantity!r}") from e
        if not value.is_finite():
            raise ValueError(f"Plural quantity must be finite: {quantity!r}")

        exponent = value.as_tuple().exponent
        v = -exponent if isinstance(exponent, int) and exponent < 0 else 0
        i = int(value)
        f = int((value - i).scaleb(v)) if v else 0
        return cls(value, i, v, f)


PluralRule = Callable[[Operands], PluralCategory]


# =============================================================================
# Built-in rules (CLDR cardinal)
# =============================================================================


def rule_other(op: Operands) -> PluralCategory:
    return OTHER


def rule_one_other(op: Operands) -> PluralCategory:
    # en, de, nl, sv, ...
    return ONE if op.i == 1 and op.v == 0 else OTHER


def rule_one_n(op: Operands) -> PluralCategory:
    # tr: one only for exactly 1
    return ONE if op.n == 1 else OTHER


def _millions(op: Operands) -> bool:
    return op.v == 0 and op.i != 0 and op.i % 1_000_000 == 0


def rule_romance(op: Operands) -> PluralCategory:
    # es
    if op.n == 1:
        return ONE
    if _millions(op):
        return MANY
    return OTHER


def rule_italian(op: Operands) -> PluralCategory:
    if op.i == 1 and op.v == 0:
        return ONE
    if _millions(op):
        return MANY
    return OTHER


def rule_french(op: Operands) -> PluralCategory:
    # fr and pt: 0 and 1 (including 1.5) are singular
    if op.i in (0, 1):
        return ONE
    if _millions(op):
        return MANY
    return OTHER


def rule_east_slavic(op: Operands) -> PluralCategory:
    # ru, uk
    if op.v != 0:
        return OTHER
    mod10, mod100 = op.i % 10, op.i % 100
    if mod10 == 1 and mod100 != 11:
        return ONE
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return FEW
    return MANY


def rule_polish(op: Operands) -> PluralCategory:
    if op.i == 1 and op.v == 0:
        return ONE
    if op.v != 0:
        return OTHER
    mod10, mod100 = op.i % 10, op.i % 100
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return FEW
    return MANY


def rule_czech(op: Operands) -> PluralCategory:
    # cs, sk
    if op.v != 0:
        return MANY
    if op.i == 1:
        return ONE
    if 2 <= op.i <= 4:
        return FEW
    return OTHER


def rule_arabic(op: Operands) -> PluralCategory:
    if op.n == 0:
        return ZERO
    if op.n == 1:
        return ONE
    if op.n == 2:
        return TWO
    if op.n != op.i:
        return OTHER
    mod100 = op.i % 100
    if 3 <= mod100 <= 10:
        return FEW
    if 11 <= mod100 <= 99:
        return MANY
    return OTHER


def rule_hebrew(op: Operands) -> PluralCategory:
    if (op.i == 1 and op.v == 0) or (op.i == 0 and op.v != 0):
        return ONE
    if op.i == 2 and op.v == 0:
        return TWO
    return OTHER


DEFAULT_RULE: PluralRule = rule_one_other

BUILTIN_RULES: dict[str, PluralRule] = {
    **{lang: rule_one_other for lang in ("en", "de", "nl", "sv", "da", "nb", "no", "fi", "et")},
    "it": rule_italian,
    "es": rule_romance,
    "fr": rule_french,
    "pt": rule_french,
    "ru": rule_east_slavic,
    "uk": rule_east_slavic,
    "pl": rule_polish,
    "cs": rule_czech,
    "sk": rule_czech,
    "ar": rule_arabic,
    "he": rule_hebrew,
    "tr": rule_one_n,
    **{lang: rule_other for lang in ("ja", "zh", "ko", "vi", "th", "id")},
}


class PluralRules:
    """
    Registry of plural rules by locale.

    Lookups are cached per requested locale, so the fallback warning is
    emitted once per locale rather than on every call.
    """

    def __init__(
        self,
        rules: dict[str, PluralRule] | None = None,
        default: PluralRule = DEFAULT_RULE,
    ):
        self._rules: dict[str, PluralRule] = dict(BUILTIN_RULES if rules is None else rules)
        self._default = default
        self._resolved: dict[str, PluralRule] = {}
        self._lock = threading.Lock()

    def register(self, locale: str, rule: PluralRule) -> None:
        """Register or replace the rule for a locale."""
        with self._lock:
            self._rules[normalize_locale(locale) or locale] = rule
            self._resolved = {}

    def has_rule(self, locale: str) -> bool:
        return (normalize_locale(locale) or locale) in self._rules

    def locales(self) -> list[str]:
        return sorted(self._rules)

    def rule_for(self, locale: str) -> PluralRule:
        """Return the rule for a locale, following the family and default fallbacks."""
        rule = self._resolved.get(locale)
        if rule is not None:
            return rule

        normalized = normalize_locale(locale) or locale
        rule = self._rules.get(normalized)
        if rule is None:
            family = locale_family(normalized)
            rule = self._rules.get(family)
            if rule is not None:
                logger.warning(
                    f"Missing plural rule for locale '{locale}', using family rule '{family}'"
                )
            else:
                rule = self._default
                logger.warning(
                    f"Missing plural rule for locale '{locale}', using default English-like rule"
                )

        with self._lock:
            self._resolved[locale] = rule
        return rule

    def category(self, locale: str, quantity: Quantity) -> PluralCategory:
        """Plural category of a quantity in a locale."""
        return self.rule_for(locale)(Operands.of(quantity))


_default_rules = PluralRules()


def default_rules() -> PluralRules:
    """The shared registry of built-in rules."""
    return _default_rules


def resolve(
    group: PluralGroup,
    locale: str,
    quantity: Quantity,
    rules: PluralRules | None = None,
    key_path: object = None,
) -> str:
    """
    Select the template of a plural group for a quantity.

    An exact quantity of 0 uses the group's 'zero' form when it has one,
    whatever the locale's rule says. Otherwise the rule's category is used,
    falling back to 'other' when the group lacks that category.

    Args:
        group: Plural group to select from
        locale: Locale whose plural rule applies
        quantity: Number being counted
        rules: Rule registry (defaults to the built-in registry)
        key_path: Key path reported if the group is broken

    Returns:
        The selected template (not yet interpolated)

    Raises:
        PluralFormMissingError: if the group has no 'other' form
    """
    fallback = group.get(OTHER)
    if fallback is None:
        raise PluralFormMissingError(locale, key_path)

    rules = rules or _default_rules
    category = rules.category(locale, quantity)

    if quantity == 0 and ZERO in group.forms:
        return group.forms[ZERO]

    template = group.get(category)
    return template if template is not None else fallback
