"""
Template interpolation for linguard.

Substitutes parameter values into {{name}} markers. A marker whose name has
no value is left verbatim so the gap shows up in the output instead of
crashing the caller; required-parameter checks belong to the engine.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from linguard.i18n.scanner import MARKER_RE


class Formatter(Protocol):
    """Locale-formatting collaborator (see formatter.LocaleFormatter)."""

    def format(self, value: Any, style: str) -> str: ...


@dataclass(frozen=True)
class Localized:
    """
    A call-site tag asking for locale-aware formatting of a value.

        translate("order.placed", "de", {"date": Localized(order.date, "date")})
    """

    value: Any
    style: str = "number"


def to_display(value: Any) -> str:
    """
    Locale-agnostic display string of a value.

    Numbers are plain decimals: no grouping, no exponent, and integral
    floats drop their fraction (5.0 -> "5").
    """
    if isinstance(value, Localized):
        value = value.value
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value)
        return format(value, "f")
    return str(value)


def interpolate(
    template: str,
    params: Mapping[str, Any] | None = None,
    formatter: Formatter | None = None,
) -> str:
    """
    Replace {{name}} markers with parameter values.

    Args:
        template: Message template
        params: Values by parameter name; extra names are ignored
        formatter: Collaborator used for Localized values

    Returns:
        The interpolated string

    Examples:
        >>> interpolate("{{count}} reviews", {"count": 5})
        '5 reviews'

        >>> interpolate("Hello, {{name}}!", {})
        'Hello, {{name}}!'
    """
    if not params or "{{" not in template:
        return template

    def replace(match: Any) -> str:
        name = match.group("name")
        if name not in params:
            return match.group(0)
        value = params[name]
        if isinstance(value, Localized) and formatter is not None:
            return formatter.format(value.value, value.style)
        return to_display(value)

    return MARKER_RE.sub(replace, template)
