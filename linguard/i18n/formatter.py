"""
Locale-aware value formatting for linguard.

This is the formatting collaborator the interpolator hands tagged values to
(see interpolate.Localized). It covers:
- Numbers (grouping and decimal separators)
- Dates, times and datetimes
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from linguard.i18n.detector import DEFAULT_LOCALE, locale_family, normalize_locale

# Locale-specific formatting configurations, keyed by locale or family
LOCALE_CONFIGS: dict[str, dict[str, str]] = {
    "en": {
        "date_format": "%Y-%m-%d",
        "time_format": "%I:%M %p",
        "datetime_format": "%Y-%m-%d %I:%M %p",
        "decimal_separator": ".",
        "thousands_separator": ",",
    },
    "en-GB": {
        "date_format": "%d/%m/%Y",
        "time_format": "%H:%M",
        "datetime_format": "%d/%m/%Y %H:%M",
        "decimal_separator": ".",
        "thousands_separator": ",",
    },
    "es": {
        "date_format": "%d/%m/%Y",
        "time_format": "%H:%M",
        "datetime_format": "%d/%m/%Y %H:%M",
        "decimal_separator": ",",
        "thousands_separator": ".",
    },
    "fr": {
        "date_format": "%d/%m/%Y",
        "time_format": "%H:%M",
        "datetime_format": "%d/%m/%Y %H:%M",
        "decimal_separator": ",",
        "thousands_separator": " ",
    },
    "de": {
        "date_format": "%d.%m.%Y",
        "time_format": "%H:%M",
        "datetime_format": "%d.%m.%Y %H:%M",
        "decimal_separator": ",",
        "thousands_separator": ".",
    },
    "pt": {
        "date_format": "%d/%m/%Y",
        "time_format": "%H:%M",
        "datetime_format": "%d/%m/%Y %H:%M",
        "decimal_separator": ",",
        "thousands_separator": ".",
    },
    "zh": {
        "date_format": "%Y年%m月%d日",
        "time_format": "%H:%M",
        "datetime_format": "%Y年%m月%d日 %H:%M",
        "decimal_separator": ".",
        "thousands_separator": ",",
    },
}

STYLES = ("number", "date", "time", "datetime")


def config_for(locale: str) -> dict[str, str]:
    """Formatting configuration for a locale, falling back to its family, then English."""
    normalized = normalize_locale(locale) or locale
    if normalized in LOCALE_CONFIGS:
        return LOCALE_CONFIGS[normalized]
    return LOCALE_CONFIGS.get(locale_family(normalized), LOCALE_CONFIGS[DEFAULT_LOCALE])


class LocaleFormatter:
    """
    Provides locale-aware formatting for numbers and dates.

    One formatter per locale; instances are immutable and safe to share
    between threads.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        """
        Initialize the formatter with a locale.

        Args:
            locale: Locale identifier (unknown locales format like English)
        """
        self._locale = locale
        self._config = config_for(locale)

    @property
    def locale(self) -> str:
        """Get the formatter's locale."""
        return self._locale

    def format_number(self, number: int | float | Decimal, decimals: int | None = None) -> str:
        """
        Format a number according to locale conventions.

        Args:
            number: Number to format
            decimals: Number of decimal places; None keeps integers whole
                and shows floats with up to 2 places

        Returns:
            Formatted number string
        """
        decimal_sep = self._config["decimal_separator"]
        thousands_sep = self._config["thousands_separator"]

        if decimals is None:
            if isinstance(number, int) or float(number).is_integer():
                formatted = f"{int(number):,}"
            else:
                formatted = f"{number:,.2f}".rstrip("0").rstrip(".")
        elif decimals > 0:
            formatted = f"{number:,.{decimals}f}"
        else:
            formatted = f"{int(round(number)):,}"

        # Replace separators according to locale
        if decimal_sep != "." or thousands_sep != ",":
            # Use placeholder to avoid replacement conflicts
            formatted = formatted.replace(",", "\x00")
            formatted = formatted.replace(".", decimal_sep)
            formatted = formatted.replace("\x00", thousands_sep)

        return formatted

    def format_date(self, dt: date) -> str:
        """Format a date according to locale conventions."""
        return dt.strftime(self._config["date_format"])

    def format_time(self, dt: datetime | time) -> str:
        """Format a time according to locale conventions."""
        return dt.strftime(self._config["time_format"])

    def format_datetime(self, dt: datetime) -> str:
        """Format a datetime according to locale conventions."""
        return dt.strftime(self._config["datetime_format"])

    def format(self, value: Any, style: str) -> str:
        """
        Format a value in a named style.

        Args:
            value: Value to format
            style: One of "number", "date", "time", "datetime"

        Raises:
            ValueError: if the style is unknown
        """
        if style == "number":
            return self.format_number(value)
        if style == "date":
            return self.format_date(value)
        if style == "time":
            return self.format_time(value)
        if style == "datetime":
            return self.format_datetime(value)
        raise ValueError(f"Unknown format style: {style!r}. Supported: {', '.join(STYLES)}")
