"""
Locale identifiers for linguard.

Normalizes locale strings, derives locale families for fallback
(es-MX -> es), and detects the OS locale from environment variables:
- LANGUAGE
- LC_ALL
- LC_MESSAGES
- LANG
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable

DEFAULT_LOCALE = "en"

# Environment variables to check, in priority order
LOCALE_ENV_VARS = ["LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"]

# Names that are not BCP 47 tags but show up in the environment
LOCALE_ALIASES = {
    "c": "en",
    "posix": "en",
    "chinese": "zh",
}

_TAG_RE = re.compile(r"^[a-z]{2,3}(-[a-z0-9]{2,8})*$")


def normalize_locale(locale_string: str | None) -> str | None:
    """
    Normalize a locale string to a hyphenated tag.

    Handles formats like:
    - en_US.UTF-8
    - es-mx
    - fr.UTF-8
    - sr_RS@latin (modifier dropped)
    - C / POSIX (mapped to English)

    Args:
        locale_string: Raw locale string

    Returns:
        Tag such as "es-MX" or "zh-Hant-TW", or None if it cannot be parsed
    """
    if not locale_string:
        return None

    value = locale_string.strip().lower()
    if not value:
        return None

    # Remove encoding and modifier suffixes (.UTF-8, @latin)
    value = re.sub(r"\.[a-z0-9_-]+(@[a-z]+)?$", "", value)
    value = re.sub(r"@[a-z]+$", "", value)
    value = value.replace("_", "-")

    if value in LOCALE_ALIASES:
        return LOCALE_ALIASES[value]
    if not _TAG_RE.match(value):
        return None

    parts = value.split("-")
    out = [parts[0]]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            out.append(part.title())  # script subtag
        elif len(part) in (2, 3):
            out.append(part.upper())  # region subtag
        else:
            out.append(part)
    return "-".join(out)


def locale_family(locale: str) -> str:
    """Return the language part of a locale ("es-MX" -> "es")."""
    normalized = normalize_locale(locale) or locale
    return normalized.split("-")[0]


def fallback_chain(locale: str, reference: str | None = None) -> list[str]:
    """
    Locales to consult, in order, when resolving a key for a locale.

    The requested locale comes first, then its family, then the reference
    locale. Duplicates are removed.
    """
    chain: list[str] = []
    for candidate in (locale, normalize_locale(locale), locale_family(locale), reference):
        if candidate and candidate not in chain:
            chain.append(candidate)
    return chain


def match_locale(locale: str, available: Iterable[str]) -> str | None:
    """
    Find the best available locale for a requested one.

    Exact match wins, then the family, then any available locale of the same
    family ("pt" matches "pt-BR" if that is all there is).
    """
    available = list(available)
    normalized = normalize_locale(locale)
    if normalized is None:
        return None

    by_normalized = {normalize_locale(a) or a: a for a in available}
    if normalized in by_normalized:
        return by_normalized[normalized]

    family = locale_family(normalized)
    if family in by_normalized:
        return by_normalized[family]

    for candidate in sorted(by_normalized):
        if locale_family(candidate) == family:
            return by_normalized[candidate]
    return None


def detect_os_locale(supported: Iterable[str] | None = None, default: str = DEFAULT_LOCALE) -> str:
    """
    Detect the OS locale from environment variables.

    The first value that maps to a supported locale wins. With no supported
    list, the first parseable value wins.

    Args:
        supported: Locales to accept, or None to accept any
        default: Returned when nothing matches

    Returns:
        Detected locale

    Examples:
        With LANG=es_ES.UTF-8: returns 'es' if only 'es' is supported
        With LC_ALL=fr_FR: returns 'fr-FR' when any locale is accepted
    """
    supported_list = list(supported) if supported is not None else None

    for var in LOCALE_ENV_VARS:
        value = os.environ.get(var, "")
        if not value:
            continue

        # LANGUAGE can have multiple values separated by ':'
        candidates = value.split(":") if var == "LANGUAGE" else [value]
        for candidate in candidates:
            parsed = normalize_locale(candidate)
            if parsed is None:
                continue
            if supported_list is None:
                return parsed
            matched = match_locale(parsed, supported_list)
            if matched:
                return matched

    return default


def get_os_locale_info(supported: Iterable[str] | None = None) -> dict[str, str | None]:
    """
    Get OS locale information for debugging.

    Returns:
        Dictionary with the relevant locale environment variables
    """
    env_vars = LOCALE_ENV_VARS + ["LC_CTYPE", "LC_TIME", "LC_NUMERIC"]

    info: dict[str, str | None] = {}
    for var in env_vars:
        info[var] = os.environ.get(var)

    info["detected_locale"] = detect_os_locale(supported)
    return info
