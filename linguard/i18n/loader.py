"""
File-based catalog loading for linguard.

Catalogs live in a directory, one per locale, in either layout:

    locales/en.yaml            single file (.yaml, .yml or .json)
    locales/es/common.yaml     one file per namespace; each file's content is
    locales/es/errors.json     placed under its stem ("common", "errors")

A mapping whose keys are all plural category names (zero, one, two, few,
many, other) and whose values are all strings is read as a plural group,
not as a nested section. Such a group must have an "other" form.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from linguard.i18n.catalog import LocaleCatalog, parse_catalog
from linguard.i18n.detector import normalize_locale
from linguard.i18n.errors import CatalogFormatError, CatalogNotFoundError

logger = logging.getLogger(__name__)

CATALOG_SUFFIXES = (".yaml", ".yml", ".json")


class CatalogYamlLoader(yaml.SafeLoader):
    """
    SafeLoader that keeps scalar mapping keys as written.

    Plain YAML turns keys such as `yes`, `off` or `404` into bools and ints;
    catalog keys are always strings, as in the JSON format.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            return super().construct_mapping(node, deep=deep)

        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found a non-scalar key",
                    key_node.start_mark,
                )
            mapping[key_node.value] = self.construct_object(value_node, deep=deep)
        return mapping


def read_catalog_file(path: Path, locale: str | None = None) -> Any:
    """
    Read one catalog file.

    Args:
        path: YAML or JSON file
        locale: Locale reported in errors

    Returns:
        Deserialized content (an empty dict for empty files)

    Raises:
        CatalogFormatError: if the file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.load(f, Loader=CatalogYamlLoader)
    except json.JSONDecodeError as e:
        raise CatalogFormatError(f"Invalid JSON in {path}: {e}", locale=locale) from e
    except yaml.YAMLError as e:
        raise CatalogFormatError(f"Malformed YAML in {path}: {e}", locale=locale) from e
    except OSError as e:
        raise CatalogFormatError(f"Could not read {path}: {e}", locale=locale) from e

    return {} if data is None else data


class CatalogLoader:
    """
    Loads LocaleCatalog values from a directory of YAML/JSON files.

    Implements the catalog source interface the engine consumes
    (load_catalog(locale) -> LocaleCatalog).
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _candidates(self, locale: str) -> list[str]:
        names = [locale]
        normalized = normalize_locale(locale)
        if normalized:
            for variant in (normalized, normalized.replace("-", "_"), normalized.lower()):
                if variant not in names:
                    names.append(variant)
        return names

    def _find(self, locale: str) -> Path | None:
        for name in self._candidates(locale):
            for suffix in CATALOG_SUFFIXES:
                path = self.directory / f"{name}{suffix}"
                if path.is_file():
                    return path
            path = self.directory / name
            if path.is_dir():
                return path
        return None

    def _read_namespaces(self, directory: Path, locale: str) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for path in sorted(directory.iterdir()):
            if not path.is_file() or path.suffix not in CATALOG_SUFFIXES:
                continue
            if path.stem in data:
                raise CatalogFormatError(
                    f"Namespace '{path.stem}' is defined by more than one file in {directory}",
                    locale=locale,
                )
            data[path.stem] = read_catalog_file(path, locale)
        return data

    def load_data(self, locale: str) -> Any:
        """Raw catalog data for a locale, before parsing."""
        path = self._find(locale)
        if path is None:
            raise CatalogNotFoundError(locale, str(self.directory))

        logger.debug(f"Loading catalog for '{locale}' from {path}")
        if path.is_dir():
            return self._read_namespaces(path, locale)
        return read_catalog_file(path, locale)

    def load_catalog(self, locale: str) -> LocaleCatalog:
        """
        Load and parse the catalog of a locale.

        Raises:
            CatalogNotFoundError: if no file or directory exists for the locale
            CatalogFormatError: if the content is unreadable or not a valid catalog
        """
        normalized = normalize_locale(locale) or locale
        return parse_catalog(normalized, self.load_data(locale))

    def available_locales(self) -> list[str]:
        """Locales with a catalog file or namespace directory, normalized and sorted."""
        if not self.directory.is_dir():
            return []

        found: set[str] = set()
        for path in self.directory.iterdir():
            if path.is_file() and path.suffix in CATALOG_SUFFIXES:
                name = path.stem
            elif path.is_dir() and any(
                p.is_file() and p.suffix in CATALOG_SUFFIXES for p in path.iterdir()
            ):
                name = path.name
            else:
                continue
            normalized = normalize_locale(name)
            if normalized is None:
                logger.debug(f"Ignoring {path}: not a locale name")
                continue
            found.add(normalized)
        return sorted(found)
