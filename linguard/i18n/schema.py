"""
Catalog schema building for linguard.

A schema is the flat, derived view of a catalog that validation and the
runtime engine work from: key path -> node kind plus parameter contract
(and plural categories for plural groups).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from linguard.i18n.catalog import (
    Branch,
    KeyLike,
    KeyPath,
    Leaf,
    LocaleCatalog,
    NodeKind,
    PluralCategory,
    PluralGroup,
)
from linguard.i18n.errors import InvalidKeyPathError, ParameterKindConflict, SchemaBuildError
from linguard.i18n.scanner import ParameterContract, scan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaEntry:
    """Schema row for one key path."""

    kind: NodeKind
    contract: ParameterContract
    categories: frozenset[PluralCategory] = frozenset()

    @property
    def is_message(self) -> bool:
        return self.kind is not NodeKind.BRANCH


class CatalogSchema(Mapping[KeyPath, SchemaEntry]):
    """Read-only table of key path -> SchemaEntry for one locale."""

    def __init__(self, locale: str, entries: Mapping[KeyPath, SchemaEntry]):
        self.locale = locale
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: KeyLike) -> SchemaEntry:
        if not isinstance(key, KeyPath):
            try:
                key = KeyPath(key)
            except InvalidKeyPathError as e:
                raise KeyError(key) from e
        return self._entries[key]

    def __iter__(self) -> Iterator[KeyPath]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def message_keys(self) -> list[KeyPath]:
        """Sorted key paths of Leaves and PluralGroups."""
        return sorted(path for path, entry in self._entries.items() if entry.is_message)

    def __repr__(self) -> str:
        return f"CatalogSchema(locale={self.locale!r}, entries={len(self._entries)})"


def _plural_contract(group: PluralGroup, locale: str, path: KeyPath) -> ParameterContract:
    contract = ParameterContract.empty()
    for category in PluralCategory:
        template = group.get(category)
        if template is None:
            continue
        try:
            contract = contract.union(scan(template))
        except ParameterKindConflict as e:
            raise SchemaBuildError(
                f"Plural form '{category.value}' conflicts with other forms: {e}",
                locale,
                path,
            ) from e
    return contract


def build_schema(catalog: LocaleCatalog) -> CatalogSchema:
    """
    Build the schema of a catalog.

    Plural groups get the union of the parameters used across their forms;
    forms may use different subsets of that union.

    Args:
        catalog: Catalog to describe

    Returns:
        A new CatalogSchema; the catalog itself is not copied

    Raises:
        SchemaBuildError: if a parameter is used with incompatible kinds
    """
    entries: dict[KeyPath, SchemaEntry] = {}

    for path, node in catalog.walk():
        if isinstance(node, Leaf):
            try:
                contract = scan(node.template)
            except ParameterKindConflict as e:
                raise SchemaBuildError(str(e), catalog.locale, path) from e
            entries[path] = SchemaEntry(NodeKind.LEAF, contract)
        elif isinstance(node, PluralGroup):
            contract = _plural_contract(node, catalog.locale, path)
            entries[path] = SchemaEntry(NodeKind.PLURAL, contract, node.categories)
        elif isinstance(node, Branch):
            entries[path] = SchemaEntry(NodeKind.BRANCH, ParameterContract.empty())

    logger.debug(f"Built schema for '{catalog.locale}' with {len(entries)} entries")
    return CatalogSchema(catalog.locale, entries)
