"""
Catalog data model for linguard.

A locale catalog is a tree of nodes:
- Leaf: a single message template
- PluralGroup: templates keyed by plural category
- Branch: named children

Catalogs are immutable snapshots. Updating a locale means building a new
LocaleCatalog and publishing it, never patching nodes in place.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from types import MappingProxyType
from typing import Any, Union

from linguard.i18n.errors import CatalogFormatError, InvalidKeyPathError

PATH_SEPARATOR = "."


class PluralCategory(Enum):
    """CLDR plural categories, in canonical order."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


PLURAL_CATEGORY_NAMES = frozenset(category.value for category in PluralCategory)


class NodeKind(Enum):
    """Kind of node a key path resolves to."""

    LEAF = "leaf"
    PLURAL = "plural"
    BRANCH = "branch"


@total_ordering
class KeyPath:
    """
    Immutable path of segments identifying a node in a catalog.

    Accepts a dotted string or a sequence of segments:

        KeyPath("user.profile.greeting")
        KeyPath(["user", "profile", "greeting"])
    """

    __slots__ = ("_segments",)

    def __init__(self, path: str | Sequence[str] | KeyPath):
        if isinstance(path, KeyPath):
            segments = path.segments
        elif isinstance(path, str):
            segments = tuple(path.split(PATH_SEPARATOR))
        else:
            segments = tuple(path)

        if not segments:
            raise InvalidKeyPathError("Key path must have at least one segment")
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise InvalidKeyPathError(f"Invalid empty segment in key path {segments!r}")
            if PATH_SEPARATOR in segment:
                raise InvalidKeyPathError(
                    f"Segment {segment!r} must not contain '{PATH_SEPARATOR}'"
                )
        self._segments: tuple[str, ...] = segments

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def parent(self) -> KeyPath | None:
        if len(self._segments) == 1:
            return None
        return KeyPath(self._segments[:-1])

    def child(self, segment: str) -> KeyPath:
        return KeyPath(self._segments + (segment,))

    def is_descendant_of(self, other: KeyPath) -> bool:
        """True if other is a strict prefix of this path."""
        n = len(other._segments)
        return len(self._segments) > n and self._segments[:n] == other._segments

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __hash__(self) -> int:
        return hash(self._segments)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyPath):
            return self._segments == other._segments
        return NotImplemented

    def __lt__(self, other: KeyPath) -> bool:
        if not isinstance(other, KeyPath):
            return NotImplemented
        return self._segments < other._segments

    def __str__(self) -> str:
        return PATH_SEPARATOR.join(self._segments)

    def __repr__(self) -> str:
        return f"KeyPath({str(self)!r})"


KeyLike = Union[str, Sequence[str], KeyPath]


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True)
class Leaf:
    """A single message template."""

    template: str

    kind = NodeKind.LEAF


@dataclass(frozen=True)
class PluralGroup:
    """Message templates keyed by plural category."""

    forms: Mapping[PluralCategory, str]

    kind = NodeKind.PLURAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "forms", MappingProxyType(dict(self.forms)))

    @property
    def categories(self) -> frozenset[PluralCategory]:
        return frozenset(self.forms)

    def get(self, category: PluralCategory) -> str | None:
        return self.forms.get(category)


@dataclass(frozen=True)
class Branch:
    """Named children of a catalog node."""

    children: Mapping[str, CatalogNode] = field(default_factory=dict)

    kind = NodeKind.BRANCH

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", MappingProxyType(dict(self.children)))


CatalogNode = Union[Leaf, PluralGroup, Branch]


@dataclass(frozen=True)
class LocaleCatalog:
    """The full message tree for one locale."""

    locale: str
    root: Branch

    def lookup(self, key: KeyLike) -> CatalogNode | None:
        """Return the node at key, or None if any segment is missing."""
        node: CatalogNode = self.root
        for segment in KeyPath(key):
            if not isinstance(node, Branch):
                return None
            child = node.children.get(segment)
            if child is None:
                return None
            node = child
        return node

    def walk(self) -> Iterator[tuple[KeyPath, CatalogNode]]:
        """Yield (path, node) for every node below the root, depth first."""
        yield from _walk(self.root, ())


def _walk(branch: Branch, prefix: tuple[str, ...]) -> Iterator[tuple[KeyPath, CatalogNode]]:
    for name in sorted(branch.children):
        node = branch.children[name]
        path = KeyPath(prefix + (name,))
        yield path, node
        if isinstance(node, Branch):
            yield from _walk(node, path.segments)


# =============================================================================
# Wire format
# =============================================================================


def _is_plural_mapping(data: Mapping[Any, Any]) -> bool:
    return (
        bool(data)
        and all(isinstance(k, str) and k in PLURAL_CATEGORY_NAMES for k in data)
        and all(isinstance(v, str) for v in data.values())
    )


def parse_node(data: Any, locale: str, path: tuple[str, ...] = ()) -> CatalogNode:
    """
    Convert deserialized catalog data into a catalog node.

    Strings become Leaves. A non-empty mapping whose keys are all plural
    category names and whose values are all strings becomes a PluralGroup.
    Any other mapping becomes a Branch.

    Raises:
        CatalogFormatError: for values that are neither strings nor mappings
    """
    where = PATH_SEPARATOR.join(path) if path else None

    if isinstance(data, str):
        return Leaf(data)

    if isinstance(data, Mapping):
        if path and _is_plural_mapping(data):
            return PluralGroup({PluralCategory(k): v for k, v in data.items()})

        children: dict[str, CatalogNode] = {}
        for name, value in data.items():
            if not isinstance(name, str) or not name or PATH_SEPARATOR in name:
                raise CatalogFormatError(
                    f"Invalid key {name!r}: keys must be non-empty strings without '.'",
                    locale=locale,
                    key_path=where,
                )
            children[name] = parse_node(value, locale, path + (name,))
        return Branch(children)

    raise CatalogFormatError(
        f"Unsupported value of type {type(data).__name__}; expected a string or a mapping",
        locale=locale,
        key_path=where,
    )


def parse_catalog(locale: str, data: Any) -> LocaleCatalog:
    """Build a LocaleCatalog from a nested mapping (the JSON/YAML wire format)."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise CatalogFormatError(
            f"Catalog root must be a mapping, got {type(data).__name__}", locale=locale
        )
    root = parse_node(data, locale)
    if not isinstance(root, Branch):
        raise CatalogFormatError("Catalog root must be a section of keys", locale=locale)
    return LocaleCatalog(locale=locale, root=root)


def to_data(node: CatalogNode) -> Any:
    """Convert a node back to plain data in the wire format."""
    if isinstance(node, Leaf):
        return node.template
    if isinstance(node, PluralGroup):
        return {c.value: node.forms[c] for c in PluralCategory if c in node.forms}
    return {name: to_data(child) for name, child in node.children.items()}
