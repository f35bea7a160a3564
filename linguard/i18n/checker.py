"""
Structural equivalence checking for linguard.

Compares the schema of a candidate locale against the reference locale and
collects every divergence into a ValidationReport. Divergences are data:
nothing here raises for a mismatch, so one pass shows every problem.

Reports are deterministic: sorted by key path, then divergence kind, then
parameter name, independent of catalog insertion order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from linguard.i18n.catalog import KeyPath, NodeKind, PluralCategory
from linguard.i18n.scanner import ParamKind
from linguard.i18n.schema import CatalogSchema, SchemaEntry

# Parameter the engine injects into every plural call
PLURAL_COUNT_PARAM = "count"


class DivergenceKind(Enum):
    """Divergence types, in report order."""

    MISSING_KEY = "missing_key"
    EXTRA_KEY = "extra_key"
    KIND_MISMATCH = "kind_mismatch"
    PARAMETER_MISMATCH = "parameter_mismatch"
    MISSING_OTHER_FORM = "missing_other_form"


_KIND_ORDER = {kind: index for index, kind in enumerate(DivergenceKind)}


@dataclass(frozen=True)
class Divergence:
    """A single structural mismatch between a candidate locale and the reference."""

    key_path: KeyPath
    locale: str

    kind: ClassVar[DivergenceKind]
    blocking: ClassVar[bool] = True

    def sort_key(self) -> tuple[Any, ...]:
        return (self.key_path.segments, _KIND_ORDER[self.kind], "")

    def describe(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "locale": self.locale,
            "key": str(self.key_path),
            "message": self.describe(),
        }

    def __str__(self) -> str:
        return f"[{self.locale}] {self.key_path}: {self.describe()}"


@dataclass(frozen=True)
class MissingKey(Divergence):
    kind: ClassVar[DivergenceKind] = DivergenceKind.MISSING_KEY

    def describe(self) -> str:
        return "missing (present in reference locale)"


@dataclass(frozen=True)
class ExtraKey(Divergence):
    kind: ClassVar[DivergenceKind] = DivergenceKind.EXTRA_KEY
    blocking: ClassVar[bool] = False

    def describe(self) -> str:
        return "extra (absent from reference locale)"


@dataclass(frozen=True)
class KindMismatch(Divergence):
    expected: NodeKind = NodeKind.LEAF
    actual: NodeKind = NodeKind.LEAF

    kind: ClassVar[DivergenceKind] = DivergenceKind.KIND_MISMATCH

    def describe(self) -> str:
        return f"is a {self.actual.value}, reference has a {self.expected.value}"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["expected"] = self.expected.value
        data["actual"] = self.actual.value
        return data


@dataclass(frozen=True)
class ParameterMismatch(Divergence):
    """
    Parameter contract mismatch.

    reason is one of:
        missing     the reference uses the parameter, the candidate does not
        kind        both use it with different declared kinds
        unexpected  the candidate requires a parameter the reference does not
    """

    parameter: str = ""
    reason: str = "missing"
    expected: ParamKind | None = None
    actual: ParamKind | None = None

    kind: ClassVar[DivergenceKind] = DivergenceKind.PARAMETER_MISMATCH

    def sort_key(self) -> tuple[Any, ...]:
        return (self.key_path.segments, _KIND_ORDER[self.kind], self.parameter)

    def describe(self) -> str:
        if self.reason == "kind":
            return (
                f"parameter '{self.parameter}' is declared {self.actual.value}, "
                f"reference declares {self.expected.value}"
            )
        if self.reason == "unexpected":
            return f"parameter '{self.parameter}' is not used by the reference locale"
        return f"parameter '{self.parameter}' is missing"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["parameter"] = self.parameter
        data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class MissingOtherForm(Divergence):
    kind: ClassVar[DivergenceKind] = DivergenceKind.MISSING_OTHER_FORM

    def describe(self) -> str:
        return (
            "plural group has no 'other' form "
            "(a mapping keyed only by plural category names is read as a plural group)"
        )


@dataclass(frozen=True)
class ValidationReport:
    """Ordered divergences found for one candidate locale."""

    locale: str
    reference_locale: str
    divergences: tuple[Divergence, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.divergences

    @property
    def blocking(self) -> tuple[Divergence, ...]:
        return tuple(d for d in self.divergences if d.blocking)

    @property
    def warnings(self) -> tuple[Divergence, ...]:
        return tuple(d for d in self.divergences if not d.blocking)

    def of_type(self, *types: type[Divergence]) -> tuple[Divergence, ...]:
        return tuple(d for d in self.divergences if isinstance(d, types))

    def counts(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in DivergenceKind}
        for divergence in self.divergences:
            counts[divergence.kind.value] += 1
        return counts

    def key_paths(self) -> list[KeyPath]:
        return [d.key_path for d in self.divergences]

    def to_dict(self) -> dict[str, Any]:
        return {
            "locale": self.locale,
            "reference": self.reference_locale,
            "divergences": [d.to_dict() for d in self.divergences],
        }

    def render(self) -> str:
        return "\n".join(str(d) for d in self.divergences)

    def __iter__(self) -> Iterator[Divergence]:
        return iter(self.divergences)

    def __len__(self) -> int:
        return len(self.divergences)


def _compare_contracts(
    path: KeyPath, locale: str, ref: SchemaEntry, cand: SchemaEntry
) -> list[Divergence]:
    found: list[Divergence] = []

    for name, ref_kind in ref.contract.items():
        cand_kind = cand.contract.get(name)
        if cand_kind is None:
            found.append(ParameterMismatch(path, locale, name, "missing", ref_kind, None))
        elif not ref_kind.is_compatible(cand_kind):
            found.append(ParameterMismatch(path, locale, name, "kind", ref_kind, cand_kind))

    for name, cand_kind in cand.contract.items():
        if name in ref.contract:
            continue
        if cand.kind is NodeKind.PLURAL and name == PLURAL_COUNT_PARAM:
            continue
        found.append(ParameterMismatch(path, locale, name, "unexpected", None, cand_kind))

    return found


def check(reference: CatalogSchema, candidate: CatalogSchema, locale: str) -> ValidationReport:
    """
    Compare a candidate schema against the reference schema.

    Args:
        reference: Schema of the reference locale
        candidate: Schema of the locale being validated
        locale: Locale identifier recorded on each divergence

    Returns:
        ValidationReport with divergences in stable sorted order
    """
    found: list[Divergence] = []

    ref_keys = set(reference)
    cand_keys = set(candidate)
    shared = ref_keys & cand_keys

    mismatched = {path for path in shared if reference[path].kind is not candidate[path].kind}

    def shadowed(path: KeyPath) -> bool:
        return any(path.is_descendant_of(m) for m in mismatched)

    for path in mismatched:
        if not shadowed(path):
            found.append(KindMismatch(path, locale, reference[path].kind, candidate[path].kind))

    for path in ref_keys - cand_keys:
        if reference[path].is_message and not shadowed(path):
            found.append(MissingKey(path, locale))

    for path in cand_keys - ref_keys:
        if candidate[path].is_message and not shadowed(path):
            found.append(ExtraKey(path, locale))

    for path in shared - mismatched:
        ref_entry = reference[path]
        if ref_entry.is_message and not shadowed(path):
            found.extend(_compare_contracts(path, locale, ref_entry, candidate[path]))

    for path in cand_keys:
        entry = candidate[path]
        if entry.kind is NodeKind.PLURAL and PluralCategory.OTHER not in entry.categories:
            found.append(MissingOtherForm(path, locale))

    found.sort(key=lambda d: d.sort_key())
    return ValidationReport(locale, reference.locale, tuple(found))


def check_self(schema: CatalogSchema) -> ValidationReport:
    """Validate a schema on its own terms (only intrinsic divergences can appear)."""
    return check(schema, schema, schema.locale)
