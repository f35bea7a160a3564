"""
Template scanning for linguard.

Extracts the named interpolation parameters a message template references.

Marker syntax:
    {{name}}            parameter of unknown kind
    {{name:number}}     parameter declared as a number
    {{name:string}}     parameter declared as a string

Names match [A-Za-z_][A-Za-z0-9_]*. Anything else that looks like a marker
(unterminated braces, empty names, unknown kinds) is literal text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum

from linguard.i18n.errors import ParameterKindConflict

MARKER_RE = re.compile(
    r"\{\{\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*(?::\s*(?P<kind>string|number)\s*)?\}\}"
)


class ParamKind(Enum):
    """Scalar kind of an interpolation parameter."""

    UNKNOWN = "unknown"
    STRING = "string"
    NUMBER = "number"

    def is_compatible(self, other: ParamKind) -> bool:
        """Unknown is compatible with anything; concrete kinds only with themselves."""
        return self is ParamKind.UNKNOWN or other is ParamKind.UNKNOWN or self is other

    def merge(self, other: ParamKind) -> ParamKind:
        """Most specific of two compatible kinds."""
        return other if self is ParamKind.UNKNOWN else self


class ParameterContract:
    """
    Ordered, immutable set of parameter names with their kinds.

    Order is first appearance in the template (or in the first template that
    mentions the name, for merged contracts).
    """

    __slots__ = ("_params",)

    def __init__(self, params: Mapping[str, ParamKind] | Iterable[tuple[str, ParamKind]] = ()):
        self._params: dict[str, ParamKind] = dict(params)

    @classmethod
    def empty(cls) -> ParameterContract:
        return cls()

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._params)

    def kind(self, name: str) -> ParamKind:
        return self._params[name]

    def get(self, name: str, default: ParamKind | None = None) -> ParamKind | None:
        return self._params.get(name, default)

    def items(self) -> Iterator[tuple[str, ParamKind]]:
        return iter(self._params.items())

    def union(self, other: ParameterContract) -> ParameterContract:
        """
        Merge two contracts.

        Raises:
            ParameterKindConflict: if a name has incompatible kinds in the two contracts
        """
        merged = dict(self._params)
        for name, kind in other._params.items():
            existing = merged.get(name)
            if existing is None:
                merged[name] = kind
            elif not existing.is_compatible(kind):
                raise ParameterKindConflict(name, existing.value, kind.value)
            else:
                merged[name] = existing.merge(kind)
        return ParameterContract(merged)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __bool__(self) -> bool:
        return bool(self._params)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ParameterContract):
            return self._params == other._params
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._params.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}:{kind.value}" for name, kind in self._params.items())
        return f"ParameterContract({inner})"


def iter_markers(template: str) -> Iterator[re.Match[str]]:
    """Yield every well-formed marker match in a template."""
    return MARKER_RE.finditer(template)


def scan(template: str) -> ParameterContract:
    """
    Extract the parameter contract of a template.

    Args:
        template: Message template

    Returns:
        Contract listing each referenced name once, in order of first use

    Raises:
        ParameterKindConflict: if one name is declared as both number and string
    """
    params: dict[str, ParamKind] = {}
    for match in iter_markers(template):
        name = match.group("name")
        declared = match.group("kind")
        kind = ParamKind(declared) if declared else ParamKind.UNKNOWN

        existing = params.get(name)
        if existing is None:
            params[name] = kind
        elif not existing.is_compatible(kind):
            raise ParameterKindConflict(name, existing.value, kind.value, template)
        else:
            params[name] = existing.merge(kind)

    return ParameterContract(params)
