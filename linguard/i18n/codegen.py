"""
Typed accessor generation for linguard.

Turns a schema into a Python module with one method per message key, so
application code calls

    messages.user_profile_greeting(name="Ana")

instead of passing raw key strings. Type checkers then flag misspelled keys
and missing or misnamed parameters before the code runs.
"""

from __future__ import annotations

import keyword
import re

from linguard.i18n.catalog import KeyPath, NodeKind
from linguard.i18n.checker import PLURAL_COUNT_PARAM
from linguard.i18n.scanner import ParamKind
from linguard.i18n.schema import CatalogSchema

TYPE_HINTS = {
    ParamKind.NUMBER: "int | float",
    ParamKind.STRING: "str",
    ParamKind.UNKNOWN: "str | int | float",
}

_INVALID_CHARS = re.compile(r"\W")

HEADER = '''"""
Typed message accessors generated by linguard from the '{locale}' catalog.

Do not edit by hand; regenerate with `linguard codegen`.
"""

from __future__ import annotations

from linguard.i18n.engine import CatalogEngine


class {class_name}:
    def __init__(self, engine: CatalogEngine, locale: str):
        self._engine = engine
        self._locale = locale

    @property
    def locale(self) -> str:
        return self._locale
'''


def _identifier(text: str) -> str:
    name = _INVALID_CHARS.sub("_", text)
    if not name or name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def method_name(path: KeyPath) -> str:
    """Method name for a key path ("user.profile.greeting" -> "user_profile_greeting")."""
    name = _identifier("_".join(path.segments))
    if name.startswith("_"):
        name = f"msg{name}"
    return name


def _unique(name: str, taken: set[str]) -> str:
    candidate, suffix = name, 2
    while candidate in taken:
        candidate = f"{name}{suffix}"
        suffix += 1
    taken.add(candidate)
    return candidate


def _method(name: str, path: KeyPath, kind: NodeKind, params: list[tuple[str, ParamKind]]) -> str:
    args = ["self"]
    if kind is NodeKind.PLURAL:
        args.append("count: int | float")

    mapping = []
    if params:
        args.append("*")
        # Names usable as-is keep them; renamed ones (self, keywords) get the next free name
        verbatim = {
            param for param, _ in params if param != "self" and _identifier(param) == param
        }
        taken = {"self"} | verbatim
        for param, param_kind in params:
            if param in verbatim:
                arg = param
            else:
                arg = _identifier(param)
                if arg == "self":
                    arg = "self_"
                arg = _unique(arg, taken)
            args.append(f"{arg}: {TYPE_HINTS[param_kind]}")
            mapping.append(f"{param!r}: {arg}")

    key = "(" + ", ".join(repr(s) for s in path.segments) + ("," if len(path) == 1 else "") + ")"
    call = [key, "self._locale", "{" + ", ".join(mapping) + "}"]
    if kind is NodeKind.PLURAL:
        call.append("count")

    return (
        f"\n    def {name}({', '.join(args)}) -> str:\n"
        f'        """{path}"""\n'
        f"        return self._engine.translate({', '.join(call)})\n"
    )


def generate_accessors(schema: CatalogSchema, class_name: str = "Messages") -> str:
    """
    Generate the source of an accessor module for a schema.

    Args:
        schema: Schema to generate from (normally the reference locale's)
        class_name: Name of the generated class

    Returns:
        Python source code
    """
    if not class_name.isidentifier() or keyword.iskeyword(class_name):
        raise ValueError(f"Invalid class name: {class_name!r}")

    parts = [HEADER.format(locale=schema.locale, class_name=class_name)]
    used = {"locale"}

    for path in schema.message_keys():
        entry = schema[path]
        params = [
            (name, kind)
            for name, kind in entry.contract.items()
            if not (entry.kind is NodeKind.PLURAL and name == PLURAL_COUNT_PARAM)
        ]

        name = method_name(path)
        candidate, suffix = name, 2
        while candidate in used:
            candidate = f"{name}_{suffix}"
            suffix += 1
        used.add(candidate)

        parts.append(_method(candidate, path, entry.kind, params))

    return "".join(parts)
