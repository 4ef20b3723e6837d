"""Built-in path types with a fixed serde encoding.

The table is ordered and read-only; `lookup` returns the first entry whose
name matches and whose arity requirement is met. Anything not matched is
passed through verbatim by the translator (`Foo`, `Foo<A, B>`).

Rules receive the recursive translate function and the raw arguments so
that transparent wrappers can recurse without translating the rest.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .model import PRIMITIVE_NAMES, TypeRef
from .tstype import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    TsArray,
    TsGeneric,
    TsLiteral,
    TsMember,
    TsObject,
    TsType,
    TsUnion,
)

Translate = Callable[[TypeRef], TsType]
Rule = Callable[[Translate, Sequence[TypeRef]], TsType]


@dataclass(frozen=True)
class BuiltIn:
    """One table entry: identifiers, minimum type-argument count, rule."""

    names: frozenset[str]
    min_args: int
    rule: Rule


def _string(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return STRING


def _number(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return NUMBER


def _boolean(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return BOOLEAN


def _sequence(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    members = tuple(tr(a) for a in args)
    if len(members) == 1:
        return TsArray(members[0])
    return TsArray(TsUnion(members))


def _transparent(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return tr(args[0])


def _map(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return TsGeneric("Map", (tr(args[0]), tr(args[1])))


def _set(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return TsGeneric("Set", (tr(args[0]),))


def _option(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return TsUnion((tr(args[0]), NULL))


def _result(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    return TsUnion((tr(args[0]), tr(args[1])))


def _tagged_result(tr: Translate, args: Sequence[TypeRef]) -> TsType:
    ok = TsObject((TsMember("kind", TsLiteral("Ok")), TsMember("value", tr(args[0]))))
    err = TsObject((TsMember("kind", TsLiteral("Err")), TsMember("error", tr(args[1]))))
    return TsUnion((ok, err))


def _names(kind: str) -> frozenset[str]:
    return frozenset(n for n, k in PRIMITIVE_NAMES.items() if k == kind)


BUILTINS: tuple[BuiltIn, ...] = (
    BuiltIn(_names("number"), 0, _number),
    BuiltIn(_names("boolean"), 0, _boolean),
    BuiltIn(frozenset({"String", "str"}), 0, _string),
    BuiltIn(frozenset({"Vec", "VecDeque"}), 1, _sequence),
    BuiltIn(frozenset({"Box", "Rc", "Arc", "Cow"}), 1, _transparent),
    BuiltIn(frozenset({"HashMap", "BTreeMap"}), 2, _map),
    BuiltIn(frozenset({"HashSet", "BTreeSet"}), 1, _set),
    BuiltIn(frozenset({"Option"}), 1, _option),
    BuiltIn(frozenset({"Result"}), 2, _result),
)

# Prepended by the translator when results="tagged"; first match wins.
TAGGED_RESULT = BuiltIn(frozenset({"Result"}), 2, _tagged_result)


def lookup(
    ident: str, nargs: int, table: Sequence[BuiltIn] = BUILTINS
) -> BuiltIn | None:
    """First entry matching `ident` with at least `min_args` arguments."""
    for entry in table:
        if ident in entry.names and nargs >= entry.min_args:
            return entry
    return None
