"""TypeScript type expressions and their raw text rendering.

The translator builds these nodes; `render` turns them into raw text. The
raw text is deliberately loose: empty object and tuple literals come out
padded (`{  }`, `[ ]`) and enum unions are broken across lines. The
normalizer in `normalize.py` produces the final canonical and debug forms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


# ============================================================
# NODES
# ============================================================


@dataclass(frozen=True)
class TsType:
    """Base for all TypeScript type expressions."""


@dataclass(frozen=True)
class TsKeyword(TsType):
    """Built-in type keyword: number, string, boolean, null, never, any."""

    name: str


@dataclass(frozen=True)
class TsRef(TsType):
    """Reference to a type by name, emitted verbatim."""

    name: str


@dataclass(frozen=True)
class TsLiteral(TsType):
    """String literal type, e.g. "Circle"."""

    value: str


@dataclass(frozen=True)
class TsArray(TsType):
    """Array suffix type, T[]."""

    element: TsType


@dataclass(frozen=True)
class TsTuple(TsType):
    """Tuple type, [A, B]."""

    elements: tuple[TsType, ...] = ()


@dataclass(frozen=True)
class TsGeneric(TsType):
    """Generic instantiation, Name<A, B>."""

    name: str
    args: tuple[TsType, ...]


@dataclass(frozen=True)
class TsUnion(TsType):
    """Union type, A | B.

    `multiline` puts each member on its own line in the raw text; used for
    the top-level union of an enum. Normalization folds it back onto one
    line. Members are never flattened.
    """

    members: tuple[TsType, ...]
    multiline: bool = False


@dataclass(frozen=True)
class TsMember:
    """Object type member, key: T."""

    key: str
    typ: TsType


@dataclass(frozen=True)
class TsObject(TsType):
    """Object literal type, { a: A, b: B }."""

    members: tuple[TsMember, ...] = ()


NUMBER = TsKeyword("number")
STRING = TsKeyword("string")
BOOLEAN = TsKeyword("boolean")
NULL = TsKeyword("null")
NEVER = TsKeyword("never")
ANY = TsKeyword("any")


# ============================================================
# RENDERING
# ============================================================


_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def escape_string(value: str) -> str:
    """Escape a string for use in a double-quoted literal (without quotes)."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )


def property_key(key: str) -> str:
    """Bare key when it is an identifier, quoted otherwise (content-type)."""
    if _IDENT_RE.match(key):
        return key
    return '"' + escape_string(key) + '"'


def render(typ: TsType) -> str:
    """Render a type expression to raw (un-normalized) text."""
    match typ:
        case TsKeyword(name=name):
            return name
        case TsRef(name=name):
            return name
        case TsLiteral(value=value):
            return '"' + escape_string(value) + '"'
        case TsArray(element=element):
            return _operand(element) + "[]"
        case TsTuple(elements=elements):
            if not elements:
                return "[ ]"
            return "[" + ", ".join(render(e) for e in elements) + "]"
        case TsGeneric(name=name, args=args):
            return name + "<" + ", ".join(render(a) for a in args) + ">"
        case TsUnion(members=members, multiline=multiline):
            sep = "\n| " if multiline else " | "
            return sep.join(_operand(m) for m in members)
        case TsObject(members=members):
            body = ", ".join(property_key(m.key) + ": " + render(m.typ) for m in members)
            return "{ " + body + " }"
        case _:
            raise NotImplementedError(f"Unknown type node: {type(typ).__name__}")


def _operand(typ: TsType) -> str:
    """Render a union operand or array element, parenthesizing unions."""
    if isinstance(typ, TsUnion) and len(typ.members) > 1:
        return "(" + render(typ) + ")"
    return render(typ)
