"""tsdef object model - resolved host types consumed by the translator.

This module defines the input side of translation. A reflection frontend
builds one `Container` per host struct/enum with every serde attribute
already applied (renames, tag configuration); the translator only reads it.

Architecture:
    Host source -> Frontend (out of tree) -> [Model] -> Translator -> TsType -> text

All nodes are frozen: the model is built once per translation call and
never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


# ============================================================
# TYPE REFERENCES
#
# Independent of host syntax. Wrappers that serde serializes as their
# inner value (&T, Box<T>, Rc<T>, ...) are either Reference nodes or
# Named nodes resolved through the built-in table.
# ============================================================


@dataclass(frozen=True)
class TypeRef:
    """Base for all type references. Abstract."""


PrimitiveKind = Literal["number", "string", "boolean"]


@dataclass(frozen=True)
class Primitive(TypeRef):
    """Host primitive with a direct TypeScript equivalent.

    | Host                          | kind    | TS      |
    |-------------------------------|---------|---------|
    | u8..u128, i8..i128, f32, f64  | number  | number  |
    | usize, isize                  | number  | number  |
    | str, String                   | string  | string  |
    | bool                          | boolean | boolean |

    `host` keeps the original spelling for diagnostics only; it never
    changes the output.
    """

    kind: PrimitiveKind
    host: str = ""


ArrayKind = Literal["slice", "array", "pointer"]


@dataclass(frozen=True)
class Array(TypeRef):
    """Homogeneous sequence: [T], [T; N], *const T / *mut T.

    Invariants:
    - size is only meaningful for kind == "array"
    """

    element: TypeRef
    kind: ArrayKind = "slice"
    size: int | None = None


@dataclass(frozen=True)
class Reference(TypeRef):
    """Borrow (&T, &mut T). Serialized as the referent."""

    target: TypeRef


@dataclass(frozen=True)
class Tuple(TypeRef):
    """Fixed-length heterogeneous sequence, (A, B, ...). () is the empty tuple."""

    elements: tuple[TypeRef, ...] = ()


@dataclass(frozen=True)
class Never(TypeRef):
    """The uninhabited type `!`."""


@dataclass(frozen=True)
class Opaque(TypeRef):
    """Anything the frontend could not classify.

    Function pointers, `_`, macro invocations in type position and
    verbatim token streams all land here and translate to `any`.
    """

    reason: str = ""


@dataclass(frozen=True)
class TraitUnion(TypeRef):
    """`dyn A + B` / `impl A + B` with lifetime bounds already removed."""

    bounds: tuple[str, ...]


@dataclass(frozen=True)
class Named(TypeRef):
    """Path type reduced to its last segment, e.g. HashMap<K, V>.

    Only type arguments are kept; lifetime and const arguments are dropped
    by the frontend.
    """

    ident: str
    args: tuple[TypeRef, ...] = ()


# Host primitive spellings, used both by the loader and by the built-in
# table so that a path-typed `u32` and a Primitive agree.
PRIMITIVE_NAMES: dict[str, PrimitiveKind] = {
    "u8": "number",
    "u16": "number",
    "u32": "number",
    "u64": "number",
    "u128": "number",
    "usize": "number",
    "i8": "number",
    "i16": "number",
    "i32": "number",
    "i64": "number",
    "i128": "number",
    "isize": "number",
    "f32": "number",
    "f64": "number",
    "bool": "boolean",
    "str": "string",
}


def primitive(host: str) -> Primitive:
    """Build a Primitive from its host spelling: primitive("u32")."""
    if host not in PRIMITIVE_NAMES:
        raise ValueError(f"not a host primitive: {host!r}")
    return Primitive(PRIMITIVE_NAMES[host], host)


# ============================================================
# FIELDS AND VARIANTS
# ============================================================


@dataclass(frozen=True)
class Field:
    """Struct or variant field.

    `name` is the serialized name after rename_all / rename. Positional
    fields (tuple structs, tuple variants) carry their index as name;
    it is never emitted.
    """

    name: str
    typ: TypeRef


Style = Literal["unit", "newtype", "tuple", "struct"]


@dataclass(frozen=True)
class Variant:
    """Enum variant.

    Invariants:
    - style == "unit" implies no fields
    - style == "newtype" implies exactly one field
    """

    name: str
    style: Style = "unit"
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        if self.style == "unit" and self.fields:
            raise ValueError(f"unit variant {self.name} has fields")
        if self.style == "newtype" and len(self.fields) != 1:
            raise ValueError(f"newtype variant {self.name} needs exactly one field")


# ============================================================
# CONTAINERS
# ============================================================


@dataclass(frozen=True)
class TagConfig:
    """Enum tag placement from #[serde(tag = ..., content = ...)].

    | tag | content | strategy |
    |-----|---------|----------|
    | set | None    | internal |
    | set | set     | adjacent |

    A container without a TagConfig uses the fallback (`kind`, internal)
    or, with external tagging enabled, serde's external representation.
    """

    tag: str
    content: str | None = None


@dataclass(frozen=True)
class StructShape:
    """Struct body. `style` follows the same vocabulary as Variant."""

    style: Style = "struct"
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        if self.style == "unit" and self.fields:
            raise ValueError("unit struct has fields")
        if self.style == "newtype" and len(self.fields) != 1:
            raise ValueError("newtype struct needs exactly one field")


@dataclass(frozen=True)
class EnumShape:
    """Enum body: variants in declaration order."""

    variants: tuple[Variant, ...] = ()


@dataclass(frozen=True)
class Container:
    """The struct or enum being translated.

    Only lifetime generics are tracked. Type parameters cannot be given a
    meaningful structural type without an instantiation and are dropped
    by the frontend.
    """

    name: str
    shape: StructShape | EnumShape
    tag_config: TagConfig | None = None
    lifetimes: tuple[str, ...] = ()

    @property
    def is_enum(self) -> bool:
        return isinstance(self.shape, EnumShape)

    def host_type(self) -> str:
        """Host type name with every lifetime erased to '_."""
        if not self.lifetimes:
            return self.name
        return self.name + "<" + ", ".join("'_" for _ in self.lifetimes) + ">"
