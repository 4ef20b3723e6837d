"""Translator: model -> TypeScript type expression.

Serde wire conventions mirrored here
====================================

Enum tagging (resolved once per container):

| TagConfig            | strategy  | unit            | newtype / tuple             | struct                      |
|----------------------|-----------|-----------------|-----------------------------|-----------------------------|
| tag, no content      | internal  | { tag: "V" }    | { tag: "V", fields: T }     | { tag: "V", f1: T1, ... }   |
| tag + content        | adjacent  | { tag: "V" }    | { tag: "V", content: T }    | { tag: "V", content: {..} } |
| None                 | fallback  | { kind: "V" }   | { kind: "V", fields: T }    | { kind: "V", f1: T1, ... }  |
| None + external      | external  | "V"             | { V: T }                    | { V: { f1: T1, ... } }      |

Tuple payloads render as [T1, ..., Tn]. No member merged next to the tag
(struct fields, or the `fields` payload member) may share the tag's name,
and adjacent tagging needs distinct tag and content names.

Known lossy mappings, kept for wire compatibility with existing consumers:
- raw pointers translate like slices (pointers="opaque" maps them to any)
- Result<T, E> collapses to T | E (results="tagged" keeps Ok/Err apart)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from .builtins import BUILTINS, TAGGED_RESULT, BuiltIn, lookup
from .log import get_logger
from .model import (
    Array,
    Container,
    EnumShape,
    Field,
    Named,
    Never,
    Opaque,
    Primitive,
    Reference,
    StructShape,
    TagConfig,
    TraitUnion,
    Tuple,
    TypeRef,
    Variant,
)
from .normalize import normalize_canonical, normalize_debug
from .tstype import (
    ANY,
    BOOLEAN,
    NEVER,
    NUMBER,
    STRING,
    TsArray,
    TsGeneric,
    TsLiteral,
    TsMember,
    TsObject,
    TsRef,
    TsTuple,
    TsType,
    TsUnion,
    render,
)

logger = get_logger(__name__)

DEFAULT_TAG = "kind"
PAYLOAD_MEMBER = "fields"

_PRIMITIVES: dict[str, TsType] = {"number": NUMBER, "string": STRING, "boolean": BOOLEAN}


class TranslateError(Exception):
    """Base for translation failures."""


class TagCollisionError(TranslateError):
    """A variant member merged next to the tag shares the tag's name.

    Covers struct fields under internal/fallback tagging and the `fields`
    payload member of newtype and tuple variants.
    """

    def __init__(self, container: str, variant: str, tag: str):
        self.container: str = container
        self.variant: str = variant
        self.tag: str = tag
        super().__init__(
            'tag "' + tag + '" clashes with field in enum variant "'
            + container + "::" + variant + '"'
        )


class TagContentClashError(TranslateError):
    """Adjacent tagging that names the same member for tag and content."""

    def __init__(self, container: str, tag: str):
        self.container: str = container
        self.tag: str = tag
        super().__init__(
            'tag and content of enum "' + container + '" are both "' + tag + '"'
        )


@dataclass(frozen=True)
class TranslateOptions:
    """Knobs for the deliberately lossy or unmodeled serde cases.

    Defaults reproduce the established output.
    """

    pointers: Literal["array", "opaque"] = "array"
    results: Literal["union", "tagged"] = "union"
    external_tagging: bool = False

    def __post_init__(self) -> None:
        if self.pointers not in ("array", "opaque"):
            raise ValueError(f"unknown pointer mode: {self.pointers!r}")
        if self.results not in ("union", "tagged"):
            raise ValueError(f"unknown result mode: {self.results!r}")


@dataclass(frozen=True)
class TagInfo:
    """Resolved tagging. tag is None for external tagging."""

    tag: str | None
    content: str | None = None


EXTERNAL = TagInfo(None)


def resolve_tagging(
    container: str, config: TagConfig | None, external: bool = False
) -> TagInfo:
    if config is not None and config.tag:
        if config.content == config.tag:
            logger.error("enum %s uses %r as both tag and content", container, config.tag)
            raise TagContentClashError(container, config.tag)
        return TagInfo(config.tag, config.content)
    if external:
        return EXTERNAL
    return TagInfo(DEFAULT_TAG)


def _check_collision(container: str, variant: str, tag: str, names: Iterable[str]) -> None:
    if tag in names:
        logger.error("tag %r collides with a member of %s::%s", tag, container, variant)
        raise TagCollisionError(container, variant, tag)


@dataclass(frozen=True)
class Definition:
    """Translation result for one container."""

    name: str
    host_type: str
    expr: str
    debug: str

    @property
    def declaration(self) -> str:
        return "export type " + self.name + " = " + self.expr + ";"

    @property
    def debug_declaration(self) -> str:
        return "export type " + self.name + " = " + self.debug + ";"


class Translator:
    """Translate model containers and type references to TypeScript."""

    def __init__(self, options: TranslateOptions | None = None) -> None:
        self.options = options if options is not None else TranslateOptions()
        table: tuple[BuiltIn, ...] = BUILTINS
        if self.options.results == "tagged":
            table = (TAGGED_RESULT,) + table
        self.table = table

    # --- type references ---

    def translate_type(self, typ: TypeRef) -> TsType:
        match typ:
            case Primitive(kind=kind):
                return _PRIMITIVES[kind]
            case Array(kind="pointer") if self.options.pointers == "opaque":
                return ANY
            case Array(element=element):
                return TsArray(self.translate_type(element))
            case Reference(target=target):
                return self.translate_type(target)
            case Tuple(elements=elements):
                return TsTuple(tuple(self.translate_type(e) for e in elements))
            case Never():
                return NEVER
            case Opaque(reason=reason):
                logger.debug("degrading %s to any", reason or "opaque type")
                return ANY
            case TraitUnion(bounds=bounds):
                if not bounds:
                    logger.debug("trait object without trait bounds, using any")
                    return ANY
                if len(bounds) == 1:
                    return TsRef(bounds[0])
                return TsUnion(tuple(TsRef(b) for b in bounds))
            case Named(ident=ident, args=args):
                entry = lookup(ident, len(args), self.table)
                if entry is not None:
                    return entry.rule(self.translate_type, args)
                if args:
                    return TsGeneric(ident, tuple(self.translate_type(a) for a in args))
                return TsRef(ident)
            case _:
                raise NotImplementedError(f"Unknown type reference: {type(typ).__name__}")

    def translate_field(self, fld: Field) -> TsMember:
        return TsMember(fld.name, self.translate_type(fld.typ))

    def _fields(self, fields: Iterable[Field]) -> tuple[TsMember, ...]:
        return tuple(self.translate_field(f) for f in fields)

    def _elements(self, fields: Iterable[Field]) -> TsTuple:
        return TsTuple(tuple(self.translate_type(f.typ) for f in fields))

    # --- structs ---

    def translate_struct(self, shape: StructShape) -> TsType:
        match shape.style:
            case "unit":
                return TsObject()
            case "newtype":
                return self.translate_type(shape.fields[0].typ)
            case "tuple":
                return self._elements(shape.fields)
            case _:
                return TsObject(self._fields(shape.fields))

    # --- enums ---

    def translate_variant(self, container: str, info: TagInfo, variant: Variant) -> TsType:
        if info.tag is None:
            return self._external_variant(variant)
        tag = TsMember(info.tag, TsLiteral(variant.name))
        payload = info.content if info.content is not None else PAYLOAD_MEMBER
        match variant.style:
            case "unit":
                return TsObject((tag,))
            case "newtype":
                _check_collision(container, variant.name, info.tag, (payload,))
                inner = self.translate_type(variant.fields[0].typ)
                return TsObject((tag, TsMember(payload, inner)))
            case "tuple":
                _check_collision(container, variant.name, info.tag, (payload,))
                return TsObject((tag, TsMember(payload, self._elements(variant.fields))))
            case _:
                if info.content is not None:
                    content = TsObject(self._fields(variant.fields))
                    return TsObject((tag, TsMember(info.content, content)))
                names = tuple(f.name for f in variant.fields)
                _check_collision(container, variant.name, info.tag, names)
                return TsObject((tag,) + self._fields(variant.fields))

    def _external_variant(self, variant: Variant) -> TsType:
        match variant.style:
            case "unit":
                return TsLiteral(variant.name)
            case "newtype":
                inner = self.translate_type(variant.fields[0].typ)
            case "tuple":
                inner = self._elements(variant.fields)
            case _:
                inner = TsObject(self._fields(variant.fields))
        return TsObject((TsMember(variant.name, inner),))

    def translate_enum(self, container: Container) -> TsType:
        assert isinstance(container.shape, EnumShape)
        info = resolve_tagging(
            container.name, container.tag_config, self.options.external_tagging
        )
        members = tuple(
            self.translate_variant(container.name, info, v) for v in container.shape.variants
        )
        if not members:
            return NEVER
        if len(members) == 1:
            return members[0]
        return TsUnion(members, multiline=True)

    # --- containers ---

    def translate_shape(self, container: Container) -> TsType:
        if isinstance(container.shape, EnumShape):
            return self.translate_enum(container)
        return self.translate_struct(container.shape)

    def translate_container(self, container: Container) -> Definition:
        logger.debug("translating %s", container.name)
        raw = render(self.translate_shape(container))
        definition = Definition(
            name=container.name,
            host_type=container.host_type(),
            expr=normalize_canonical(raw),
            debug=normalize_debug(raw),
        )
        logger.debug("translated %s: %s", container.name, definition.debug)
        return definition


def translate_type(typ: TypeRef, options: TranslateOptions | None = None) -> str:
    """Translate a single type reference to canonical text."""
    return normalize_canonical(render(Translator(options).translate_type(typ)))


def translate_container(
    container: Container, options: TranslateOptions | None = None
) -> Definition:
    return Translator(options).translate_container(container)


def translate_all(
    containers: Iterable[Container], options: TranslateOptions | None = None
) -> list[Definition]:
    """Translate containers in order. Stops at the first error."""
    translator = Translator(options)
    return [translator.translate_container(c) for c in containers]
