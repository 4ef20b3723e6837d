"""tsdef - TypeScript type declarations from serde-annotated host types."""

from __future__ import annotations

from .loader import Document, ModelError, load_container, load_document, load_type
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
    primitive,
)
from .normalize import normalize_canonical, normalize_debug
from .translate import (
    Definition,
    TagCollisionError,
    TagContentClashError,
    TranslateError,
    TranslateOptions,
    Translator,
    translate_all,
    translate_container,
    translate_type,
)

__all__ = [
    "Array",
    "Container",
    "Definition",
    "Document",
    "EnumShape",
    "Field",
    "ModelError",
    "Named",
    "Never",
    "Opaque",
    "Primitive",
    "Reference",
    "StructShape",
    "TagCollisionError",
    "TagContentClashError",
    "TagConfig",
    "TraitUnion",
    "TranslateError",
    "TranslateOptions",
    "Translator",
    "Tuple",
    "TypeRef",
    "Variant",
    "load_container",
    "load_document",
    "load_type",
    "normalize_canonical",
    "normalize_debug",
    "primitive",
    "translate_all",
    "translate_container",
    "translate_type",
]
