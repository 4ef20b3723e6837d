"""Load a resolved object model from JSON.

The JSON is what a reflection frontend hands over: every rename already
applied, lifetimes listed, type parameters gone.

Containers:

    {"name": "Shape", "tag": "type", "content": "data", "lifetimes": ["'a"],
     "variants": [{"name": "Circle", "fields": {"radius": "f64"}},
                  {"name": "Point", "tuple": ["f64", "f64"]},
                  {"name": "Wrapped", "newtype": "String"},
                  {"name": "Empty"}]}
    {"name": "Point", "fields": {"x": "f64", "y": "f64"}}
    {"name": "Id", "newtype": "u32"}

Type references:

| JSON                               | TypeRef                    |
|------------------------------------|----------------------------|
| "u32", "bool", "str"               | Primitive                  |
| "Foo"                              | Named("Foo")               |
| "!"                                | Never                      |
| "_"                                | Opaque("inferred")         |
| "()"                               | Tuple(())                  |
| {"path": "Vec", "args": [T]}       | Named("Vec", (T,))         |
| {"slice": T}                       | Array(T, "slice")          |
| {"array": T, "len": 4}             | Array(T, "array", 4)       |
| {"ptr": T}                         | Array(T, "pointer")        |
| {"ref": T}                         | Reference(T)               |
| {"tuple": [A, B]}                  | Tuple((A, B))              |
| {"traits": ["Display"]}            | TraitUnion(("Display",))   |
| {"opaque": "fn"}                   | Opaque("fn")               |

A document is a single container, a list of containers, or
{"options": {...}, "containers": [...]}.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from .log import get_logger
from .model import (
    PRIMITIVE_NAMES,
    Array,
    Container,
    EnumShape,
    Field,
    Named,
    Never,
    Opaque,
    Reference,
    StructShape,
    Style,
    TagConfig,
    TraitUnion,
    Tuple,
    TypeRef,
    Variant,
    primitive,
)

logger = get_logger(__name__)

OPTION_KEYS: frozenset[str] = frozenset({"pointers", "results", "external_tagging"})

_TYPE_KEYS: frozenset[str] = frozenset(
    {"path", "slice", "array", "ptr", "ref", "tuple", "traits", "opaque"}
)
_SHAPE_KEYS: tuple[str, ...] = ("unit", "newtype", "tuple", "fields")


class ModelError(Exception):
    """Malformed model input, with a JSON path to the offending node."""

    def __init__(self, msg: str, path: str):
        self.msg: str = msg
        self.path: str = path
        super().__init__(path + ": " + msg)


@dataclass
class Document:
    """Loaded input: containers in order plus per-document option overrides."""

    containers: list[Container] = field(default_factory=list)
    options: dict[str, object] = field(default_factory=dict)


def _expect_str(value: object, path: str) -> str:
    if not isinstance(value, str):
        raise ModelError("expected a string", path)
    return value


def _expect_list(value: object, path: str) -> list[object]:
    if not isinstance(value, list):
        raise ModelError("expected a list", path)
    return value


def load_type(obj: object, path: str = "$") -> TypeRef:
    """Decode one type reference."""
    if isinstance(obj, str):
        if obj == "!":
            return Never()
        if obj == "_":
            return Opaque("inferred")
        if obj == "()":
            return Tuple()
        if obj in PRIMITIVE_NAMES:
            return primitive(obj)
        if not obj:
            raise ModelError("empty type name", path)
        return Named(obj)
    if not isinstance(obj, dict):
        raise ModelError("expected a type name or object", path)
    keys = [k for k in obj if k in _TYPE_KEYS]
    if len(keys) != 1:
        raise ModelError("expected exactly one of " + ", ".join(sorted(_TYPE_KEYS)), path)
    key = keys[0]
    sub = path + "." + key
    value = obj[key]
    if key == "path":
        args = _expect_list(obj.get("args", []), path + ".args")
        return Named(
            _expect_str(value, sub),
            tuple(load_type(a, path + ".args[" + str(i) + "]") for i, a in enumerate(args)),
        )
    if key == "slice":
        return Array(load_type(value, sub), "slice")
    if key == "array":
        size = obj.get("len")
        if size is not None and not isinstance(size, int):
            raise ModelError("expected an integer", path + ".len")
        return Array(load_type(value, sub), "array", size)
    if key == "ptr":
        return Array(load_type(value, sub), "pointer")
    if key == "ref":
        return Reference(load_type(value, sub))
    if key == "tuple":
        elems = _expect_list(value, sub)
        return Tuple(tuple(load_type(e, sub + "[" + str(i) + "]") for i, e in enumerate(elems)))
    if key == "traits":
        names = _expect_list(value, sub)
        return TraitUnion(tuple(_expect_str(n, sub + "[" + str(i) + "]") for i, n in enumerate(names)))
    return Opaque(_expect_str(value, sub))


def _load_shape(obj: dict[str, object], path: str) -> tuple[Style, tuple[Field, ...]]:
    """Shared by structs and variants: (style, fields)."""
    present = [k for k in _SHAPE_KEYS if k in obj]
    if len(present) > 1:
        raise ModelError("conflicting shapes: " + ", ".join(present), path)
    if not present:
        return "unit", ()
    key = present[0]
    sub = path + "." + key
    value = obj[key]
    if key == "unit":
        return "unit", ()
    if key == "newtype":
        return "newtype", (Field("0", load_type(value, sub)),)
    if key == "tuple":
        elems = _expect_list(value, sub)
        return "tuple", tuple(
            Field(str(i), load_type(e, sub + "[" + str(i) + "]")) for i, e in enumerate(elems)
        )
    if not isinstance(value, dict):
        raise ModelError("expected an object of field name to type", sub)
    return "struct", tuple(Field(name, load_type(t, sub + "." + name)) for name, t in value.items())


def _load_variant(obj: object, path: str) -> Variant:
    if not isinstance(obj, dict):
        raise ModelError("expected a variant object", path)
    name = _expect_str(obj.get("name"), path + ".name")
    style, fields = _load_shape(obj, path)
    return Variant(name, style, fields)


def load_container(obj: object, path: str = "$") -> Container:
    """Decode one container."""
    if not isinstance(obj, dict):
        raise ModelError("expected a container object", path)
    name = _expect_str(obj.get("name"), path + ".name")
    if not name:
        raise ModelError("empty container name", path + ".name")
    lifetimes = tuple(
        _expect_str(lt, path + ".lifetimes[" + str(i) + "]")
        for i, lt in enumerate(_expect_list(obj.get("lifetimes", []), path + ".lifetimes"))
    )
    tag_config: TagConfig | None = None
    if "tag" in obj:
        content = obj.get("content")
        tag_config = TagConfig(
            _expect_str(obj["tag"], path + ".tag"),
            None if content is None else _expect_str(content, path + ".content"),
        )
    elif "content" in obj:
        raise ModelError("content requires tag", path + ".content")
    shape: StructShape | EnumShape
    if "variants" in obj:
        variants = _expect_list(obj["variants"], path + ".variants")
        shape = EnumShape(
            tuple(_load_variant(v, path + ".variants[" + str(i) + "]") for i, v in enumerate(variants))
        )
    else:
        if tag_config is not None:
            logger.warning("%s: tag configuration on a struct is ignored", name)
        style, fields = _load_shape(obj, path)
        shape = StructShape(style, fields)
    return Container(name, shape, tag_config, lifetimes)


def _load_options(obj: object, path: str) -> dict[str, object]:
    if not isinstance(obj, dict):
        raise ModelError("expected an options object", path)
    for key, value in obj.items():
        if key not in OPTION_KEYS:
            raise ModelError("unknown option '" + key + "'", path)
        if key == "external_tagging":
            if not isinstance(value, bool):
                raise ModelError("expected a boolean", path + "." + key)
        elif not isinstance(value, str):
            raise ModelError("expected a string", path + "." + key)
    return dict(obj)


def load_document(text: str) -> Document:
    """Parse JSON text into a Document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ModelError("invalid JSON: " + e.msg + " at line " + str(e.lineno), "$") from e
    doc = Document()
    if isinstance(data, list):
        items: list[object] = data
        base = "$"
    elif isinstance(data, dict) and "containers" in data:
        items = _expect_list(data["containers"], "$.containers")
        base = "$.containers"
        if "options" in data:
            doc.options = _load_options(data["options"], "$.options")
    else:
        doc.containers.append(load_container(data))
        return doc
    for i, item in enumerate(items):
        doc.containers.append(load_container(item, base + "[" + str(i) + "]"))
    return doc
