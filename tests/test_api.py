"""Python API tests for the translator and model."""

import pytest

from tsdef import (
    Array,
    Container,
    EnumShape,
    Field,
    Named,
    Never,
    Opaque,
    Reference,
    StructShape,
    TagCollisionError,
    TagContentClashError,
    TagConfig,
    TranslateError,
    TranslateOptions,
    Translator,
    TraitUnion,
    Tuple,
    Variant,
    primitive,
    translate_all,
    translate_container,
    translate_type,
)
from tsdef.builtins import BUILTINS, lookup
from tsdef.tstype import TsArray, TsKeyword, TsUnion


def opt(t):
    return Named("Option", (t,))


# --- type references ---


@pytest.mark.parametrize(
    "host", ["u8", "u16", "u32", "u64", "u128", "usize", "i8", "i16", "i32", "i64", "i128", "isize", "f32", "f64"]
)
def test_numeric_widths_collapse(host: str):
    assert translate_type(primitive(host)) == "number"
    assert translate_type(Named(host)) == "number"


def test_primitive_rejects_unknown_spelling():
    with pytest.raises(ValueError):
        primitive("u256")


def test_option_is_nullable_union():
    assert translate_type(opt(Named("Foo"))) == "Foo | null"
    assert translate_type(opt(opt(primitive("u8")))) == "(number | null) | null"


def test_array_composes():
    assert translate_type(Array(Array(primitive("bool")))) == "boolean[][]"
    assert translate_type(Array(Named("Vec", (primitive("u8"),)), "array", 4)) == "number[][]"


def test_wrappers_are_transparent():
    inner = Named("Vec", (Named("String"),))
    for wrapped in (
        Reference(inner),
        Named("Box", (inner,)),
        Named("Rc", (inner,)),
        Named("Arc", (inner,)),
        Named("Cow", (inner,)),
        Reference(Named("Box", (Reference(inner),))),
    ):
        assert translate_type(wrapped) == "string[]"


def test_degraded_constructs_are_any():
    assert translate_type(Opaque("fn")) == "any"
    assert translate_type(Opaque()) == "any"
    assert translate_type(TraitUnion(())) == "any"


def test_never_and_tuple():
    assert translate_type(Never()) == "never"
    assert translate_type(Tuple((primitive("u8"), Never()))) == "[number, never]"
    assert translate_type(Tuple()) == "[]"


def test_translation_is_repeatable():
    typ = Named("HashMap", (Named("String"), opt(Array(Named("Item")))))
    translator = Translator()
    first = translator.translate_type(typ)
    assert translator.translate_type(typ) == first
    assert translate_type(typ) == "Map<string, Item[] | null>"


def test_translate_type_returns_tree():
    tree = Translator().translate_type(Named("Vec", (opt(primitive("u8")),)))
    assert tree == TsArray(TsUnion((TsKeyword("number"), TsKeyword("null"))))


def test_pointer_modes():
    ptr = Array(primitive("u8"), "pointer")
    assert translate_type(ptr) == "number[]"
    assert translate_type(ptr, TranslateOptions(pointers="opaque")) == "any"
    assert translate_type(Array(primitive("u8")), TranslateOptions(pointers="opaque")) == "number[]"


def test_invalid_options():
    with pytest.raises(ValueError):
        TranslateOptions(pointers="void")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        TranslateOptions(results="either")  # type: ignore[arg-type]


def test_builtin_lookup_respects_arity():
    assert lookup("HashMap", 2) is not None
    assert lookup("HashMap", 1) is None
    assert lookup("Foo", 3) is None
    assert lookup("String", 0) is not None


def test_tagged_result_takes_precedence():
    translator = Translator(TranslateOptions(results="tagged"))
    assert len(translator.table) == len(BUILTINS) + 1
    assert translator.table[0].names == frozenset({"Result"})


# --- containers ---


def test_newtype_string_struct():
    c = Container("Name", StructShape("newtype", (Field("0", Named("String")),)))
    assert translate_container(c).expr == "string"


def test_fallback_unit_variant():
    c = Container("State", EnumShape((Variant("Stopped"),)))
    assert translate_container(c).expr == '{ kind: "Stopped" }'


def test_adjacent_tuple_variant():
    variant = Variant(
        "Point", "tuple", (Field("0", primitive("f64")), Field("1", primitive("f64")))
    )
    c = Container("Shape", EnumShape((variant,)), TagConfig("kind", "data"))
    assert translate_container(c).expr == '{ kind: "Point", data: [number, number] }'


def test_internal_struct_variant():
    variant = Variant("Circle", "struct", (Field("x", primitive("f64")), Field("y", primitive("f64"))))
    c = Container("Shape", EnumShape((variant,)), TagConfig("type"))
    assert translate_container(c).expr == '{ type: "Circle", x: number, y: number }'


def test_collision_names_container_and_variant():
    variant = Variant("Circle", "struct", (Field("type", Named("String")),))
    c = Container("Shape", EnumShape((variant,)), TagConfig("type"))
    with pytest.raises(TagCollisionError) as info:
        translate_container(c)
    err = info.value
    assert isinstance(err, TranslateError)
    assert (err.container, err.variant, err.tag) == ("Shape", "Circle", "type")
    assert "Shape::Circle" in str(err)


def test_payload_member_collision():
    variant = Variant("Data", "newtype", (Field("0", primitive("u8")),))
    c = Container("Ev", EnumShape((variant,)), TagConfig("fields"))
    with pytest.raises(TagCollisionError) as info:
        translate_container(c)
    assert (info.value.container, info.value.variant, info.value.tag) == ("Ev", "Data", "fields")


def test_tag_equal_to_content():
    variant = Variant("Data", "newtype", (Field("0", primitive("u8")),))
    c = Container("Msg", EnumShape((variant,)), TagConfig("t", "t"))
    with pytest.raises(TagContentClashError) as info:
        translate_container(c)
    err = info.value
    assert isinstance(err, TranslateError)
    assert (err.container, err.tag) == ("Msg", "t")
    assert '"Msg"' in str(err)


def test_empty_tag_falls_back_to_kind():
    c = Container("E", EnumShape((Variant("A"),)), TagConfig(""))
    assert translate_container(c).expr == '{ kind: "A" }'


def test_definition_declarations():
    c = Container("State", EnumShape((Variant("On"), Variant("Off"))), lifetimes=("'a",))
    d = translate_container(c)
    assert d.declaration == 'export type State = { kind: "On" } | { kind: "Off" };'
    assert d.debug_declaration == 'export type State = { kind: "On" } | { kind: "Off" };'
    assert d.host_type == "State<'_>"


def test_translate_all_keeps_order():
    a = Container("A", StructShape("unit"))
    b = Container("B", StructShape("newtype", (Field("0", primitive("bool")),)))
    assert [d.name for d in translate_all([b, a])] == ["B", "A"]


def test_translate_all_stops_at_first_error():
    bad = Container(
        "Bad",
        EnumShape((Variant("V", "struct", (Field("kind", primitive("u8")),)),)),
    )
    with pytest.raises(TagCollisionError):
        translate_all([Container("A", StructShape("unit")), bad])


# --- model invariants ---


def test_variant_shape_invariants():
    with pytest.raises(ValueError):
        Variant("V", "unit", (Field("x", primitive("u8")),))
    with pytest.raises(ValueError):
        Variant("V", "newtype", ())


def test_struct_shape_invariants():
    with pytest.raises(ValueError):
        StructShape("newtype", (Field("0", primitive("u8")), Field("1", primitive("u8"))))


def test_model_is_immutable():
    c = Container("A", StructShape("unit"))
    with pytest.raises(AttributeError):
        c.name = "B"  # type: ignore[misc]
