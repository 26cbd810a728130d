"""Unit tests for FieldType and the field() builder."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

import pytest
from bson import ObjectId

from doc_query.core.exceptions import SchemaError, UnknownModelError, ValidationError
from doc_query.mapping.model import Model
from doc_query.mapping.reference import Reference
from doc_query.mapping.types import FieldType, FieldTypeBuilder, compile_field_type, field


class Color(Enum):
    RED = "red"
    BLUE = "blue"


class Gadget(Model):
    __collection__ = "gadgets"

    @classmethod
    def declare_types(cls):
        return {"label": field(str)}


class Sprocket(Gadget):
    pass


ALL_KINDS = [int, str, bool, float, "double", "any", Gadget, Color, ObjectId, datetime]


class TestFieldBuilder:
    def test_defaults(self) -> None:
        ft = field(int).build()
        assert ft == FieldType("int", is_array=False, is_nullable=False)

    def test_fluent_modifiers(self) -> None:
        ft = field(str).array().nullable().build()
        assert ft.kind == "string"
        assert ft.is_array is True
        assert ft.is_nullable is True

    def test_python_types_map_to_primitive_names(self) -> None:
        assert field(int).build().kind == "int"
        assert field(str).build().kind == "string"
        assert field(bool).build().kind == "bool"
        assert field(float).build().kind == "float"
        assert field("Double").build().kind == "double"
        assert field().build().kind == "any"

    def test_custom_kinds_kept_as_classes(self) -> None:
        assert field(Gadget).build().kind is Gadget
        assert field(Color).build().kind is Color
        assert field(ObjectId).build().kind is ObjectId

    def test_model_name_resolved_lazily(self) -> None:
        ft = field("Gadget").build()
        assert ft.kind == "Gadget"
        assert ft.model_class is Gadget

    def test_unknown_model_name(self) -> None:
        ft = field("NoSuchModel").build()
        with pytest.raises(UnknownModelError, match="NoSuchModel"):
            ft.check(object())

    def test_invalid_custom_type(self) -> None:
        with pytest.raises(SchemaError, match="Invalid custom type"):
            field(dict)

    def test_field_type_frozen(self) -> None:
        ft = field(int).build()
        with pytest.raises(AttributeError):
            ft.kind = "string"  # type: ignore[misc]

    def test_compile_accepts_builder_and_field_type(self) -> None:
        assert compile_field_type(field(int), "n") == FieldType("int")
        assert compile_field_type(FieldType("int"), "n") == FieldType("int")

    def test_compile_rejects_other_values(self) -> None:
        with pytest.raises(SchemaError, match="'n'"):
            compile_field_type(int, "n")  # type: ignore[arg-type]

    def test_builder_type(self) -> None:
        assert isinstance(field(int), FieldTypeBuilder)


class TestCheckNull:
    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_null_accepted_when_nullable(self, kind) -> None:
        assert field(kind).nullable().build().check(None) is True

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_null_rejected_when_not_nullable(self, kind) -> None:
        with pytest.raises(ValidationError, match="not nullable"):
            field(kind).build().check(None)

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_null_array_follows_nullability(self, kind) -> None:
        assert field(kind).array().nullable().build().check(None) is True
        with pytest.raises(ValidationError):
            field(kind).array().build().check(None)


class TestCheckPrimitives:
    @pytest.mark.parametrize(
        ("kind", "value"),
        [
            (int, 3),
            (str, "text"),
            (bool, False),
            (float, 1.5),
            ("double", 2.0),
            ("any", {"nested": [1, 2]}),
        ],
    )
    def test_accepts_native_values(self, kind, value) -> None:
        assert field(kind).build().check(value) is True

    @pytest.mark.parametrize(
        ("kind", "value"),
        [
            (int, "3"),
            (int, 3.0),
            (int, True),
            (str, 3),
            (bool, 1),
            (float, 1),
            ("double", "2.0"),
        ],
    )
    def test_rejects_without_coercion(self, kind, value) -> None:
        with pytest.raises(ValidationError, match="expected"):
            field(kind).build().check(value)

    def test_error_names_field(self) -> None:
        with pytest.raises(ValidationError, match="'age'") as info:
            field(int).build().check("x", "age")
        assert info.value.field == "age"


class TestCheckCustom:
    def test_model_instance(self) -> None:
        assert field(Gadget).build().check(Gadget(label="a")) is True

    def test_model_subclass_instance(self) -> None:
        assert field(Gadget).build().check(Sprocket(label="a")) is True

    def test_wrong_model(self) -> None:
        with pytest.raises(ValidationError, match="expected Gadget"):
            field(Gadget).build().check("not a gadget")

    def test_reference_stands_in_for_model(self) -> None:
        ref = Reference(Gadget, ObjectId())
        assert field(Gadget).build().check(ref) is True

    def test_reference_to_other_model_rejected(self) -> None:
        class Other(Model):
            __collection__ = "types_other"

            @classmethod
            def declare_types(cls):
                return {}

        with pytest.raises(ValidationError):
            field(Gadget).build().check(Reference(Other, ObjectId()))

    def test_enum_member(self) -> None:
        assert field(Color).build().check(Color.RED) is True
        with pytest.raises(ValidationError):
            field(Color).build().check("red")

    def test_object_id_and_datetime(self) -> None:
        assert field(ObjectId).build().check(ObjectId()) is True
        assert field(datetime).build().check(datetime(2024, 1, 1)) is True
        with pytest.raises(ValidationError):
            field(datetime).build().check("2024-01-01")


class TestCheckArrays:
    def test_accepts_list_and_tuple(self) -> None:
        ft = field(int).array().build()
        assert ft.check([1, 2, 3]) is True
        assert ft.check((1, 2)) is True
        assert ft.check([]) is True

    def test_rejects_non_sequence(self) -> None:
        with pytest.raises(ValidationError, match="not array"):
            field(int).array().build().check(1)

    def test_rejects_string_as_array(self) -> None:
        with pytest.raises(ValidationError, match="not array"):
            field(str).array().build().check("abc")

    def test_one_bad_element_rejects_whole_value(self) -> None:
        with pytest.raises(ValidationError, match=r"tags\[3\]"):
            field(str).array().build().check(["a", "b", "c", 4], "tags")

    def test_bad_first_element_reported(self) -> None:
        with pytest.raises(ValidationError, match=r"\[0\]"):
            field(int).array().build().check(["x", "y"])

    def test_null_element_rejected(self) -> None:
        with pytest.raises(ValidationError):
            field(int).array().nullable().build().check([1, None])

    def test_array_of_models(self) -> None:
        ft = field(Gadget).array().build()
        assert ft.check([Gadget(label="a"), Reference(Gadget, ObjectId())]) is True
        with pytest.raises(ValidationError):
            ft.check([Gadget(label="a"), "b"])


class TestRepr:
    def test_repr_shows_flags(self) -> None:
        assert repr(field(int).array().nullable().build()) == "FieldType(int[]?)"
        assert repr(field(Gadget).build()) == "FieldType(Gadget)"
