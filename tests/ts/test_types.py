from typebinder.ts.export import (
    ExportStatement,
    ImportSpecifier,
    ImportStatement,
    TypeParameter,
)
from typebinder.ts.types import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    ArrayType,
    LiteralType,
    ObjectType,
    TupleType,
    UnionType,
    is_primary,
    object_type,
    prop,
    string_literal,
    type_ref,
)


def test_predefined_and_literals():
    assert str(NUMBER) == "number"
    assert str(NULL) == "null"
    assert str(string_literal("A")) == '"A"'
    assert str(string_literal('say "hi"')) == '"say \\"hi\\""'
    assert str(LiteralType(value=True)) == "true"
    assert str(LiteralType(value=3)) == "3"


def test_type_reference_arguments():
    assert str(type_ref("User")) == "User"
    assert str(type_ref("Record", STRING, NUMBER)) == "Record<string, number>"


def test_object_rendering():
    obj = object_type(prop("id", NUMBER), prop("name", STRING, optional=True))
    assert str(obj) == "{id: number,\nname?: string}"
    assert str(object_type()) == "{}"
    assert object_type().members is None


def test_property_names_that_are_not_identifiers_are_quoted():
    assert str(prop("content-type", STRING)) == '"content-type": string'
    assert str(prop("$ref", STRING)) == "$ref: string"


def test_array_tuple_union():
    assert str(ArrayType(element=NUMBER)) == "number[]"
    assert str(ArrayType(element=TupleType(elements=(STRING, NUMBER)))) == (
        "[ string, number ][]"
    )
    assert str(TupleType()) == "[]"
    assert str(UnionType(members=(STRING, NULL))) == "string | null"
    # order and duplicates are kept
    assert str(UnionType(members=(NULL, NULL, BOOLEAN))) == "null | null | boolean"


def test_primary_types():
    assert is_primary(NUMBER)
    assert is_primary(object_type(prop("a", NUMBER)))
    assert not is_primary(UnionType(members=(NUMBER, NULL)))


def test_rendering_is_structural():
    a = object_type(prop("id", NUMBER), prop("tags", ArrayType(element=STRING)))
    b = object_type(prop("id", NUMBER), prop("tags", ArrayType(element=STRING)))
    assert a == b
    assert hash(a) == hash(b)
    assert str(a) == str(b) == str(a)
    assert isinstance(a, ObjectType)


def test_export_statement():
    stmt = ExportStatement(name="Id", type=NUMBER)
    assert str(stmt) == "export type Id = number;"

    generic = ExportStatement(
        name="Table",
        parameters=(
            TypeParameter(name="K", constraint=STRING),
            TypeParameter(name="V"),
        ),
        type=type_ref("Record", type_ref("K"), type_ref("V")),
    )
    assert str(generic) == "export type Table<K extends string, V> = Record<K, V>;"


def test_import_statement():
    stmt = ImportStatement(
        specifiers=(
            ImportSpecifier(name="User"),
            ImportSpecifier(name="Role", alias="UserRole"),
        ),
        source="./models",
    )
    assert str(stmt) == 'import type { User, Role as UserRole } from "./models";'
