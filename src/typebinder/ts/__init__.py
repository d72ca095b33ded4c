from typebinder.ts.types import (
    ArrayType,
    Keyword,
    LiteralType,
    ObjectType,
    PredefinedType,
    PrimaryType,
    PropertySignature,
    TsType,
    TupleType,
    TypeReference,
    UnionType,
    is_primary,
)
from typebinder.ts.export import (
    ExportStatement,
    ImportSpecifier,
    ImportStatement,
    TypeParameter,
)

__all__ = [
    "ArrayType",
    "ExportStatement",
    "ImportSpecifier",
    "ImportStatement",
    "Keyword",
    "LiteralType",
    "ObjectType",
    "PredefinedType",
    "PrimaryType",
    "PropertySignature",
    "TsType",
    "TupleType",
    "TypeParameter",
    "TypeReference",
    "UnionType",
    "is_primary",
]
