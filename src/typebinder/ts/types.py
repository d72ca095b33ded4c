"""
Target type grammar.

A small algebraic model of the TypeScript type language. Every node is an
immutable pydantic model with structural equality; ``str(node)`` renders it.
Array elements are restricted to primary (non-union) types.
"""

import json
import re
from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER_RE.match(name))


class TsNode(BaseModel):
    model_config = ConfigDict(frozen=True)


class Keyword(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    NULL = "null"
    NEVER = "never"


class PredefinedType(TsNode):
    kind: Literal["predefined"] = "predefined"
    keyword: Keyword

    def __str__(self) -> str:
        return self.keyword.value


class TypeReference(TsNode):
    kind: Literal["reference"] = "reference"
    name: str  # may be namespaced: "ns.Name"
    args: Optional[Tuple["TsType", ...]] = None

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(str(a) for a in self.args)}>"


class PropertySignature(TsNode):
    name: str
    optional: bool = False
    type: "TsType"

    def __str__(self) -> str:
        name = self.name if is_identifier(self.name) else json.dumps(self.name)
        return f"{name}{'?' if self.optional else ''}: {self.type}"


class ObjectType(TsNode):
    kind: Literal["object"] = "object"
    members: Optional[Tuple[PropertySignature, ...]] = None

    def __str__(self) -> str:
        if not self.members:
            return "{}"
        return "{" + ",\n".join(str(m) for m in self.members) + "}"


class ArrayType(TsNode):
    kind: Literal["array"] = "array"
    element: "PrimaryType"

    def __str__(self) -> str:
        return f"{self.element}[]"


class TupleType(TsNode):
    kind: Literal["tuple"] = "tuple"
    elements: Tuple["TsType", ...] = ()

    def __str__(self) -> str:
        if not self.elements:
            return "[]"
        return f"[ {', '.join(str(e) for e in self.elements)} ]"


class LiteralType(TsNode):
    kind: Literal["literal"] = "literal"
    value: Union[bool, int, float, str]

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return json.dumps(self.value)
        return repr(self.value)


class UnionType(TsNode):
    """Union of member types; order and duplicates are kept as given."""

    kind: Literal["union"] = "union"
    members: Tuple["TsType", ...]

    def __str__(self) -> str:
        return " | ".join(str(m) for m in self.members)


PrimaryType = Annotated[
    Union[PredefinedType, TypeReference, ObjectType, ArrayType, TupleType, LiteralType],
    Field(discriminator="kind"),
]

TsType = Annotated[
    Union[
        PredefinedType,
        TypeReference,
        ObjectType,
        ArrayType,
        TupleType,
        LiteralType,
        UnionType,
    ],
    Field(discriminator="kind"),
]

for _model in (TypeReference, PropertySignature, ObjectType, ArrayType, TupleType, UnionType):
    _model.model_rebuild()


def is_primary(ts_type: TsNode) -> bool:
    return not isinstance(ts_type, UnionType)


# Shorthands
def predefined(keyword: Keyword) -> PredefinedType:
    return PredefinedType(keyword=keyword)


NUMBER = predefined(Keyword.NUMBER)
STRING = predefined(Keyword.STRING)
BOOLEAN = predefined(Keyword.BOOLEAN)
NULL = predefined(Keyword.NULL)


def type_ref(name: str, *args: TsNode) -> TypeReference:
    return TypeReference(name=name, args=tuple(args) if args else None)


def string_literal(value: str) -> LiteralType:
    return LiteralType(value=value)


def object_type(*members: PropertySignature) -> ObjectType:
    return ObjectType(members=tuple(members) if members else None)


def prop(name: str, type: TsNode, optional: bool = False) -> PropertySignature:
    return PropertySignature(name=name, type=type, optional=optional)
