from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from typebinder.serde import SerdeContainer, SerdeField, SerdeVariant

# ---------------------------------------------------------------------------
# Source AST
#
# Immutable snapshot of the declarations the exporter consumes. Produced by a
# parser (see typebinder.lang.rust) or built directly.
# ---------------------------------------------------------------------------


class RsNode(BaseModel):
    model_config = ConfigDict(frozen=True)


class RsMeta(RsNode):
    """One item of an attribute's meta list: `name`, `name = "v"` or `name(...)`."""

    name: str
    value: Optional[str] = None
    nested: Tuple["RsMeta", ...] = ()


class RsAttribute(RsNode):
    path: str  # "serde", "derive", "doc", ...
    args: Tuple[RsMeta, ...] = ()


# Type expressions
class RsPathSegment(RsNode):
    ident: str
    args: Tuple["RsType", ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.ident
        return f"{self.ident}<{', '.join(str(a) for a in self.args)}>"


class RsPath(RsNode):
    kind: Literal["path"] = "path"
    segments: Tuple[RsPathSegment, ...]

    @property
    def ident(self) -> str:
        return self.segments[-1].ident

    @property
    def args(self) -> Tuple["RsType", ...]:
        return self.segments[-1].args

    def display_path(self) -> str:
        """Path without generic arguments, e.g. `std::vec::Vec`."""
        return "::".join(s.ident for s in self.segments)

    def __str__(self) -> str:
        return "::".join(str(s) for s in self.segments)


class RsArray(RsNode):
    kind: Literal["array"] = "array"
    element: "RsType"
    length: Optional[str] = None

    def __str__(self) -> str:
        if self.length is None:
            return f"[{self.element}]"
        return f"[{self.element}; {self.length}]"


class RsSlice(RsNode):
    kind: Literal["slice"] = "slice"
    element: "RsType"

    def __str__(self) -> str:
        return f"[{self.element}]"


class RsTuple(RsNode):
    """Tuple type; the unit type `()` is the empty tuple."""

    kind: Literal["tuple"] = "tuple"
    elements: Tuple["RsType", ...] = ()

    def __str__(self) -> str:
        if len(self.elements) == 1:
            return f"({self.elements[0]},)"
        return f"({', '.join(str(e) for e in self.elements)})"


class RsReference(RsNode):
    """Reference `&T`, `&mut T` or raw pointer `*const T`."""

    kind: Literal["reference"] = "reference"
    element: "RsType"
    mutable: bool = False
    pointer: bool = False

    def __str__(self) -> str:
        if self.pointer:
            return f"*{'mut' if self.mutable else 'const'} {self.element}"
        return f"&{'mut ' if self.mutable else ''}{self.element}"


class RsVerbatim(RsNode):
    """A type expression no built-in solver understands (fn pointers, `dyn`, macros)."""

    kind: Literal["verbatim"] = "verbatim"
    text: str

    def __str__(self) -> str:
        return self.text


RsType = Annotated[
    Union[RsPath, RsArray, RsSlice, RsTuple, RsReference, RsVerbatim],
    Field(discriminator="kind"),
]


# Declarations
class FieldStyle(str, Enum):
    NAMED = "named"  # struct S { a: T }
    UNNAMED = "unnamed"  # struct S(T, U);
    UNIT = "unit"  # struct S;


class RsField(RsNode):
    name: Optional[str] = None  # None for positional fields
    ty: RsType
    serde: SerdeField = SerdeField()


class RsVariant(RsNode):
    name: str
    style: FieldStyle = FieldStyle.UNIT
    fields: Tuple[RsField, ...] = ()
    serde: SerdeVariant = SerdeVariant()


class RsStruct(RsNode):
    kind: Literal["struct"] = "struct"
    name: str
    generics: Tuple[str, ...] = ()
    style: FieldStyle = FieldStyle.NAMED
    fields: Tuple[RsField, ...] = ()
    serde: SerdeContainer = SerdeContainer()
    derives: Tuple[str, ...] = ()


class RsEnum(RsNode):
    kind: Literal["enum"] = "enum"
    name: str
    generics: Tuple[str, ...] = ()
    variants: Tuple[RsVariant, ...] = ()
    serde: SerdeContainer = SerdeContainer()
    derives: Tuple[str, ...] = ()


class RsTypeAlias(RsNode):
    kind: Literal["type"] = "type"
    name: str
    generics: Tuple[str, ...] = ()
    ty: RsType


class RsUse(RsNode):
    """One leaf of a `use` tree: `use a::b::C as D;` -> path=(a, b, C), alias=D."""

    kind: Literal["use"] = "use"
    path: Tuple[str, ...]
    alias: Optional[str] = None
    glob: bool = False  # `use a::b::*;` -> path=(a, b), glob=True

    @property
    def local_name(self) -> Optional[str]:
        if self.glob:
            return None
        return self.alias or self.path[-1]


class RsMod(RsNode):
    kind: Literal["mod"] = "mod"
    name: str
    items: Optional[Tuple["RsItem", ...]] = None  # None for `mod name;`


RsItem = Annotated[
    Union[RsStruct, RsEnum, RsTypeAlias, RsUse, RsMod],
    Field(discriminator="kind"),
]

# Module paths are plain identifier tuples; the crate root is `()`.
ModulePath = Tuple[str, ...]


def display_module_path(path: ModulePath) -> str:
    return "::".join(path) if path else "crate"


for _model in (
    RsMeta,
    RsAttribute,
    RsPathSegment,
    RsPath,
    RsArray,
    RsSlice,
    RsTuple,
    RsReference,
    RsField,
    RsVariant,
    RsStruct,
    RsEnum,
    RsTypeAlias,
    RsMod,
):
    _model.model_rebuild()


# Builders
def rs_path(path: str, *args: RsType) -> RsPath:
    """
    Build a path type from its textual form; generic arguments attach to the
    last segment. ``rs_path("std::vec::Vec", rs_path("u32"))`` is `Vec<u32>`.
    """
    idents = [p for p in path.split("::") if p]
    segments = [RsPathSegment(ident=i) for i in idents[:-1]]
    segments.append(RsPathSegment(ident=idents[-1], args=tuple(args)))
    return RsPath(segments=tuple(segments))


def rs_tuple(*elements: RsType) -> RsTuple:
    return RsTuple(elements=tuple(elements))
