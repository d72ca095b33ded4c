from typing import Sequence, Tuple, Union

from typebinder.errors import SerdeAttributeError
from typebinder.imports import ImportContext
from typebinder.logger import logger
from typebinder.models import (
    FieldStyle,
    RsEnum,
    RsField,
    RsPath,
    RsStruct,
    RsTypeAlias,
    RsVariant,
)
from typebinder.serde import RenameRule, TagKind
from typebinder.solving import GenericConstraints, Solved, TypeInfo, TypeSolvingContext
from typebinder.ts.export import ExportStatement, TypeParameter
from typebinder.ts.types import (
    NULL,
    Keyword,
    ObjectType,
    PropertySignature,
    TsType,
    TupleType,
    UnionType,
    object_type,
    predefined,
    prop,
    string_literal,
)

Declaration = Union[RsStruct, RsEnum, RsTypeAlias]


def unraw(ident: str) -> str:
    """`r#type` -> `type`"""
    return ident[2:] if ident.startswith("r#") else ident


class ExporterContext:
    """
    Binds the solver chain to the import context of one module and turns
    declarations into export statements.
    """

    def __init__(
        self, solving_context: TypeSolvingContext, import_context: ImportContext
    ) -> None:
        self.solving_context = solving_context
        self.import_context = import_context

    def solve_type(self, solver_info: TypeInfo) -> Solved[TsType]:
        return self.solving_context.solve(self, solver_info)

    def export_declaration(self, item: Declaration) -> Solved[ExportStatement]:
        if isinstance(item, RsTypeAlias):
            return self.export_statements_from_type_alias(item)
        if isinstance(item, RsStruct):
            return self.export_statements_from_struct(item)
        return self.export_statements_from_enum(item)

    # Declarations
    def export_statements_from_type_alias(
        self, item: RsTypeAlias
    ) -> Solved[ExportStatement]:
        solved = self.solve_type(TypeInfo(ty=item.ty, generics=item.generics))
        return self._statement(item.name, item.generics, solved)

    def export_statements_from_struct(self, item: RsStruct) -> Solved[ExportStatement]:
        generics = item.generics
        fields = [f for f in item.fields if not f.serde.skip]
        solved: Solved[TsType]

        if item.serde.transparent:
            if len(fields) != 1:
                raise SerdeAttributeError(
                    f"transparent struct `{item.name}` must have exactly one field"
                )
            solved = self.solve_type(TypeInfo(ty=fields[0].ty, generics=generics))
        elif item.style is FieldStyle.NAMED:
            solved = self._solve_named_fields(
                fields, generics, item.serde.rename_all, item.serde.optional_wrapper
            )
        elif item.style is FieldStyle.UNNAMED:
            solved = self._solve_unnamed_fields(fields, generics)
        else:
            solved = Solved(inner=NULL)

        return self._statement(item.name, generics, solved)

    def export_statements_from_enum(self, item: RsEnum) -> Solved[ExportStatement]:
        variants = [v for v in item.variants if not v.serde.skip]
        if not variants:
            logger.debug("Enum has no serializable variants", name=item.name)
            never = Solved(inner=predefined(Keyword.NEVER))
            return self._statement(item.name, item.generics, never)

        shapes = Solved.collect(self._solve_variant(item, v) for v in variants)
        solved = shapes.map(lambda members: UnionType(members=tuple(members)))
        return self._statement(item.name, item.generics, solved)

    # Fields
    def _solve_named_fields(
        self,
        fields: Sequence[RsField],
        generics: Tuple[str, ...],
        rename_rule: RenameRule,
        optional_wrapper: str,
    ) -> Solved[ObjectType]:
        props = Solved.collect(
            self._solve_field(f, generics, rename_rule, optional_wrapper)
            for f in fields
            if not f.serde.skip
        )
        return props.map(lambda members: object_type(*members))

    def _solve_field(
        self,
        field: RsField,
        generics: Tuple[str, ...],
        rename_rule: RenameRule,
        optional_wrapper: str,
    ) -> Solved[PropertySignature]:
        if field.serde.flatten:
            raise SerdeAttributeError(
                f"`flatten` on field `{field.name}` cannot be represented"
            )

        ty = field.ty
        optional = field.serde.optional
        # Optional wrapper at the field layer: `name?: T`, not `name: T | null`
        if isinstance(ty, RsPath) and ty.ident == optional_wrapper and len(ty.args) == 1:
            ty = ty.args[0]
            optional = True

        name = field.serde.rename or rename_rule.apply_to_field(unraw(field.name or ""))
        solved = self.solve_type(TypeInfo(ty=ty, generics=generics))
        return solved.map(
            lambda ts_type: PropertySignature(name=name, optional=optional, type=ts_type)
        )

    def _solve_unnamed_fields(
        self, fields: Sequence[RsField], generics: Tuple[str, ...]
    ) -> Solved[TsType]:
        if len(fields) == 1:
            return self.solve_type(TypeInfo(ty=fields[0].ty, generics=generics))
        solved = Solved.collect(
            self.solve_type(TypeInfo(ty=f.ty, generics=generics)) for f in fields
        )
        return solved.map(lambda types: TupleType(elements=tuple(types)))

    # Variants
    def _variant_shape(
        self, item: RsEnum, variant: RsVariant, field_rule: RenameRule
    ) -> Solved[TsType]:
        """Serialized form of the variant's content, without any tag."""
        fields = [f for f in variant.fields if not f.serde.skip]
        if variant.style is FieldStyle.UNIT:
            return Solved(inner=NULL)
        if variant.style is FieldStyle.UNNAMED:
            return self._solve_unnamed_fields(fields, item.generics)
        return self._solve_named_fields(
            fields, item.generics, field_rule, item.serde.optional_wrapper
        )

    def _solve_variant(self, item: RsEnum, variant: RsVariant) -> Solved[TsType]:
        strategy = item.serde.tag_strategy
        name = variant.serde.rename or item.serde.rename_all.apply_to_variant(
            unraw(variant.name)
        )
        field_rule = (
            variant.serde.rename_all or item.serde.rename_all_fields or RenameRule.NONE
        )

        if strategy.kind is TagKind.INTERNAL:
            if variant.style is FieldStyle.UNNAMED:
                raise SerdeAttributeError(
                    f"internally tagged enum `{item.name}` cannot contain "
                    f"tuple variant `{variant.name}`"
                )
            tag = prop(strategy.tag, string_literal(name))
            if variant.style is FieldStyle.UNIT:
                return Solved(inner=object_type(tag))
            body = self._solve_named_fields(
                variant.fields, item.generics, field_rule, item.serde.optional_wrapper
            )
            return body.map(lambda obj: object_type(tag, *(obj.members or ())))

        if strategy.kind is TagKind.EXTERNAL and variant.style is FieldStyle.UNIT:
            # serialized as the bare variant name
            return Solved(inner=string_literal(name))

        shape = self._variant_shape(item, variant, field_rule)
        if strategy.kind is TagKind.EXTERNAL:
            return shape.map(lambda ts_type: object_type(prop(name, ts_type)))
        if strategy.kind is TagKind.ADJACENT:
            return shape.map(
                lambda ts_type: object_type(
                    prop(strategy.tag, string_literal(name)),
                    prop(strategy.content, ts_type),
                )
            )
        return shape

    # Helpers
    def _statement(
        self, name: str, generics: Tuple[str, ...], solved: Solved[TsType]
    ) -> Solved[ExportStatement]:
        parameters = _type_parameters(generics, solved.generic_constraints)
        return solved.map(
            lambda ts_type: ExportStatement(name=name, parameters=parameters, type=ts_type)
        )


def _type_parameters(
    generics: Tuple[str, ...], constraints: GenericConstraints
) -> Tuple[TypeParameter, ...]:
    return tuple(
        TypeParameter(name=g, constraint=constraints.for_parameter(g)) for g in generics
    )
