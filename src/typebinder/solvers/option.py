from typing import Optional, TYPE_CHECKING

from typebinder.solving import (
    FnSolver,
    PathSolver,
    Solved,
    TypeInfo,
    TypeSolver,
    solve_generic_args,
)
from typebinder.ts.types import NULL, TsType, UnionType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext


def solve_option(
    solving_context: "ExporterContext", solver_info: TypeInfo
) -> Optional[Solved[TsType]]:
    solved = solve_generic_args(solving_context, solver_info, (1,))
    return solved.map(lambda types: UnionType(members=(types[0], NULL)))


class OptionSolver(TypeSolver):
    """`Option<T>` -> `T | null` (value-level nullability)."""

    def __init__(self) -> None:
        self.inner = PathSolver()
        self.inner.add_entry("std::option::Option", FnSolver(solve_option))

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        return self.inner.solve_as_type(solving_context, solver_info)
