from typing import Optional, TYPE_CHECKING

from typebinder.models import RsTuple
from typebinder.solving import Solved, TypeInfo, TypeSolver
from typebinder.ts.types import TsType, TupleType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext


class TupleSolver(TypeSolver):
    """`(A, B)` -> `[ A, B ]`. The unit type is left to the primitives solver."""

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if not isinstance(ty, RsTuple) or not ty.elements:
            return None
        solved = Solved.collect(
            solving_context.solve_type(solver_info.with_type(elem))
            for elem in ty.elements
        )
        return solved.map(lambda types: TupleType(elements=tuple(types)))
