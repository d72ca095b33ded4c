from typing import Optional, TYPE_CHECKING

from typebinder.errors import UnexpectedTypeError
from typebinder.models import RsArray, RsSlice
from typebinder.solving import Solved, TypeInfo, TypeSolver
from typebinder.ts.types import ArrayType, TsType, is_primary

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext


def array_of(element: TsType, source: object) -> ArrayType:
    """Wrap *element* in an array; unions cannot be array elements."""
    if not is_primary(element):
        raise UnexpectedTypeError(element, f"array element of `{source}`")
    return ArrayType(element=element)


class ArraySolver(TypeSolver):
    """`[T; N]` and `[T]` -> `T[]`."""

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if not isinstance(ty, (RsArray, RsSlice)):
            return None
        solved = solving_context.solve_type(solver_info.with_type(ty.element))
        return solved.map(lambda element: array_of(element, ty))
