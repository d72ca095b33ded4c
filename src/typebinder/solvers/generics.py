from typing import Optional, TYPE_CHECKING

from typebinder.models import RsPath
from typebinder.solving import Solved, TypeInfo, TypeSolver
from typebinder.ts.types import TsType, TypeReference

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext


class GenericsSolver(TypeSolver):
    """A bare generic parameter in scope becomes a reference to that parameter."""

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if (
            isinstance(ty, RsPath)
            and len(ty.segments) == 1
            and not ty.args
            and ty.ident in solver_info.generics
        ):
            return Solved(inner=TypeReference(name=ty.ident))
        return None
