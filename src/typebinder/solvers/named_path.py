from typing import Optional, TYPE_CHECKING

from typebinder.models import RsPath
from typebinder.solving import Solved, TypeInfo, TypeSolver
from typebinder.ts.types import TsType, TypeReference

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext


class ImportSolver(TypeSolver):
    """
    Last resort for path types: reference the type by name and record the
    import needed to reach it, unless it is declared in the current module.
    """

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if not isinstance(ty, RsPath):
            return None

        args = Solved.collect(
            solving_context.solve_type(solver_info.with_type(arg)) for arg in ty.args
        )
        entry = solving_context.import_context.resolve(ty)
        name = entry.local_name if entry is not None else ty.ident

        solved = args.map(
            lambda types: TypeReference(name=name, args=tuple(types) or None)
        )
        if entry is not None:
            solved.import_entries.add(entry)
        return solved
