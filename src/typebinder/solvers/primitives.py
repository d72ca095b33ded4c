from typing import Optional, TYPE_CHECKING

from typebinder.models import RsTuple
from typebinder.solving import FnSolver, PathSolver, Solved, TypeInfo, TypeSolver
from typebinder.ts.types import BOOLEAN, NULL, NUMBER, STRING, TsType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext

PRIMITIVES = {
    **dict.fromkeys(
        (
            "u8", "u16", "u32", "u64", "u128", "usize",
            "i8", "i16", "i32", "i64", "i128", "isize",
            "f32", "f64",
        ),
        NUMBER,
    ),
    "bool": BOOLEAN,
    "char": STRING,
    "str": STRING,
    "std::string::String": STRING,
    "std::path::PathBuf": STRING,
    "uuid::Uuid": STRING,
}


def _constant(ts_type: TsType) -> FnSolver:
    return FnSolver(lambda solving_context, solver_info: Solved(inner=ts_type))


class PrimitivesSolver(TypeSolver):
    """Numbers, booleans, text and the unit type `()` (serialized as null)."""

    def __init__(self) -> None:
        self.inner = PathSolver()
        for path, ts_type in PRIMITIVES.items():
            self.inner.add_entry(path, _constant(ts_type))

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if isinstance(ty, RsTuple) and not ty.elements:
            return Solved(inner=NULL)
        return self.inner.solve_as_type(solving_context, solver_info)
