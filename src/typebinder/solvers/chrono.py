from typing import Optional, TYPE_CHECKING

from typebinder.solving import FnSolver, PathSolver, Solved, TypeInfo, TypeSolver
from typebinder.ts.types import STRING, TsType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext

# chrono serializes these as RFC 3339 / ISO 8601 strings
CHRONO_TYPES = (
    "chrono::DateTime",
    "chrono::NaiveDateTime",
    "chrono::NaiveDate",
    "chrono::NaiveTime",
)


def solve_as_string(
    solving_context: "ExporterContext", solver_info: TypeInfo
) -> Optional[Solved[TsType]]:
    # the timezone argument of DateTime<Tz> does not affect the representation
    return Solved(inner=STRING)


class ChronoSolver(TypeSolver):
    def __init__(self) -> None:
        self.inner = PathSolver()
        for path in CHRONO_TYPES:
            self.inner.add_entry(path, FnSolver(solve_as_string))

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        return self.inner.solve_as_type(solving_context, solver_info)
