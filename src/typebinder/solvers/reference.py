from typing import Optional, TYPE_CHECKING

from typebinder.models import RsReference
from typebinder.solving import (
    FnSolver,
    PathSolver,
    Solved,
    TypeInfo,
    TypeSolver,
    solve_generic_args,
)
from typebinder.ts.types import TsType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext

# Wrappers serialized exactly like the value they hold.
SMART_POINTERS = (
    "std::boxed::Box",
    "std::rc::Rc",
    "std::sync::Arc",
    "std::borrow::Cow",
    "std::cell::Cell",
    "std::cell::RefCell",
    "std::sync::Mutex",
    "std::sync::RwLock",
)


def solve_pointer(
    solving_context: "ExporterContext", solver_info: TypeInfo
) -> Optional[Solved[TsType]]:
    solved = solve_generic_args(solving_context, solver_info, (1,))
    return solved.map(lambda types: types[0])


class ReferenceSolver(TypeSolver):
    """Unwraps references, raw pointers and smart pointers transparently."""

    def __init__(self) -> None:
        self.inner = PathSolver()
        unwrap = FnSolver(solve_pointer)
        for path in SMART_POINTERS:
            self.inner.add_entry(path, unwrap)

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if isinstance(ty, RsReference):
            return solving_context.solve_type(solver_info.with_type(ty.element))
        return self.inner.solve_as_type(solving_context, solver_info)
