from functools import partial
from typing import Optional, Tuple, TYPE_CHECKING

from typebinder.solving import (
    FnSolver,
    PathSolver,
    Solved,
    TypeInfo,
    TypeSolver,
    solve_generic_args,
)
from typebinder.solvers.array import array_of
from typebinder.ts.types import STRING, TsType, TypeReference

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext

# path -> accepted generic argument counts (hashers and allocators are ignored)
SEQUENCES = {
    "std::vec::Vec": (1,),
    "std::collections::VecDeque": (1,),
    "std::collections::HashSet": (1, 2),
    "std::collections::LinkedList": (1,),
    "std::collections::BTreeSet": (1,),
    "std::collections::BinaryHeap": (1,),
}
MAPS = {
    "std::collections::HashMap": (2, 3),
    "std::collections::BTreeMap": (2,),
}


def solve_seq(
    solving_context: "ExporterContext",
    solver_info: TypeInfo,
    arity: Tuple[int, ...],
) -> Optional[Solved[TsType]]:
    solved = solve_generic_args(solving_context, solver_info, arity)
    return solved.map(lambda types: array_of(types[0], solver_info.ty))


def solve_map(
    solving_context: "ExporterContext",
    solver_info: TypeInfo,
    arity: Tuple[int, ...],
) -> Optional[Solved[TsType]]:
    solved = solve_generic_args(solving_context, solver_info, arity)
    key, value = solved.inner[0], solved.inner[1]
    result = solved.map(lambda types: TypeReference(name="Record", args=(key, value)))
    # Record keys must be string-like
    result.generic_constraints.add_extends_constraint(str(key), STRING)
    return result


class CollectionsSolver(TypeSolver):
    """
    Solves the standard library collections serde knows how to serialize:
    sequences become arrays, maps become `Record<K, V>`.
    """

    def __init__(self) -> None:
        self.inner = PathSolver()
        for path, arity in SEQUENCES.items():
            self.inner.add_entry(path, FnSolver(partial(solve_seq, arity=arity)))
        for path, arity in MAPS.items():
            self.inner.add_entry(path, FnSolver(partial(solve_map, arity=arity)))

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        return self.inner.solve_as_type(solving_context, solver_info)
