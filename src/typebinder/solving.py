"""
Type solving: the ordered, open chain of solvers mapping a source type
expression to a target type.

A solver returns ``None`` to let the next solver try, a ``Solved`` value when
it resolved the type, or raises a ``TypeExportError``. The first solver not
returning ``None`` decides the outcome.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    TYPE_CHECKING,
)

from typebinder.errors import MalformedContainerError, UnresolvableTypeError
from typebinder.imports import ImportEntry
from typebinder.logger import logger
from typebinder.models import RsPath, RsType
from typebinder.ts.types import TsType

if TYPE_CHECKING:
    from typebinder.exporter import ExporterContext

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class TypeInfo:
    """A resolution request: a type expression and the generics in scope."""

    ty: RsType
    generics: Tuple[str, ...] = ()

    def with_type(self, ty: RsType) -> "TypeInfo":
        return TypeInfo(ty=ty, generics=self.generics)


class ImportEntries:
    """Insertion-ordered, deduplicated set of import entries."""

    def __init__(self, entries: Iterable[ImportEntry] = ()) -> None:
        self._entries: Dict[ImportEntry, None] = dict.fromkeys(entries)

    def add(self, entry: ImportEntry) -> None:
        self._entries[entry] = None

    def extend(self, other: Iterable[ImportEntry]) -> None:
        for entry in other:
            self.add(entry)

    def __iter__(self) -> Iterator[ImportEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __repr__(self) -> str:
        return f"ImportEntries({list(self._entries)!r})"


class GenericConstraints:
    """Insertion-ordered, deduplicated `name extends type` bounds."""

    def __init__(self) -> None:
        self._constraints: Dict[Tuple[str, TsType], None] = {}

    def add_extends_constraint(self, name: str, ts_type: TsType) -> None:
        self._constraints[(name, ts_type)] = None

    def extend(self, other: "GenericConstraints") -> None:
        for name, ts_type in other:
            self.add_extends_constraint(name, ts_type)

    def for_parameter(self, name: str) -> Optional[TsType]:
        for constrained, ts_type in self._constraints:
            if constrained == name:
                return ts_type
        return None

    def __iter__(self) -> Iterator[Tuple[str, TsType]]:
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    def __contains__(self, item: object) -> bool:
        return item in self._constraints

    def __repr__(self) -> str:
        return f"GenericConstraints({list(self._constraints)!r})"


@dataclass
class Solved(Generic[T]):
    """A resolved value plus the imports and constraints gathered on the way."""

    inner: T
    import_entries: ImportEntries = field(default_factory=ImportEntries)
    generic_constraints: GenericConstraints = field(default_factory=GenericConstraints)

    def map(self, fn: Callable[[T], U]) -> "Solved[U]":
        return Solved(
            inner=fn(self.inner),
            import_entries=self.import_entries,
            generic_constraints=self.generic_constraints,
        )

    def absorb(self, other: "Solved") -> None:
        """Merge the side channels of *other* into this value."""
        self.import_entries.extend(other.import_entries)
        self.generic_constraints.extend(other.generic_constraints)

    @classmethod
    def collect(cls, items: Iterable["Solved[T]"]) -> "Solved[List[T]]":
        out: Solved[List[T]] = Solved(inner=[])
        for item in items:
            out.inner.append(item.inner)
            out.absorb(item)
        return out


class TypeSolver(ABC):
    @abstractmethod
    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        """Resolve *solver_info*, or return None to defer to the next solver."""
        ...


SolverFn = Callable[["ExporterContext", TypeInfo], Optional[Solved[TsType]]]


class FnSolver(TypeSolver):
    """Adapts a plain function to the solver interface."""

    def __init__(self, fn: SolverFn) -> None:
        self.fn = fn

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        return self.fn(solving_context, solver_info)


class PathSolver(TypeSolver):
    """
    Dispatches path types to the solver registered for that path. An entry
    registered as `std::vec::Vec` also matches `vec::Vec` and `Vec`.

    Paths are looked up by their canonical spelling in the current module, so
    aliased imports still match, while types declared in this crate or
    generic parameters in scope never do.
    """

    def __init__(self) -> None:
        self.entries: Dict[str, TypeSolver] = {}

    def add_entry(self, path: str, solver: TypeSolver) -> None:
        parts = path.split("::")
        for i in range(len(parts)):
            self.entries.setdefault("::".join(parts[i:]), solver)

    def solve_as_type(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Optional[Solved[TsType]]:
        ty = solver_info.ty
        if not isinstance(ty, RsPath):
            return None
        key = solving_context.import_context.canonical_path(ty, solver_info.generics)
        if key is None:
            return None
        solver = self.entries.get(key)
        if solver is None:
            return None
        return solver.solve_as_type(solving_context, solver_info)


class TypeSolvingContext:
    """Ordered registry of solvers, tried in registration order."""

    def __init__(self, solvers: Optional[Sequence[TypeSolver]] = None) -> None:
        self.solvers: List[TypeSolver] = list(solvers or [])

    def add_solver(self, solver: TypeSolver) -> "TypeSolvingContext":
        self.solvers.append(solver)
        return self

    def solve(
        self, solving_context: "ExporterContext", solver_info: TypeInfo
    ) -> Solved[TsType]:
        for solver in self.solvers:
            result = solver.solve_as_type(solving_context, solver_info)
            if result is not None:
                return result
        logger.debug(
            "No solver matched",
            ty=str(solver_info.ty),
            generics=list(solver_info.generics),
        )
        raise UnresolvableTypeError(solver_info.ty)


# Helpers
def solve_generic_args(
    solving_context: "ExporterContext",
    solver_info: TypeInfo,
    arity: Tuple[int, ...],
) -> Solved[List[TsType]]:
    """
    Resolve the generic arguments of the path in *solver_info*. *arity* lists
    the accepted argument counts; only the first ``min(arity)`` arguments are
    resolved (extra ones, like a map's hasher, are not serialized).
    """
    ty = solver_info.ty
    assert isinstance(ty, RsPath)
    args = ty.args
    if len(args) not in arity:
        expected = " or ".join(str(a) for a in arity)
        raise MalformedContainerError(ty.display_path(), expected, len(args))
    return Solved.collect(
        solving_context.solve_type(solver_info.with_type(arg))
        for arg in args[: min(arity)]
    )
