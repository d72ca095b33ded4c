from typing import List

from typebinder.solving import TypeSolver, TypeSolvingContext
from typebinder.solvers.array import ArraySolver
from typebinder.solvers.chrono import ChronoSolver
from typebinder.solvers.collections import CollectionsSolver
from typebinder.solvers.generics import GenericsSolver
from typebinder.solvers.named_path import ImportSolver
from typebinder.solvers.option import OptionSolver
from typebinder.solvers.primitives import PrimitivesSolver
from typebinder.solvers.reference import ReferenceSolver
from typebinder.solvers.tuples import TupleSolver


def default_solvers() -> List[TypeSolver]:
    """The built-in solvers, in priority order."""
    return [
        TupleSolver(),
        ReferenceSolver(),
        ArraySolver(),
        CollectionsSolver(),
        PrimitivesSolver(),
        OptionSolver(),
        GenericsSolver(),
        ChronoSolver(),
        ImportSolver(),
    ]


def create_solving_context() -> TypeSolvingContext:
    return TypeSolvingContext(default_solvers())


__all__ = [
    "ArraySolver",
    "ChronoSolver",
    "CollectionsSolver",
    "GenericsSolver",
    "ImportSolver",
    "OptionSolver",
    "PrimitivesSolver",
    "ReferenceSolver",
    "TupleSolver",
    "create_solving_context",
    "default_solvers",
]
