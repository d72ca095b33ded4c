import pytest

from typebinder.errors import (
    ImportResolutionError,
    MalformedContainerError,
    UnexpectedTypeError,
    UnresolvableTypeError,
)
from typebinder.exporter import ExporterContext
from typebinder.imports import ImportContext, ImportEntry
from typebinder.models import (
    RsArray,
    RsReference,
    RsSlice,
    RsStruct,
    RsTuple,
    RsUse,
    RsVerbatim,
    rs_path,
    rs_tuple,
)
from typebinder.solvers import create_solving_context, default_solvers
from typebinder.solving import (
    FnSolver,
    PathSolver,
    Solved,
    TypeInfo,
    TypeSolvingContext,
)
from typebinder.ts.types import STRING, TypeReference


# Helpers
def _ctx(items=(), path=(), solving_context=None) -> ExporterContext:
    return ExporterContext(
        solving_context or create_solving_context(),
        ImportContext.from_items(path, items),
    )


def _solve(ty, generics=(), items=(), solving_context=None) -> Solved:
    ctx = _ctx(items, solving_context=solving_context)
    return ctx.solve_type(TypeInfo(ty=ty, generics=tuple(generics)))


def _render(ty, generics=(), items=()) -> str:
    return str(_solve(ty, generics, items).inner)


# Tests
@pytest.mark.parametrize(
    "path, expected",
    [
        ("u8", "number"),
        ("i64", "number"),
        ("f32", "number"),
        ("usize", "number"),
        ("bool", "boolean"),
        ("char", "string"),
        ("str", "string"),
        ("String", "string"),
        ("std::string::String", "string"),
        ("uuid::Uuid", "string"),
    ],
)
def test_primitives(path, expected):
    assert _render(rs_path(path)) == expected


def test_unit_is_null():
    assert _render(RsTuple()) == "null"


def test_tuples():
    assert _render(rs_tuple(rs_path("u32"), rs_path("String"))) == "[ number, string ]"


def test_references_and_smart_pointers():
    assert _render(RsReference(element=rs_path("str"))) == "string"
    assert _render(RsReference(element=rs_path("u32"), mutable=True)) == "number"
    assert _render(rs_path("Box", rs_path("u32"))) == "number"
    assert _render(rs_path("std::sync::Arc", rs_path("String"))) == "string"
    assert _render(RsReference(element=RsSlice(element=rs_path("u8")))) == "number[]"


def test_arrays():
    assert _render(RsArray(element=rs_path("u8"), length="4")) == "number[]"
    assert _render(RsSlice(element=rs_path("String"))) == "string[]"


def test_sequences():
    assert _render(rs_path("Vec", rs_path("String"))) == "string[]"
    assert _render(rs_path("std::vec::Vec", rs_path("u32"))) == "number[]"
    assert _render(rs_path("HashSet", rs_path("i32"))) == "number[]"
    assert _render(rs_path("VecDeque", rs_tuple(rs_path("u8"), rs_path("bool")))) == (
        "[ number, boolean ][]"
    )


def test_maps():
    solved = _solve(rs_path("HashMap", rs_path("String"), rs_path("u32")))
    assert str(solved.inner) == "Record<string, number>"

    # hasher argument is accepted and not serialized
    solved = _solve(
        rs_path("HashMap", rs_path("String"), rs_path("u32"), rs_path("RandomState"))
    )
    assert str(solved.inner) == "Record<string, number>"

    solved = _solve(rs_path("BTreeMap", rs_path("K"), rs_path("V")), generics=["K", "V"])
    assert str(solved.inner) == "Record<K, V>"
    assert ("K", STRING) in solved.generic_constraints


def test_option_is_nullable():
    assert _render(rs_path("Option", rs_path("u32"))) == "number | null"


def test_generics_in_scope():
    solved = _solve(rs_path("T"), generics=["T"])
    assert solved.inner == TypeReference(name="T")
    assert len(solved.import_entries) == 0


def test_chrono_types_are_strings():
    assert _render(rs_path("DateTime", rs_path("Utc"))) == "string"
    assert _render(rs_path("chrono::NaiveDate")) == "string"


def test_wrong_arity_is_malformed():
    with pytest.raises(MalformedContainerError) as exc:
        _solve(rs_path("Vec", rs_path("u8"), rs_path("u8")))
    assert exc.value.got == 2

    with pytest.raises(MalformedContainerError):
        _solve(rs_path("Option"))

    with pytest.raises(MalformedContainerError):
        _solve(rs_path("HashMap", rs_path("String")))


def test_union_cannot_be_array_element():
    ty = rs_path("Vec", rs_path("Option", rs_path("T")))
    with pytest.raises(UnexpectedTypeError):
        _solve(ty, generics=["T"])


def test_verbatim_types_are_unresolvable():
    with pytest.raises(UnresolvableTypeError) as exc:
        _solve(RsVerbatim(text="dyn Fn()"))
    assert "dyn Fn()" in str(exc.value)


def test_unknown_bare_name_without_imports():
    with pytest.raises(ImportResolutionError):
        _solve(rs_path("Missing"))


def test_local_types_need_no_import():
    items = [RsStruct(name="Local")]
    solved = _solve(rs_path("Vec", rs_path("Local")), items=items)
    assert str(solved.inner) == "Local[]"
    assert len(solved.import_entries) == 0


def test_imported_types_record_entries():
    items = [
        RsUse(path=("crate", "models", "User")),
        RsUse(path=("crate", "auth", "Role"), alias="UserRole"),
    ]
    solved = _solve(
        rs_tuple(rs_path("User"), rs_path("Option", rs_path("UserRole"))), items=items
    )
    assert str(solved.inner) == "[ User, UserRole | null ]"
    assert list(solved.import_entries) == [
        ImportEntry(module=("models",), ident="User"),
        ImportEntry(module=("auth",), ident="Role", alias="UserRole"),
    ]


def test_imported_generic_arguments():
    items = [RsUse(path=("crate", "page", "Page"))]
    solved = _solve(rs_path("Page", rs_path("T")), generics=["T"], items=items)
    assert str(solved.inner) == "Page<T>"
    assert [e.ident for e in solved.import_entries] == ["Page"]


def test_side_channels_merge_through_composition():
    ty = rs_tuple(
        rs_path("Vec", rs_path("T")),
        rs_path("HashMap", rs_path("String"), rs_path("T")),
    )
    solved = _solve(ty, generics=["T"])
    assert str(solved.inner) == "[ T[], Record<string, T> ]"
    assert len(solved.import_entries) == 0
    assert ("string", STRING) in solved.generic_constraints

    items = [
        RsUse(path=("crate", "a", "A")),
        RsUse(path=("crate", "b", "B")),
    ]
    ty = rs_tuple(
        rs_path("Vec", rs_path("A")),
        rs_path("HashMap", rs_path("K"), rs_path("B")),
    )
    solved = _solve(ty, generics=["K"], items=items)
    assert [e.ident for e in solved.import_entries] == ["A", "B"]
    assert ("K", STRING) in solved.generic_constraints


def test_custom_solver_takes_precedence():
    big = PathSolver()
    big.add_entry(
        "u64",
        FnSolver(lambda ctx, info: Solved(inner=TypeReference(name="bigint"))),
    )
    solving_context = TypeSolvingContext([big] + default_solvers())

    solved = _solve(rs_path("Vec", rs_path("u64")), solving_context=solving_context)
    assert str(solved.inner) == "bigint[]"
    solved = _solve(rs_path("u32"), solving_context=solving_context)
    assert str(solved.inner) == "number"


def test_empty_solving_context_is_unresolvable():
    with pytest.raises(UnresolvableTypeError):
        _solve(rs_path("u32"), solving_context=TypeSolvingContext())


def test_path_solver_matches_suffixes():
    solver = PathSolver()
    hit = FnSolver(lambda ctx, info: Solved(inner=STRING))
    solver.add_entry("std::string::String", hit)
    assert set(solver.entries) == {"std::string::String", "string::String", "String"}

    ctx = _ctx()
    assert solver.solve_as_type(ctx, TypeInfo(ty=rs_path("string::String"))) is not None
    assert solver.solve_as_type(ctx, TypeInfo(ty=rs_path("Str"))) is None
    assert solver.solve_as_type(ctx, TypeInfo(ty=RsTuple())) is None


def test_local_declarations_shadow_builtin_names():
    items = [RsStruct(name="Cell"), RsStruct(name="Mutex")]
    solved = _solve(rs_path("Vec", rs_path("Cell")), items=items)
    assert str(solved.inner) == "Cell[]"
    assert len(solved.import_entries) == 0
    assert _render(rs_path("Mutex"), items=items) == "Mutex"


def test_crate_imports_shadow_builtin_names():
    items = [RsUse(path=("crate", "grid", "Cell"))]
    solved = _solve(rs_path("Cell"), items=items)
    assert str(solved.inner) == "Cell"
    assert list(solved.import_entries) == [ImportEntry(module=("grid",), ident="Cell")]

    solved = _solve(rs_path("crate::sync::Mutex"))
    assert str(solved.inner) == "Mutex"
    assert list(solved.import_entries) == [ImportEntry(module=("sync",), ident="Mutex")]


def test_generic_parameters_shadow_builtin_names():
    solved = _solve(rs_path("Vec", rs_path("Box")), generics=["Box"])
    assert str(solved.inner) == "Box[]"


def test_aliased_imports_reach_builtin_solvers():
    items = [
        RsUse(path=("std", "collections", "HashMap"), alias="Map"),
        RsUse(path=("std", "sync", "Arc"), alias="Shared"),
        RsUse(path=("chrono", "DateTime"), alias="Timestamp"),
    ]
    solved = _solve(rs_path("Map", rs_path("String"), rs_path("u32")), items=items)
    assert str(solved.inner) == "Record<string, number>"
    assert len(solved.import_entries) == 0

    assert _render(rs_path("Shared", rs_path("String")), items=items) == "string"
    assert _render(rs_path("Timestamp", rs_path("Utc")), items=items) == "string"
