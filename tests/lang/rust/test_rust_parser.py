from pathlib import Path

import pytest

from typebinder.errors import SourceParseError
from typebinder.lang.rust import RustParser, parse_use_tree
from typebinder.models import (
    FieldStyle,
    RsArray,
    RsEnum,
    RsMod,
    RsPath,
    RsReference,
    RsSlice,
    RsStruct,
    RsTuple,
    RsTypeAlias,
    RsUse,
    RsVerbatim,
    rs_path,
)
from typebinder.serde import RenameRule, TagKind

SAMPLES_DIR = Path(__file__).parent / "samples"


# Helpers
def _parse(source: str):
    return RustParser().parse_source(source).items


def _by_name(items):
    return {item.name: item for item in items if hasattr(item, "name")}


def _field_type(source: str):
    (item,) = _parse(f"struct S {{ f: {source} }}")
    return item.fields[0].ty


# Tests
def test_rust_parser_on_sample_file():
    """
    Parse the sample file and check structs, enums, aliases, modules and
    the serde configuration attached to each.
    """
    parsed = RustParser().parse_file(SAMPLES_DIR / "example_file.rs")
    assert parsed.path.endswith("example_file.rs")

    items = _by_name(parsed.items)
    assert RsUse(path=("std", "collections", "HashSet")) in parsed.items

    support = items["SupportSerde"]
    assert isinstance(support, RsStruct)
    assert support.generics == ()  # lifetimes are dropped
    assert support.serde.rename_all is RenameRule.CAMEL
    assert support.derives == ("Debug", "Serialize", "Deserialize")
    assert [f.name for f in support.fields] == [
        "field_one",
        "field_two",
        "field_three",
        "field_four",
        "field_five",
        "field_six",
        "field_seven",
        "field_eight",
    ]

    user_id = items["UserId"]
    assert user_id.style is FieldStyle.UNNAMED
    assert [f.ty for f in user_id.fields] == [rs_path("i32")]
    assert len(items["UserPair"].fields) == 2

    kind = items["ControlResultAssigneeKind"]
    assert isinstance(kind, RsEnum)
    assert kind.serde.tag_strategy.kind is TagKind.INTERNAL
    assert kind.serde.tag_strategy.tag == "type"
    assert [v.name for v in kind.variants] == ["User", "Pool"]
    assert kind.variants[0].serde.rename_all is RenameRule.CAMEL
    assert kind.variants[0].style is FieldStyle.NAMED

    protected = items["Protected"]
    assert protected.generics == ("T",)
    assert protected.serde.tag_strategy.kind is TagKind.UNTAGGED
    assert protected.variants[0].style is FieldStyle.UNIT
    assert protected.variants[1].style is FieldStyle.UNNAMED

    adjacent = items["AdjacentEnum"].serde.tag_strategy
    assert (adjacent.kind, adjacent.tag, adjacent.content) == (
        TagKind.ADJACENT,
        "type",
        "data",
    )

    assert items["WithGeneric"].generics == ("T",)
    assert "Serialize" not in items["Internal"].derives

    alias = items["Array"]
    assert isinstance(alias, RsTypeAlias)
    assert alias.generics == ("T",)
    assert alias.ty == rs_path("Vec", rs_path("T"))

    audit = items["audit"]
    assert isinstance(audit, RsMod)
    assert audit.items is not None
    nested = _by_name(audit.items)
    entry = nested["Entry"]
    assert entry.fields[2].serde.optional is True
    assert RsUse(path=("super", "UserId")) in audit.items
    assert RsUse(path=("chrono", "DateTime")) in audit.items

    storage = items["storage"]
    assert isinstance(storage, RsMod)
    assert storage.items is None


def test_type_expressions():
    assert _field_type("u32") == rs_path("u32")
    assert _field_type("std::string::String") == rs_path("std::string::String")
    assert _field_type("HashMap<String, Vec<u8>>") == rs_path(
        "HashMap", rs_path("String"), rs_path("Vec", rs_path("u8"))
    )
    assert _field_type("std::collections::HashMap<K, V>") == rs_path(
        "std::collections::HashMap", rs_path("K"), rs_path("V")
    )
    assert _field_type("[u8; 4]") == RsArray(element=rs_path("u8"), length="4")
    assert _field_type("(u32, String)") == RsTuple(
        elements=(rs_path("u32"), rs_path("String"))
    )
    assert _field_type("()") == RsTuple()
    assert _field_type("&'static str") == RsReference(element=rs_path("str"))
    assert _field_type("&'a mut [u8]") == RsReference(
        element=RsSlice(element=rs_path("u8")), mutable=True
    )
    assert _field_type("Cow<'a, str>") == rs_path("Cow", rs_path("str"))
    assert isinstance(_field_type("Box<dyn Fn()>").args[0], RsVerbatim)
    assert isinstance(_field_type("fn(u32) -> u32"), RsVerbatim)


def test_field_attributes():
    (item,) = _parse(
        """
        #[derive(Serialize)]
        struct S {
            #[serde(rename = "ID")]
            id: u32,
            // comment between fields
            #[serde(skip)]
            cache: Vec<u8>,
            r#type: String,
        }
        """
    )
    assert [f.name for f in item.fields] == ["id", "cache", "r#type"]
    assert item.fields[0].serde.rename == "ID"
    assert item.fields[1].serde.skip is True
    assert item.fields[2].serde.skip is False


def test_positional_field_attributes():
    (item,) = _parse("struct P(#[serde(skip)] u32, pub String);")
    assert item.style is FieldStyle.UNNAMED
    assert [f.ty for f in item.fields] == [rs_path("u32"), rs_path("String")]
    assert item.fields[0].serde.skip is True
    assert item.fields[1].serde.skip is False


def test_unit_struct_and_generics():
    items = _parse(
        """
        struct Marker;
        struct Bounded<'a, T: Clone, const N: usize, U = u8> { t: &'a T, u: U }
        """
    )
    marker, bounded = items
    assert marker.style is FieldStyle.UNIT
    assert marker.fields == ()
    assert bounded.generics == ("T", "U")


def test_variant_attributes_and_discriminants():
    (item,) = _parse(
        """
        #[serde(rename_all = "snake_case")]
        enum Level {
            #[serde(rename = "lo")]
            Low = 1,
            High = 2,
            #[serde(skip)]
            Hidden,
        }
        """
    )
    assert [v.name for v in item.variants] == ["Low", "High", "Hidden"]
    assert item.variants[0].serde.rename == "lo"
    assert item.variants[2].serde.skip is True
    assert item.serde.rename_all is RenameRule.SNAKE


def test_modules_and_ignored_items():
    items = _parse(
        """
        fn helper() -> u32 { 1 }
        const LIMIT: u32 = 3;
        pub mod inner {
            pub type Id = u64;
            mod deeper;
        }
        """
    )
    assert len(items) == 1
    inner = items[0]
    assert inner.name == "inner"
    assert [type(i) for i in inner.items] == [RsTypeAlias, RsMod]
    assert inner.items[1].items is None


def test_use_trees():
    assert parse_use_tree("crate::models::{User, Role as R, sub::*}") == (
        RsUse(path=("crate", "models", "User")),
        RsUse(path=("crate", "models", "Role"), alias="R"),
        RsUse(path=("crate", "models", "sub"), glob=True),
    )
    assert parse_use_tree("super::*") == (RsUse(path=("super",), glob=True),)
    assert parse_use_tree("::std::fmt") == (RsUse(path=("std", "fmt")),)
    assert parse_use_tree("a::{self, b::{c, d}}") == (
        RsUse(path=("a",)),
        RsUse(path=("a", "b", "c")),
        RsUse(path=("a", "b", "d")),
    )
    assert parse_use_tree("std::io::Write as _") == ()


def test_use_declarations_in_source():
    items = _parse("pub use crate::a::{B, C as D};\nuse super::*;")
    assert items == [
        RsUse(path=("crate", "a", "B")),
        RsUse(path=("crate", "a", "C"), alias="D"),
        RsUse(path=("super",), glob=True),
    ]


def test_syntax_errors_are_fatal():
    with pytest.raises(SourceParseError) as exc:
        RustParser().parse_source("struct Broken { a: u32,, }", path="broken.rs")
    assert exc.value.path == "broken.rs"
    assert exc.value.line == 1


def test_optional_wrapper_is_recorded():
    (item,) = RustParser(optional_wrapper="Maybe").parse_source("struct S { a: u8 }").items
    assert item.serde.optional_wrapper == "Maybe"
    assert isinstance(item.fields[0].ty, RsPath)
