from typebinder.models import RsAttribute, RsMeta
from typebinder.parsers import parse_attribute, parse_meta_list, tokenize_meta


def test_tokenize_meta():
    assert tokenize_meta('rename = "a\\"b", x(y)') == [
        ("path", "rename"),
        ("punct", "="),
        ("str", '"a\\"b"'),
        ("punct", ","),
        ("path", "x"),
        ("punct", "("),
        ("path", "y"),
        ("punct", ")"),
    ]


def test_parse_meta_list():
    assert parse_meta_list('tag = "type", content = "data", untagged') == (
        RsMeta(name="tag", value="type"),
        RsMeta(name="content", value="data"),
        RsMeta(name="untagged"),
    )


def test_nested_metas_and_escapes():
    (meta,) = parse_meta_list('rename(serialize = "say \\"hi\\"", deserialize = "b")')
    assert meta.name == "rename"
    assert meta.nested == (
        RsMeta(name="serialize", value='say "hi"'),
        RsMeta(name="deserialize", value="b"),
    )


def test_non_string_values():
    assert parse_meta_list("default = path::to::fn, limit = 3") == (
        RsMeta(name="default", value="path::to::fn"),
        RsMeta(name="limit", value="3"),
    )


def test_parse_attribute():
    assert parse_attribute("derive(Debug, serde::Serialize)") == RsAttribute(
        path="derive",
        args=(RsMeta(name="Debug"), RsMeta(name="serde::Serialize")),
    )
    assert parse_attribute('serde(rename_all = "camelCase")') == RsAttribute(
        path="serde", args=(RsMeta(name="rename_all", value="camelCase"),)
    )
    assert parse_attribute("non_exhaustive") == RsAttribute(path="non_exhaustive")
    assert parse_attribute("") is None
