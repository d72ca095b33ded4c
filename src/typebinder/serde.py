"""
Serialization metadata attached to exported declarations.

Attributes found on the source (``#[serde(...)]``) are interpreted once, by
the parser, into small immutable configuration values: ``SerdeContainer``
for structs and enums, ``SerdeField`` for fields and ``SerdeVariant`` for
enum variants. The exporter only ever reads these values.
"""

from enum import Enum
from typing import Iterable, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from typebinder.errors import SerdeAttributeError
from typebinder.logger import logger

if TYPE_CHECKING:
    from typebinder.models import RsAttribute, RsMeta


class RenameRule(str, Enum):
    """The `rename_all` rules understood by serde."""

    NONE = "none"
    LOWER = "lowercase"
    UPPER = "UPPERCASE"
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"
    KEBAB = "kebab-case"
    SCREAMING_KEBAB = "SCREAMING-KEBAB-CASE"

    @classmethod
    def parse(cls, value: str) -> "RenameRule":
        try:
            return cls(value)
        except ValueError:
            raise SerdeAttributeError(f"Unknown rename rule: {value!r}") from None

    def apply_to_field(self, field: str) -> str:
        """Rename a snake_case field identifier."""
        if self in (RenameRule.NONE, RenameRule.LOWER, RenameRule.SNAKE):
            return field
        if self in (RenameRule.UPPER, RenameRule.SCREAMING_SNAKE):
            return field.upper()
        if self is RenameRule.PASCAL:
            out: List[str] = []
            capitalize = True
            for ch in field:
                if ch == "_":
                    capitalize = True
                elif capitalize:
                    out.append(ch.upper())
                    capitalize = False
                else:
                    out.append(ch)
            return "".join(out)
        if self is RenameRule.CAMEL:
            pascal = RenameRule.PASCAL.apply_to_field(field)
            return pascal[:1].lower() + pascal[1:]
        if self is RenameRule.KEBAB:
            return field.replace("_", "-")
        # SCREAMING-KEBAB-CASE
        return field.upper().replace("_", "-")

    def apply_to_variant(self, variant: str) -> str:
        """Rename a PascalCase variant identifier."""
        if self in (RenameRule.NONE, RenameRule.PASCAL):
            return variant
        if self is RenameRule.LOWER:
            return variant.lower()
        if self is RenameRule.UPPER:
            return variant.upper()
        if self is RenameRule.CAMEL:
            return variant[:1].lower() + variant[1:]

        snake: List[str] = []
        for i, ch in enumerate(variant):
            if i > 0 and ch.isupper():
                snake.append("_")
            snake.append(ch.lower())
        snake_case = "".join(snake)

        if self is RenameRule.SNAKE:
            return snake_case
        if self is RenameRule.SCREAMING_SNAKE:
            return snake_case.upper()
        if self is RenameRule.KEBAB:
            return snake_case.replace("_", "-")
        return snake_case.upper().replace("_", "-")


class TagKind(str, Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    ADJACENT = "adjacent"
    UNTAGGED = "untagged"


class TagStrategy(BaseModel):
    """How an enum variant's identity is encoded."""

    model_config = ConfigDict(frozen=True)

    kind: TagKind = TagKind.EXTERNAL
    tag: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def external(cls) -> "TagStrategy":
        return cls(kind=TagKind.EXTERNAL)

    @classmethod
    def internal(cls, tag: str) -> "TagStrategy":
        return cls(kind=TagKind.INTERNAL, tag=tag)

    @classmethod
    def adjacent(cls, tag: str, content: str) -> "TagStrategy":
        return cls(kind=TagKind.ADJACENT, tag=tag, content=content)

    @classmethod
    def untagged(cls) -> "TagStrategy":
        return cls(kind=TagKind.UNTAGGED)


class SerdeContainer(BaseModel):
    """Serialization configuration of one struct or enum."""

    model_config = ConfigDict(frozen=True)

    rename_all: RenameRule = RenameRule.NONE
    rename_all_fields: Optional[RenameRule] = None  # enums only
    tag_strategy: TagStrategy = TagStrategy()
    transparent: bool = False
    optional_wrapper: str = "Option"


class SerdeField(BaseModel):
    model_config = ConfigDict(frozen=True)

    rename: Optional[str] = None
    skip: bool = False
    optional: bool = False  # skip_serializing_if: the key may be absent
    flatten: bool = False


class SerdeVariant(BaseModel):
    model_config = ConfigDict(frozen=True)

    rename: Optional[str] = None
    rename_all: Optional[RenameRule] = None
    skip: bool = False


# Attribute interpretation
def serde_metas(attrs: Iterable["RsAttribute"]) -> List["RsMeta"]:
    """Return the meta items of every `#[serde(...)]` attribute, in order."""
    out: List["RsMeta"] = []
    for attr in attrs:
        if attr.path == "serde":
            out.extend(attr.args)
    return out


def _serialize_value(meta: "RsMeta") -> Optional[str]:
    # `rename = "x"` or `rename(serialize = "x", deserialize = "y")`
    if meta.value is not None:
        return meta.value
    for nested in meta.nested:
        if nested.name == "serialize":
            return nested.value
    return None


def container_from_attributes(
    attrs: Iterable["RsAttribute"], optional_wrapper: str = "Option"
) -> SerdeContainer:
    rename_all = RenameRule.NONE
    rename_all_fields: Optional[RenameRule] = None
    tag: Optional[str] = None
    content: Optional[str] = None
    untagged = False
    transparent = False

    for meta in serde_metas(attrs):
        if meta.name == "rename_all":
            value = _serialize_value(meta)
            if value is not None:
                rename_all = RenameRule.parse(value)
        elif meta.name == "rename_all_fields":
            value = _serialize_value(meta)
            if value is not None:
                rename_all_fields = RenameRule.parse(value)
        elif meta.name == "tag":
            tag = meta.value
        elif meta.name == "content":
            content = meta.value
        elif meta.name == "untagged":
            untagged = True
        elif meta.name == "transparent":
            transparent = True
        else:
            logger.debug("Ignoring serde container attribute", name=meta.name)

    if untagged and tag is not None:
        raise SerdeAttributeError("`untagged` cannot be combined with `tag`")
    if content is not None and tag is None:
        raise SerdeAttributeError("`content` requires `tag`")

    if untagged:
        strategy = TagStrategy.untagged()
    elif tag is not None and content is not None:
        strategy = TagStrategy.adjacent(tag, content)
    elif tag is not None:
        strategy = TagStrategy.internal(tag)
    else:
        strategy = TagStrategy.external()

    return SerdeContainer(
        rename_all=rename_all,
        rename_all_fields=rename_all_fields,
        tag_strategy=strategy,
        transparent=transparent,
        optional_wrapper=optional_wrapper,
    )


def field_from_attributes(attrs: Iterable["RsAttribute"]) -> SerdeField:
    rename: Optional[str] = None
    skip = False
    optional = False
    flatten = False
    for meta in serde_metas(attrs):
        if meta.name == "rename":
            rename = _serialize_value(meta) or rename
        elif meta.name in ("skip", "skip_serializing"):
            skip = True
        elif meta.name == "skip_serializing_if":
            optional = True
        elif meta.name == "flatten":
            flatten = True
    return SerdeField(rename=rename, skip=skip, optional=optional, flatten=flatten)


def variant_from_attributes(attrs: Iterable["RsAttribute"]) -> SerdeVariant:
    rename: Optional[str] = None
    rename_all: Optional[RenameRule] = None
    skip = False
    for meta in serde_metas(attrs):
        if meta.name == "rename":
            rename = _serialize_value(meta) or rename
        elif meta.name == "rename_all":
            value = _serialize_value(meta)
            if value is not None:
                rename_all = RenameRule.parse(value)
        elif meta.name in ("skip", "skip_serializing"):
            skip = True
    return SerdeVariant(rename=rename, rename_all=rename_all, skip=skip)
