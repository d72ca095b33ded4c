import re
from typing import Callable, Dict, List, Optional, Tuple, Union

import tree_sitter as ts
import tree_sitter_rust as tsrust

from typebinder.logger import logger
from typebinder.models import (
    FieldStyle,
    RsArray,
    RsAttribute,
    RsEnum,
    RsField,
    RsItem,
    RsMod,
    RsPath,
    RsPathSegment,
    RsReference,
    RsSlice,
    RsStruct,
    RsTuple,
    RsType,
    RsTypeAlias,
    RsUse,
    RsVariant,
    RsVerbatim,
)
from typebinder.parsers import (
    AbstractSourceParser,
    ParsedFile,
    get_node_text,
    parse_attribute,
    raise_syntax_error,
)
from typebinder.serde import (
    container_from_attributes,
    field_from_attributes,
    variant_from_attributes,
)

RUST_LANGUAGE = ts.Language(tsrust.language())

_parser: Optional[ts.Parser] = None


def _get_parser() -> ts.Parser:
    global _parser
    if _parser is None:
        _parser = ts.Parser(RUST_LANGUAGE)
    return _parser


# Nodes that never carry a type inside `<...>` argument lists
_NON_TYPE_ARGS = {
    "lifetime",
    "type_binding",
    "block",
    "integer_literal",
    "float_literal",
    "string_literal",
    "char_literal",
    "boolean_literal",
    "negative_literal",
    "line_comment",
    "block_comment",
}

_COMMENTS = {"line_comment", "block_comment"}

ItemHandler = Callable[[ts.Node, List[RsAttribute]], List[RsItem]]


class RustParser(AbstractSourceParser):
    """Parses Rust sources into the items relevant to type export."""

    extensions = (".rs",)

    def __init__(self, optional_wrapper: str = "Option") -> None:
        self.parser = _get_parser()
        self.optional_wrapper = optional_wrapper
        self.path: Optional[str] = None
        # Node-type -> handler mapping
        self._handlers: Dict[str, ItemHandler] = {
            "struct_item": self._handle_struct,
            "enum_item": self._handle_enum,
            "type_item": self._handle_type_alias,
            "mod_item": self._handle_mod,
            "use_declaration": self._handle_use,
        }

    def parse_source(
        self, source: Union[str, bytes], path: Optional[str] = None
    ) -> ParsedFile:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        self.path = path

        tree = self.parser.parse(source_bytes)
        root_node = tree.root_node
        if root_node.has_error:
            raise_syntax_error(root_node, path)

        items = self._process_items(root_node.children)
        logger.debug("Parsed source", path=path, items=len(items))
        return ParsedFile(path=path, items=items)

    def _process_items(self, nodes: List[ts.Node]) -> List[RsItem]:
        items: List[RsItem] = []
        attrs: List[RsAttribute] = []
        for node in nodes:
            if node.type == "attribute_item":
                attr = self._parse_attribute_item(node)
                if attr is not None:
                    attrs.append(attr)
                continue
            if node.type in _COMMENTS or not node.is_named:
                continue

            handler = self._handlers.get(node.type)
            if handler is not None:
                items.extend(handler(node, attrs))
            else:
                self._debug_unknown_node(node)
            attrs = []
        return items

    # Items
    def _handle_struct(self, node: ts.Node, attrs: List[RsAttribute]) -> List[RsItem]:
        name = get_node_text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        style, fields = self._parse_fields(body)
        return [
            RsStruct(
                name=name,
                generics=self._parse_generics(node),
                style=style,
                fields=fields,
                serde=container_from_attributes(attrs, self.optional_wrapper),
                derives=_derives(attrs),
            )
        ]

    def _handle_enum(self, node: ts.Node, attrs: List[RsAttribute]) -> List[RsItem]:
        name = get_node_text(node.child_by_field_name("name"))
        variants: List[RsVariant] = []
        body = node.child_by_field_name("body")
        if body is not None:
            pending: List[RsAttribute] = []
            for child in body.named_children:
                if child.type == "attribute_item":
                    attr = self._parse_attribute_item(child)
                    if attr is not None:
                        pending.append(attr)
                elif child.type == "enum_variant":
                    variants.append(self._parse_variant(child, pending))
                    pending = []
        return [
            RsEnum(
                name=name,
                generics=self._parse_generics(node),
                variants=tuple(variants),
                serde=container_from_attributes(attrs, self.optional_wrapper),
                derives=_derives(attrs),
            )
        ]

    def _handle_type_alias(
        self, node: ts.Node, attrs: List[RsAttribute]
    ) -> List[RsItem]:
        return [
            RsTypeAlias(
                name=get_node_text(node.child_by_field_name("name")),
                generics=self._parse_generics(node),
                ty=self._parse_type(node.child_by_field_name("type")),
            )
        ]

    def _handle_mod(self, node: ts.Node, attrs: List[RsAttribute]) -> List[RsItem]:
        name = get_node_text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        if body is None:
            return [RsMod(name=name)]
        return [RsMod(name=name, items=tuple(self._process_items(body.children)))]

    def _handle_use(self, node: ts.Node, attrs: List[RsAttribute]) -> List[RsItem]:
        argument = node.child_by_field_name("argument")
        return list(parse_use_tree(get_node_text(argument)))

    # Members
    def _parse_variant(self, node: ts.Node, attrs: List[RsAttribute]) -> RsVariant:
        style, fields = self._parse_fields(node.child_by_field_name("body"))
        return RsVariant(
            name=get_node_text(node.child_by_field_name("name")),
            style=style,
            fields=fields,
            serde=variant_from_attributes(attrs),
        )

    def _parse_fields(
        self, body: Optional[ts.Node]
    ) -> Tuple[FieldStyle, Tuple[RsField, ...]]:
        if body is None:
            return FieldStyle.UNIT, ()
        if body.type == "field_declaration_list":
            return FieldStyle.NAMED, tuple(self._parse_named_fields(body))
        if body.type == "ordered_field_declaration_list":
            return FieldStyle.UNNAMED, tuple(self._parse_unnamed_fields(body))
        return FieldStyle.UNIT, ()

    def _parse_named_fields(self, body: ts.Node) -> List[RsField]:
        fields: List[RsField] = []
        pending: List[RsAttribute] = []
        for child in body.named_children:
            if child.type == "attribute_item":
                attr = self._parse_attribute_item(child)
                if attr is not None:
                    pending.append(attr)
            elif child.type == "field_declaration":
                fields.append(
                    RsField(
                        name=get_node_text(child.child_by_field_name("name")),
                        ty=self._parse_type(child.child_by_field_name("type")),
                        serde=field_from_attributes(pending),
                    )
                )
                pending = []
        return fields

    def _parse_unnamed_fields(self, body: ts.Node) -> List[RsField]:
        type_spans = {(n.start_byte, n.end_byte) for n in body.children_by_field_name("type")}
        fields: List[RsField] = []
        pending: List[RsAttribute] = []
        for child in body.named_children:
            if child.type == "attribute_item":
                attr = self._parse_attribute_item(child)
                if attr is not None:
                    pending.append(attr)
            elif (child.start_byte, child.end_byte) in type_spans:
                fields.append(
                    RsField(ty=self._parse_type(child), serde=field_from_attributes(pending))
                )
                pending = []
        return fields

    def _parse_generics(self, node: ts.Node) -> Tuple[str, ...]:
        params = node.child_by_field_name("type_parameters")
        if params is None:
            return ()
        names: List[str] = []
        for child in params.named_children:
            name_node: Optional[ts.Node] = None
            if child.type == "type_identifier":
                name_node = child
            elif child.type == "constrained_type_parameter":
                name_node = child.child_by_field_name("left")
            elif child.type in ("optional_type_parameter", "type_parameter"):
                name_node = child.child_by_field_name("name")
            # lifetimes and const parameters are not part of the exported type
            if name_node is not None and name_node.type == "type_identifier":
                names.append(get_node_text(name_node))
        return tuple(names)

    # Types
    def _parse_type(self, node: Optional[ts.Node]) -> RsType:
        if node is None:
            return RsVerbatim(text="")
        kind = node.type

        if kind in ("primitive_type", "type_identifier", "scoped_type_identifier"):
            path = self._parse_path(node)
            if path is not None:
                return path
        elif kind == "generic_type":
            base = self._parse_path(node.child_by_field_name("type"))
            if base is not None:
                args = self._parse_type_arguments(node.child_by_field_name("type_arguments"))
                last = base.segments[-1]
                segments = base.segments[:-1] + (
                    RsPathSegment(ident=last.ident, args=args),
                )
                return RsPath(segments=segments)
        elif kind in ("reference_type", "pointer_type"):
            mutable = any(c.type == "mutable_specifier" for c in node.children)
            return RsReference(
                element=self._parse_type(node.child_by_field_name("type")),
                mutable=mutable,
                pointer=kind == "pointer_type",
            )
        elif kind == "array_type":
            element = self._parse_type(node.child_by_field_name("element"))
            length = node.child_by_field_name("length")
            if length is None:
                return RsSlice(element=element)
            return RsArray(element=element, length=get_node_text(length))
        elif kind == "tuple_type":
            return RsTuple(
                elements=tuple(
                    self._parse_type(c)
                    for c in node.named_children
                    if c.type not in _COMMENTS
                )
            )
        elif kind == "unit_type":
            return RsTuple()

        return RsVerbatim(text=get_node_text(node))

    def _parse_path(self, node: Optional[ts.Node]) -> Optional[RsPath]:
        text = re.sub(r"\s+", "", get_node_text(node))
        if not text or "<" in text:
            return None
        idents = [part for part in text.split("::") if part]
        if not idents:
            return None
        return RsPath(segments=tuple(RsPathSegment(ident=i) for i in idents))

    def _parse_type_arguments(self, node: Optional[ts.Node]) -> Tuple[RsType, ...]:
        if node is None:
            return ()
        return tuple(
            self._parse_type(c) for c in node.named_children if c.type not in _NON_TYPE_ARGS
        )

    # Attributes
    def _parse_attribute_item(self, node: ts.Node) -> Optional[RsAttribute]:
        attribute = next((c for c in node.named_children if c.type == "attribute"), None)
        if attribute is None:
            return None
        return parse_attribute(get_node_text(attribute))

    def _debug_unknown_node(self, node: ts.Node) -> None:
        logger.debug(
            "Ignoring Rust item",
            path=self.path,
            node_type=node.type,
            line=node.start_point[0] + 1,
        )


def _derives(attrs: List[RsAttribute]) -> Tuple[str, ...]:
    names: List[str] = []
    for attr in attrs:
        if attr.path == "derive":
            names.extend(meta.name.split("::")[-1] for meta in attr.args)
    return tuple(names)


# `use` trees
_USE_TOKEN_RE = re.compile(r"r#[A-Za-z_]\w*|[A-Za-z_]\w*|::|[{},*]")


def parse_use_tree(text: str) -> Tuple[RsUse, ...]:
    """
    Flatten a use tree into its leaves:
    `a::{b, c as d, e::*}` -> `a::b`, `a::c as d`, `a::e::*`.
    """
    tokens = _USE_TOKEN_RE.findall(text)
    if tokens and tokens[0] == "::":
        tokens = tokens[1:]
    uses, _ = _parse_use_subtree(tokens, 0, ())
    return tuple(uses)


def _parse_use_subtree(
    tokens: List[str], pos: int, prefix: Tuple[str, ...]
) -> Tuple[List[RsUse], int]:
    path = list(prefix)
    while pos < len(tokens):
        tok = tokens[pos]
        if tok == "{":
            pos += 1
            out: List[RsUse] = []
            while pos < len(tokens) and tokens[pos] != "}":
                if tokens[pos] == ",":
                    pos += 1
                    continue
                uses, pos = _parse_use_subtree(tokens, pos, tuple(path))
                out.extend(uses)
            return out, pos + 1
        if tok == "*":
            return [RsUse(path=tuple(path), glob=True)], pos + 1

        path.append(tok)
        pos += 1
        if pos < len(tokens) and tokens[pos] == "::":
            pos += 1
            continue

        alias: Optional[str] = None
        if pos + 1 < len(tokens) and tokens[pos] == "as":
            alias = tokens[pos + 1]
            pos += 2
        if alias == "_":
            # `use Trait as _;` brings no name into scope
            return [], pos
        if len(path) > 1 and path[-1] == "self":
            # `a::{self}` names the module `a` itself
            path.pop()
        return [RsUse(path=tuple(path), alias=alias)], pos
    return [], pos
