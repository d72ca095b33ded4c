import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from typebinder.errors import SourceParseError
from typebinder.logger import logger
from typebinder.models import RsAttribute, RsItem, RsMeta


# Parser-specific data structures
class ParsedFile(BaseModel):
    path: Optional[str] = None  # None for in-memory sources
    items: List[RsItem] = Field(default_factory=list)


# Abstract base parser class
class AbstractSourceParser(ABC):
    """
    Abstract base class for source parsers producing the source AST.
    """

    extensions: Tuple[str, ...]

    @abstractmethod
    def parse_source(
        self, source: Union[str, bytes], path: Optional[str] = None
    ) -> ParsedFile:
        """
        Parse *source* into items. *path* is only used for error reporting.
        Raises ``SourceParseError`` on malformed input.
        """
        ...

    def parse_file(self, path: Union[str, Path]) -> ParsedFile:
        with open(path, "rb") as file:
            source_bytes = file.read()
        return self.parse_source(source_bytes, path=str(path))


# Helpers
def get_node_text(node) -> str:
    """
    Get text of the tree sitter node
    """
    if not node or not node.text:
        return ""

    return node.text.decode("utf-8")


def find_error_node(node):
    """Return the first ERROR or MISSING node under *node*, depth first."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = find_error_node(child)
            if found is not None:
                return found
    return None


def raise_syntax_error(root_node, path: Optional[str]) -> None:
    error_node = find_error_node(root_node) or root_node
    line, column = error_node.start_point
    snippet = get_node_text(error_node).splitlines()[:1]
    logger.error(
        "Failed to parse source",
        path=path,
        line=line + 1,
        column=column + 1,
        node_type=error_node.type,
    )
    raise SourceParseError(path, line + 1, column + 1, snippet[0] if snippet else "")


# Attribute meta lists: `serde(rename_all = "camelCase", tag = "type")`
_META_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<str>"(?:[^"\\]|\\.)*")
      | (?P<path>(?:::)?[A-Za-z_][A-Za-z0-9_]*(?:\s*::\s*[A-Za-z_][A-Za-z0-9_]*)*)
      | (?P<punct>[=(),\[\]{}])
      | (?P<other>[^\s=(),\[\]{}"]+)
    )""",
    re.VERBOSE,
)


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def tokenize_meta(text: str) -> List[Tuple[str, str]]:
    tokens: List[Tuple[str, str]] = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        match = _META_TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            break
        pos = match.end()
        kind = match.lastgroup
        if kind is None:
            continue
        value = match.group(kind)
        if kind == "path":
            value = re.sub(r"\s+", "", value).lstrip(":")
        tokens.append((kind, value))
    return tokens


class _MetaReader:
    def __init__(self, tokens: List[Tuple[str, str]]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[Tuple[str, str]]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def next(self) -> Tuple[str, str]:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def read_list(self, closing: Optional[str] = None) -> Tuple[RsMeta, ...]:
        metas: List[RsMeta] = []
        while self.peek() is not None:
            tok = self.peek()
            if closing is not None and tok == ("punct", closing):
                self.next()
                break
            if tok == ("punct", ","):
                self.next()
                continue
            meta = self.read_meta()
            if meta is not None:
                metas.append(meta)
        return tuple(metas)

    def read_meta(self) -> Optional[RsMeta]:
        kind, value = self.next()
        if kind != "path":
            # literals and stray punctuation carry no meta name
            if (kind, value) in (("punct", "("), ("punct", "["), ("punct", "{")):
                self.skip_group(value)
            return None

        tok = self.peek()
        if tok == ("punct", "="):
            self.next()
            if self.peek() is None:
                return RsMeta(name=value)
            lit_kind, lit = self.next()
            return RsMeta(name=value, value=_unquote(lit) if lit_kind == "str" else lit)
        if tok == ("punct", "("):
            self.next()
            return RsMeta(name=value, nested=self.read_list(")"))
        return RsMeta(name=value)

    def skip_group(self, opening: str) -> None:
        closing = {"(": ")", "[": "]", "{": "}"}[opening]
        depth = 1
        while self.peek() is not None and depth:
            _, value = self.next()
            if value == opening:
                depth += 1
            elif value == closing:
                depth -= 1


def parse_meta_list(text: str) -> Tuple[RsMeta, ...]:
    """Parse a comma separated meta list, e.g. `a, b = "x", c(d)`."""
    return _MetaReader(tokenize_meta(text)).read_list()


def parse_attribute(text: str) -> Optional[RsAttribute]:
    """Parse the inside of `#[...]`, e.g. `serde(rename = "id")`."""
    metas = parse_meta_list(text)
    if not metas:
        return None
    meta = metas[0]
    return RsAttribute(path=meta.name, args=meta.nested)
