import json
from typing import Optional, Tuple

from typebinder.ts.types import TsNode, TsType


class TypeParameter(TsNode):
    name: str
    constraint: Optional[TsType] = None

    def __str__(self) -> str:
        if self.constraint is None:
            return self.name
        return f"{self.name} extends {self.constraint}"


def render_type_parameters(parameters: Tuple[TypeParameter, ...]) -> str:
    if not parameters:
        return ""
    return f"<{', '.join(str(p) for p in parameters)}>"


class ExportStatement(TsNode):
    """One exported, named declaration: `export type Name<P> = T;`."""

    name: str
    parameters: Tuple[TypeParameter, ...] = ()
    type: TsType

    def __str__(self) -> str:
        params = render_type_parameters(self.parameters)
        return f"export type {self.name}{params} = {self.type};"


class ImportSpecifier(TsNode):
    name: str
    alias: Optional[str] = None

    def __str__(self) -> str:
        if self.alias is None or self.alias == self.name:
            return self.name
        return f"{self.name} as {self.alias}"


class ImportStatement(TsNode):
    """`import type { A, B as C } from "./module";`"""

    specifiers: Tuple[ImportSpecifier, ...]
    source: str

    def __str__(self) -> str:
        names = ", ".join(str(s) for s in self.specifiers)
        return f"import type {{ {names} }} from {json.dumps(self.source)};"
