"""
Exceptions raised while turning source declarations into exported types.

Every failure of the core derives from ``TypeExportError``. Boundary I/O
errors (``OSError``, path-map validation errors) are never wrapped.
"""

from typing import Any, Optional


class TypeExportError(ValueError):
    """Base class for all export failures."""


class UnresolvableTypeError(TypeExportError):
    """No solver in the chain accepted the type expression."""

    def __init__(self, ty: Any):
        self.ty = ty
        super().__init__(f"No solver could resolve type `{ty}`")


class UnexpectedTypeError(TypeExportError):
    """A nested resolution produced a type the caller cannot embed."""

    def __init__(self, ts_type: Any, context: Optional[str] = None):
        self.ts_type = ts_type
        self.context = context
        msg = f"Unexpected type `{ts_type}`"
        if context:
            msg += f" ({context})"
        super().__init__(msg)


class MalformedContainerError(TypeExportError):
    """A known container was used with the wrong number of generic arguments."""

    def __init__(self, name: str, expected: str, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"`{name}` expects {expected} generic argument(s), got {got}"
        )


class ImportResolutionError(TypeExportError):
    """A referenced type name has no usable import record."""

    def __init__(self, ident: str, reason: str):
        self.ident = ident
        self.reason = reason
        super().__init__(f"Cannot resolve import for `{ident}`: {reason}")


class SerdeAttributeError(TypeExportError):
    """Serialization attributes that cannot be expressed in the target grammar."""


class SourceParseError(TypeExportError):
    """The source text could not be parsed."""

    def __init__(self, path: Optional[str], line: int, column: int, snippet: str = ""):
        self.path = path
        self.line = line
        self.column = column
        where = f"{path}:" if path else ""
        msg = f"Syntax error at {where}{line}:{column}"
        if snippet:
            msg += f" near `{snippet}`"
        super().__init__(msg)
