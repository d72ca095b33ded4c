from typing import Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict

from typebinder.errors import ImportResolutionError
from typebinder.models import (
    ModulePath,
    RsEnum,
    RsItem,
    RsMod,
    RsPath,
    RsStruct,
    RsTypeAlias,
    RsUse,
    display_module_path,
)


class ImportEntry(BaseModel):
    """A type that a module references from another module."""

    model_config = ConfigDict(frozen=True)

    module: ModulePath
    ident: str
    alias: Optional[str] = None
    external: bool = False  # path rooted in another crate

    @property
    def local_name(self) -> str:
        return self.alias or self.ident


class ImportContext:
    """
    Per-module record of the type names declared locally and the names
    brought in by `use` declarations. Built once, before any resolution.
    """

    def __init__(self, current_path: ModulePath = ()) -> None:
        self.current_path: ModulePath = current_path
        self.scoped: Set[str] = set()
        self.modules: Set[str] = set()
        self.imported: Dict[str, ImportEntry] = {}
        self.globs: List[Tuple[ModulePath, bool]] = []

    @classmethod
    def from_items(
        cls, current_path: ModulePath, items: Iterable[RsItem]
    ) -> "ImportContext":
        items = list(items)
        ctx = cls(current_path)
        ctx.parse_scoped(items)
        ctx.parse_imported(items)
        return ctx

    def parse_scoped(self, items: Iterable[RsItem]) -> None:
        for item in items:
            if isinstance(item, (RsStruct, RsEnum, RsTypeAlias)):
                self.scoped.add(item.name)
            elif isinstance(item, RsMod):
                self.modules.add(item.name)

    def parse_imported(self, items: Iterable[RsItem]) -> None:
        for item in items:
            if not isinstance(item, RsUse):
                continue
            if item.glob:
                self.globs.append(self.resolve_module_path(item.path))
                continue
            ident = item.path[-1]
            if ident == "self":
                # `use a::b::{self}` imports a module, not a type
                continue
            module, external = self.resolve_module_path(item.path[:-1])
            alias = item.alias if item.alias and item.alias != ident else None
            self.imported[item.local_name] = ImportEntry(
                module=module, ident=ident, alias=alias, external=external
            )

    def is_scoped(self, ident: str) -> bool:
        return ident in self.scoped

    def canonical_path(
        self, path: RsPath, generics: Iterable[str] = ()
    ) -> Optional[str]:
        """
        Spell *path* the way its defining crate names it, seeing through
        `use ... as` aliases: with `use std::collections::HashMap as Map;`,
        `Map` -> `std::collections::HashMap`. Bare names that were never
        imported are returned as is.

        Returns None for types of this crate and for generic parameters in
        scope, which no built-in catalog may claim.
        """
        idents = [s.ident for s in path.segments]
        if len(idents) == 1:
            name = idents[0]
            if name in generics or self.is_scoped(name):
                return None
            entry = self.imported.get(name)
            if entry is None:
                return name
            if not entry.external:
                return None
            return "::".join(entry.module + (entry.ident,))

        module, external = self.resolve_module_path(idents[:-1])
        if not external:
            return None
        return "::".join(module + (idents[-1],))

    def resolve_module_path(self, segments: Iterable[str]) -> Tuple[ModulePath, bool]:
        """
        Turn a (possibly relative) module path into an absolute one.
        Returns the path and whether it points into another crate.
        """
        segs = list(segments)
        if not segs:
            return self.current_path, False

        head = segs[0]
        if head == "crate":
            return tuple(segs[1:]), False
        if head == "self":
            return self.current_path + tuple(segs[1:]), False
        if head == "super":
            base = list(self.current_path)
            i = 0
            while i < len(segs) and segs[i] == "super":
                if not base:
                    raise ImportResolutionError(
                        "::".join(segs),
                        f"`super` used at the crate root ({display_module_path(self.current_path)})",
                    )
                base.pop()
                i += 1
            return tuple(base) + tuple(segs[i:]), False
        if head in self.modules:
            return self.current_path + tuple(segs), False
        if head in self.imported:
            entry = self.imported[head]
            return entry.module + (entry.ident,) + tuple(segs[1:]), entry.external
        return tuple(segs), True

    def resolve(self, path: RsPath) -> Optional[ImportEntry]:
        """
        Return the import entry required to reference *path* from this module,
        or None when the type is declared here.
        """
        idents = [s.ident for s in path.segments]
        name = idents[-1]

        if len(idents) == 1:
            if name in self.scoped:
                return None
            if name in self.imported:
                return self.imported[name]
            if len(self.globs) == 1:
                module, external = self.globs[0]
                return ImportEntry(module=module, ident=name, external=external)
            if not self.globs:
                raise ImportResolutionError(
                    name, "not declared in this module and never imported"
                )
            raise ImportResolutionError(
                name, f"ambiguous between {len(self.globs)} glob imports"
            )

        module, external = self.resolve_module_path(idents[:-1])
        if module == self.current_path and name in self.scoped:
            return None
        return ImportEntry(module=module, ident=name, external=external)
