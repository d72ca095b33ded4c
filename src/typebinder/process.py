from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from typebinder.exporter import ExporterContext
from typebinder.imports import ImportContext, ImportEntry
from typebinder.logger import logger
from typebinder.models import (
    ModulePath,
    RsEnum,
    RsItem,
    RsMod,
    RsStruct,
    RsTypeAlias,
    display_module_path,
)
from typebinder.solving import ImportEntries, Solved, TypeSolvingContext
from typebinder.ts.export import ExportStatement


class ModuleLookup(ABC):
    """Supplies the items of a module declared without a body (`mod name;`)."""

    @abstractmethod
    def resolve(self, path: ModulePath) -> Optional[List[RsItem]]:
        """Return the module's items, or None to leave the module out."""
        ...


@dataclass
class ProcessModuleResultData:
    path: ModulePath
    statements: List[ExportStatement] = field(default_factory=list)
    import_entries: List[ImportEntry] = field(default_factory=list)


@dataclass
class ProcessModuleResult:
    data: ProcessModuleResultData
    children: List["ProcessModuleResult"] = field(default_factory=list)


class ModuleExporter(ABC):
    """Receives the export statements of each module."""

    @abstractmethod
    def export_module(self, process_result: ProcessModuleResultData) -> None: ...


class ProcessModule:
    """
    Resolves the declarations of one module, recursing into nested modules.

    Nested modules declared inline are processed directly; bodiless ones are
    requested from the lookup and silently dropped when it declines. Own
    declarations are emitted in source order.
    """

    def __init__(
        self,
        current_path: ModulePath,
        items: Iterable[RsItem],
        require_derive: Optional[str] = None,
    ) -> None:
        self.current_path: ModulePath = tuple(current_path)
        self.items: List[RsItem] = list(items)
        self.require_derive = require_derive
        self.import_context = ImportContext.from_items(self.current_path, self.items)

    def launch(
        self, lookup: ModuleLookup, solving_context: TypeSolvingContext
    ) -> ProcessModuleResult:
        logger.debug(
            "Processing module",
            path=display_module_path(self.current_path),
            items=len(self.items),
        )

        declarations: List[Tuple[int, Union[RsStruct, RsEnum]]] = []
        type_aliases: List[Tuple[int, RsTypeAlias]] = []
        mod_declarations: List[RsMod] = []

        for index, item in enumerate(self.items):
            if isinstance(item, (RsStruct, RsEnum)):
                if self._is_exported(item):
                    declarations.append((index, item))
            elif isinstance(item, RsTypeAlias):
                type_aliases.append((index, item))
            elif isinstance(item, RsMod):
                mod_declarations.append(item)

        children: List[ProcessModuleResult] = []
        for item_mod in mod_declarations:
            child = self._spawn(item_mod, lookup)
            if child is not None:
                children.append(child.launch(lookup, solving_context))

        exporter = ExporterContext(solving_context, self.import_context)

        statements: List[Tuple[int, Solved[ExportStatement]]] = [
            (index, exporter.export_statements_from_type_alias(item))
            for index, item in type_aliases
        ]
        statements.extend(
            (index, exporter.export_declaration(item)) for index, item in declarations
        )
        statements.sort(key=lambda pair: pair[0])

        import_entries = ImportEntries()
        for _, solved in statements:
            import_entries.extend(solved.import_entries)

        return ProcessModuleResult(
            data=ProcessModuleResultData(
                path=self.current_path,
                statements=[solved.inner for _, solved in statements],
                import_entries=list(import_entries),
            ),
            children=children,
        )

    def _spawn(self, item_mod: RsMod, lookup: ModuleLookup) -> Optional["ProcessModule"]:
        path = self.current_path + (item_mod.name,)
        if item_mod.items is not None:
            return ProcessModule(path, item_mod.items, self.require_derive)

        items = lookup.resolve(path)
        if items is None:
            logger.info("Module not found; skipping", path=display_module_path(path))
            return None
        return ProcessModule(path, items, self.require_derive)

    def _is_exported(self, item: Union[RsStruct, RsEnum]) -> bool:
        if self.require_derive is None:
            return True
        return self.require_derive in item.derives


def flatten_post_order(result: ProcessModuleResult) -> List[ProcessModuleResultData]:
    """Every child's data precedes its parent's; siblings keep their order."""
    out: List[ProcessModuleResultData] = []

    def _walk(node: ProcessModuleResult) -> None:
        for child in node.children:
            _walk(child)
        out.append(node.data)

    _walk(result)
    return out


class Process:
    """Runs the module tree walk from the crate root and feeds the exporter."""

    def __init__(
        self,
        items: Sequence[RsItem],
        lookup: ModuleLookup,
        exporter: ModuleExporter,
        require_derive: Optional[str] = None,
    ) -> None:
        self.items = list(items)
        self.lookup = lookup
        self.exporter = exporter
        self.require_derive = require_derive

    def launch(self, solving_context: TypeSolvingContext) -> List[ProcessModuleResultData]:
        root = ProcessModule((), self.items, self.require_derive)
        result = root.launch(self.lookup, solving_context)

        all_results = flatten_post_order(result)
        for result_data in all_results:
            self.exporter.export_module(result_data)
        return all_results
