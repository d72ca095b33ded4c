"""
Sinks receiving the per-module results of an export run.
"""

import posixpath
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Union

import click

from typebinder.imports import ImportEntry
from typebinder.logger import logger
from typebinder.models import ModulePath, display_module_path
from typebinder.path_mapper import PathMapper
from typebinder.process import ModuleExporter, ProcessModuleResultData
from typebinder.ts.export import ImportSpecifier, ImportStatement

INDEX_NAME = "index"


class ModuleLayout:
    """Computes where each module's generated file lives."""

    def __init__(
        self, path_mapper: Optional[PathMapper] = None, extension: str = ".ts"
    ) -> None:
        self.path_mapper = path_mapper or PathMapper()
        self.extension = extension

    def location(self, path: ModulePath) -> PurePosixPath:
        """`()` -> `index.ts`, `("a", "b")` -> `a/b.ts`, unless remapped."""
        mapped = self.path_mapper.map(display_module_path(path))
        if mapped is not None:
            location = PurePosixPath(mapped)
            if not location.suffix:
                location = location.with_suffix(self.extension)
            return location
        if not path:
            return PurePosixPath(INDEX_NAME + self.extension)
        return PurePosixPath(*path[:-1], path[-1] + self.extension)

    def is_mapped(self, path: ModulePath) -> bool:
        return self.path_mapper.map(display_module_path(path)) is not None

    def import_specifier(self, source: ModulePath, target: ModulePath) -> str:
        """Relative module specifier used by *source* to import from *target*."""
        source_dir = self.location(source).parent
        target_loc = str(self.location(target))
        if target_loc.endswith(self.extension):
            target_loc = target_loc[: -len(self.extension)]
        else:
            target_loc = str(PurePosixPath(target_loc).with_suffix(""))
        rel = posixpath.relpath(target_loc, str(source_dir))
        if not rel.startswith("."):
            rel = "./" + rel
        return rel


def import_statements(
    data: ProcessModuleResultData, layout: ModuleLayout
) -> List[ImportStatement]:
    """
    Group the module's import entries per source module, in first-seen order.
    Types of other crates are only imported when the path map places them.
    """
    grouped: Dict[ModulePath, List[ImportEntry]] = {}
    for entry in data.import_entries:
        if entry.module == data.path:
            continue
        if entry.external and not layout.is_mapped(entry.module):
            logger.warning(
                "External type has no mapped location; import left out",
                path=display_module_path(data.path),
                module=display_module_path(entry.module),
                ident=entry.ident,
            )
            continue
        grouped.setdefault(entry.module, []).append(entry)

    statements = []
    for module, entries in grouped.items():
        specifiers = tuple(
            ImportSpecifier(name=entry.ident, alias=entry.alias) for entry in entries
        )
        statements.append(
            ImportStatement(
                specifiers=specifiers,
                source=layout.import_specifier(data.path, module),
            )
        )
    return statements


def render_module(data: ProcessModuleResultData, layout: ModuleLayout) -> str:
    blocks: List[str] = []
    imports = import_statements(data, layout)
    if imports:
        blocks.append("\n".join(str(s) for s in imports))
    blocks.extend(str(s) for s in data.statements)
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


class MemoryExporter(ModuleExporter):
    """Keeps every module result in memory."""

    def __init__(self) -> None:
        self.results: List[ProcessModuleResultData] = []

    def export_module(self, process_result: ProcessModuleResultData) -> None:
        self.results.append(process_result)

    def statements_by_module(self) -> Dict[str, List[str]]:
        return {
            display_module_path(r.path): [str(s) for s in r.statements]
            for r in self.results
        }


class StdoutExporter(ModuleExporter):
    def __init__(self, layout: Optional[ModuleLayout] = None) -> None:
        self.layout = layout or ModuleLayout()

    def export_module(self, process_result: ProcessModuleResultData) -> None:
        click.echo(f"// {display_module_path(process_result.path)}")
        click.echo(render_module(process_result, self.layout))


class FileExporter(ModuleExporter):
    """Writes one file per module that has statements."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        path_mapper: Optional[PathMapper] = None,
        extension: str = ".ts",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.layout = ModuleLayout(path_mapper, extension)
        self.written: List[Path] = []

    def export_module(self, process_result: ProcessModuleResultData) -> None:
        if not process_result.statements:
            logger.debug(
                "Module has no statements; not writing",
                path=display_module_path(process_result.path),
            )
            return

        target = self.output_dir / Path(self.layout.location(process_result.path))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_module(process_result, self.layout), encoding="utf-8")
        self.written.append(target)
        logger.info(
            "Wrote module",
            path=display_module_path(process_result.path),
            file=str(target),
            statements=len(process_result.statements),
        )
