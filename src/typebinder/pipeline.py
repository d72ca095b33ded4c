from typing import List, Optional, Union

from typebinder.exporters import FileExporter, MemoryExporter, ModuleLayout, StdoutExporter
from typebinder.lang.rust import RustParser
from typebinder.logger import logger
from typebinder.lookup import FileSystemLookup, NullLookup
from typebinder.path_mapper import PathMapper
from typebinder.process import (
    ModuleExporter,
    ModuleLookup,
    Process,
    ProcessModuleResultData,
)
from typebinder.settings import ExportSettings
from typebinder.solvers import create_solving_context
from typebinder.solving import TypeSolvingContext


def _require_derive(settings: ExportSettings) -> Optional[str]:
    return "Serialize" if settings.require_serialize_derive else None


def export_source(
    content: Union[str, bytes],
    lookup: Optional[ModuleLookup] = None,
    exporter: Optional[ModuleExporter] = None,
    settings: Optional[ExportSettings] = None,
    solving_context: Optional[TypeSolvingContext] = None,
) -> List[ProcessModuleResultData]:
    """
    Export the declarations of in-memory source text. Bodiless modules are
    declined unless a lookup is given; results are kept in memory unless an
    exporter is given.
    """
    settings = settings or ExportSettings()
    parser = RustParser(optional_wrapper=settings.optional_wrapper)
    parsed = parser.parse_source(content)

    process = Process(
        parsed.items,
        lookup or NullLookup(),
        exporter or MemoryExporter(),
        require_derive=_require_derive(settings),
    )
    return process.launch(solving_context or create_solving_context())


def export_file(settings: ExportSettings) -> List[ProcessModuleResultData]:
    """Export `settings.input_file` and the module files it declares."""
    if not settings.input_file:
        raise ValueError("input_file must be set to export a file")

    parser = RustParser(optional_wrapper=settings.optional_wrapper)
    parsed = parser.parse_file(settings.input_file)

    lookup: ModuleLookup
    if settings.follow_modules:
        lookup = FileSystemLookup(settings.input_file, parser)
    else:
        lookup = NullLookup()

    path_mapper = (
        PathMapper.load_from(settings.path_map_file)
        if settings.path_map_file
        else PathMapper()
    )

    exporter: ModuleExporter
    if settings.output_dir:
        exporter = FileExporter(
            settings.output_dir, path_mapper, extension=settings.file_extension
        )
    else:
        exporter = StdoutExporter(ModuleLayout(path_mapper, settings.file_extension))

    logger.debug(
        "Exporting file",
        input_file=settings.input_file,
        output_dir=settings.output_dir,
        follow_modules=settings.follow_modules,
    )
    process = Process(
        parsed.items, lookup, exporter, require_derive=_require_derive(settings)
    )
    return process.launch(create_solving_context())
