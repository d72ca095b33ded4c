from typebinder.errors import TypeExportError
from typebinder.pipeline import export_file, export_source
from typebinder.settings import ExportSettings, load_settings

__all__ = [
    "ExportSettings",
    "TypeExportError",
    "export_file",
    "export_source",
    "load_settings",
]
