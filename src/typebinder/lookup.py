from pathlib import Path
from typing import Callable, List, Optional, Union

from typebinder.logger import logger
from typebinder.models import ModulePath, RsItem, display_module_path
from typebinder.parsers import AbstractSourceParser
from typebinder.process import ModuleLookup


class NullLookup(ModuleLookup):
    """Declines every module: only inline modules are processed."""

    def resolve(self, path: ModulePath) -> Optional[List[RsItem]]:
        return None


class FnLookup(ModuleLookup):
    def __init__(self, fn: Callable[[ModulePath], Optional[List[RsItem]]]) -> None:
        self.fn = fn

    def resolve(self, path: ModulePath) -> Optional[List[RsItem]]:
        return self.fn(path)


class FileSystemLookup(ModuleLookup):
    """
    Loads bodiless modules from disk, next to the root file:
    `a::b` is read from `a/b.rs` or `a/b/mod.rs`.

    A missing file declines the module. A file that does not parse is fatal.
    """

    def __init__(
        self, root_file: Union[str, Path], parser: AbstractSourceParser
    ) -> None:
        self.root_dir = Path(root_file).resolve().parent
        self.parser = parser

    def candidates(self, path: ModulePath) -> List[Path]:
        base = self.root_dir.joinpath(*path)
        out = [base.with_name(base.name + ext) for ext in self.parser.extensions]
        out.extend(base / ("mod" + ext) for ext in self.parser.extensions)
        return out

    def resolve(self, path: ModulePath) -> Optional[List[RsItem]]:
        if not path:
            return None
        for candidate in self.candidates(path):
            if candidate.is_file():
                logger.debug(
                    "Loading module",
                    path=display_module_path(path),
                    file=str(candidate),
                )
                return list(self.parser.parse_file(candidate).items)
        return None
