from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import TypeAdapter

_MAPPING = TypeAdapter(Dict[str, str])


class PathMapper:
    """Maps module paths (`api::models`) to output locations."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        self.mapping: Dict[str, str] = dict(mapping or {})

    def add_mapping(self, path: str, output: str) -> None:
        self.mapping[path] = output

    def map(self, path: str) -> Optional[str]:
        return self.mapping.get(path)

    @classmethod
    def load_from(cls, path: Union[str, Path]) -> "PathMapper":
        """Load a JSON object of string to string entries."""
        content = Path(path).read_text(encoding="utf-8")
        return cls(_MAPPING.validate_json(content))
