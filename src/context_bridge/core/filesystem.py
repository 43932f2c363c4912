"""
File system utility shared by all builder and converter strategies.

Strategies receive an instance instead of touching pathlib directly, so tests
can swap in a failing or recording double.
"""

import json
from pathlib import Path
from typing import Any, List, Union

PathLike = Union[str, Path]


class FileSystemUtility:
    def resolve_path(self, path: PathLike) -> Path:
        """Expand a leading ~ and return a Path."""
        return Path(path).expanduser()

    def exists(self, path: PathLike) -> bool:
        return self.resolve_path(path).exists()

    def is_directory(self, path: PathLike) -> bool:
        return self.resolve_path(path).is_dir()

    def read_file(self, path: PathLike) -> str:
        return self.resolve_path(path).read_text(encoding="utf-8")

    def write_file(self, path: PathLike, content: str) -> None:
        target = self.resolve_path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def read_json(self, path: PathLike) -> Any:
        return json.loads(self.read_file(path))

    def write_json(self, path: PathLike, data: Any) -> None:
        self.write_file(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")

    def read_directory(self, path: PathLike) -> List[str]:
        """Entry names sorted by name; empty when the directory is missing."""
        target = self.resolve_path(path)
        if not target.is_dir():
            return []
        return sorted(entry.name for entry in target.iterdir())

    def ensure_directory(self, path: PathLike) -> None:
        self.resolve_path(path).mkdir(parents=True, exist_ok=True)
