"""
File records flowing through the bundling pipeline.

A FileRecord is one logical file: where it lives, the base directory it is
resolved against, and its (possibly absent) contents. The bundle cycle
replaces ``contents`` in place with the bundled output.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


PathLike = Union[str, Path]


@dataclass(eq=False)
class FileRecord:
    """One file travelling through the pipeline.

    Attributes:
        path: Absolute filesystem location of the file
        base: Base directory used to resolve relative dependencies
        contents: File bytes, or None when the record is only a path reference
    """
    path: str
    base: str
    contents: Optional[bytes] = None

    def __post_init__(self):
        self.path = os.fspath(self.path)
        self.base = os.fspath(self.base)

    @classmethod
    def from_path(
        cls,
        path: PathLike,
        base: Optional[PathLike] = None,
        read: bool = True,
    ) -> "FileRecord":
        """Create a record for a file on disk.

        Args:
            path: File to reference
            base: Base directory (defaults to the file's parent directory)
            read: Load the file contents; when False the record is a null record

        Returns:
            FileRecord for the file

        Raises:
            FileNotFoundError: If read is True and the file does not exist
        """
        file_path = Path(path).resolve()
        base_dir = Path(base).resolve() if base is not None else file_path.parent
        contents = file_path.read_bytes() if read else None
        return cls(path=str(file_path), base=str(base_dir), contents=contents)

    def is_null(self) -> bool:
        """True when the record carries no contents, only a path."""
        return self.contents is None

    def is_virtual(self) -> bool:
        """True when the contents live in memory and must be streamed."""
        return self.contents is not None

    @property
    def relative(self) -> str:
        """Path of the record relative to its base directory."""
        return os.path.relpath(self.path, self.base)

    def __repr__(self) -> str:
        size = "null" if self.contents is None else f"{len(self.contents)} bytes"
        return f"<FileRecord {self.relative!r} <{size}>>"
