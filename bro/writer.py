"""
RecordWriter - Writes bundled records to an output directory.

Each record is written to ``<out_dir>/<path relative to its base>``,
creating parent directories as needed.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bro.records import FileRecord


logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Result of a write operation.

    Attributes:
        success: Whether the write succeeded
        output_path: Path where content was written
        overwritten: Whether an existing file was overwritten
        error: Error message if write failed
    """
    success: bool
    output_path: str
    overwritten: bool = False
    error: Optional[str] = None


class RecordWriter:
    """Writes record contents below an output directory.

    Example:
        >>> writer = RecordWriter("dist")
        >>> result = writer.write(record)
        >>> result.output_path
        'dist/main.js'
    """

    def __init__(self, out_dir: str, force_overwrite: bool = True):
        self.out_dir = Path(out_dir)
        self.force_overwrite = force_overwrite

    def resolve_output_path(self, record: FileRecord) -> Path:
        return self.out_dir / record.relative

    def is_inside_out_dir(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.out_dir.resolve())
        except ValueError:
            return False
        return True

    def write(self, record: FileRecord) -> WriteResult:
        """Write the record's contents.

        Args:
            record: Bundled record

        Returns:
            WriteResult describing the outcome
        """
        output_path = self.resolve_output_path(record)

        if record.contents is None:
            return WriteResult(
                success=False,
                output_path=str(output_path),
                error="Record has no contents",
            )

        if not self.is_inside_out_dir(output_path):
            return WriteResult(
                success=False,
                output_path=str(output_path),
                error=f"Output path escapes {self.out_dir}: check the base directory",
            )

        overwritten = output_path.exists()
        if overwritten and not self.force_overwrite:
            return WriteResult(
                success=False,
                output_path=str(output_path),
                error=f"File exists: {output_path}",
            )

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(record.contents)
        except OSError as e:
            logger.error(f"Failed to write {output_path}: {e}")
            return WriteResult(success=False, output_path=str(output_path), error=str(e))

        logger.debug(f"Wrote {len(record.contents)} bytes to {output_path}")
        return WriteResult(success=True, output_path=str(output_path), overwritten=overwritten)
