"""
Bundler Factory

Turns a FileRecord into a ready-to-run bundler session:
- null records are bundled from their filesystem path
- records with contents are streamed to the bundler, resolved against the
  record's base directory
- in watch mode the session is wrapped in a WatchingBundler; a streamed
  source is reloaded from the record's file whenever that file changes
"""

import io
import logging
import os
from typing import Iterable, Optional

from bro.bundlers.base import Bundler, BundlerClass
from bro.bundlers.command import CommandBundler
from bro.bundlers.watch import WatchingBundler
from bro.config import BroOptions
from bro.records import FileRecord


logger = logging.getLogger(__name__)


class RecordSource(io.BytesIO):
    """In-memory entry stream for a record that also exists on disk.

    Starts out with the record's contents as they arrived in the pipeline.
    ``reload()`` replaces them with the current contents of the file.
    """

    def __init__(self, path: str, contents: bytes):
        super().__init__(contents)
        self.path = os.path.abspath(path)

    def reload(self) -> bool:
        """Re-read the source file.

        Returns:
            True if the file was read; False keeps the previous source
        """
        try:
            with open(self.path, "rb") as f:
                contents = f.read()
        except OSError as e:
            logger.warning(f"Could not reload {self.path}: {e}")
            return False

        self.seek(0)
        self.truncate()
        self.write(contents)
        self.seek(0)
        logger.debug(f"Reloaded {len(contents)} bytes from {self.path}")
        return True

    def reload_if_changed(self, paths: Iterable[str]) -> None:
        if self.path in paths:
            self.reload()


class BundlerFactory:
    """Factory for creating bundler sessions from file records.

    Example:
        >>> factory = BundlerFactory()
        >>> session = factory.create(BroOptions(), FileRecord.from_path("src/main.js"))
        >>> output = b"".join(session.bundle())
    """

    def __init__(self, bundler_class: Optional[BundlerClass] = None, watch_delay: float = 0.1):
        """Initialize the factory.

        Args:
            bundler_class: Callable building a session from ``entries`` and
                ``basedir`` (default: CommandBundler)
            watch_delay: Minimum seconds between update events of watch sessions
        """
        self.bundler_class = bundler_class or CommandBundler
        self.watch_delay = watch_delay

    def create(self, options: BroOptions, record: FileRecord) -> Bundler:
        """Create an unstarted session for the record.

        Construction never fails for a bad entry; problems surface when the
        session is bundled.

        Args:
            options: Resolved stage options
            record: Record to bundle

        Returns:
            Bundler session, a WatchingBundler when ``options.watch`` is set
        """
        if record.is_null():
            entries = record.path
            basedir = None
        else:
            entries = RecordSource(record.path, record.contents)
            basedir = record.base

        bundler = self.bundler_class(entries=entries, basedir=basedir)
        logger.debug(f"Created bundler for {record!r}: {bundler!r}")

        if options.watch:
            bundler = WatchingBundler(bundler, delay=self.watch_delay)
            if not record.is_null():
                # Subscribed before the stage's rebundle handler, so the
                # source is fresh when the next cycle reads it
                bundler.add_dependency(entries.path)
                bundler.on_update.subscribe(entries.reload_if_changed)

        return bundler
