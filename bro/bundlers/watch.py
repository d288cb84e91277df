"""
Watching Bundler

Decorates a bundler session with incremental rebundling support. The wrapped
session keeps the same ``bundle()`` contract; in addition it exposes an
``update`` event, fired when a watched dependency changes, and a ``log``
event, fired after every completed bundle with a size/timing summary.

Change detection is poll based: the hosting loop (or a test) calls
``poll()``, which compares modification times of the watched files.
"""

import logging
import os
import time
from typing import Dict, Iterable, Iterator, List, Optional

from bro.bundlers.base import Bundler
from bro.events import EventHook


logger = logging.getLogger(__name__)


class WatchingBundler:
    """Watch-capable decorator around a bundler session.

    Example:
        >>> session = WatchingBundler(CommandBundler("/src/main.js"))
        >>> session.on_update.subscribe(lambda paths: rebundle())
        >>> session.on_log.subscribe(print)
        >>> b"".join(session.bundle())
        >>> session.poll()  # fires update if /src/main.js changed
    """

    def __init__(self, bundler: Bundler, delay: float = 0.1):
        """Initialize the watcher.

        Args:
            bundler: Session to decorate
            delay: Minimum seconds between two update events
        """
        self.bundler = bundler
        self.delay = delay
        self.closed = False

        self.on_update = EventHook("update")
        self.on_log = EventHook("log")

        self._extra_dependencies: List[str] = []
        self._mtimes: Dict[str, Optional[float]] = {}
        self._last_update = 0.0

    def bundle(self) -> Iterator[bytes]:
        """Run the wrapped bundler, then emit a log event with a summary."""
        start_time = time.time()
        size = 0
        for chunk in self.bundler.bundle():
            size += len(chunk)
            yield chunk

        self._snapshot()
        elapsed = time.time() - start_time
        self.on_log.emit(f"{size} bytes written ({elapsed:.2f} seconds)")

    def dependencies(self) -> List[str]:
        paths = list(self.bundler.dependencies())
        for path in self._extra_dependencies:
            if path not in paths:
                paths.append(path)
        return paths

    def add_dependency(self, path: str) -> None:
        """Watch an additional file."""
        path = os.path.abspath(path)
        if path not in self._extra_dependencies:
            self._extra_dependencies.append(path)
            self._mtimes[path] = self._mtime(path)

    def poll(self) -> bool:
        """Check watched files and fire one update if any of them changed.

        Returns:
            True if an update event was fired
        """
        if self.closed:
            return False

        changed = []
        for path in self.dependencies():
            mtime = self._mtime(path)
            if self._mtimes.get(path, mtime) != mtime:
                changed.append(path)
            self._mtimes[path] = mtime

        if not changed:
            return False
        if time.time() - self._last_update < self.delay:
            logger.debug(f"Change to {len(changed)} file(s) deferred")
            for path in changed:
                self._mtimes[path] = None
            return False
        return self.notify_change(changed)

    def notify_change(self, paths: Iterable[str]) -> bool:
        """Fire an update event for the given changed paths."""
        if self.closed:
            return False
        paths = list(paths)
        self._last_update = time.time()
        logger.debug(f"Dependencies changed: {', '.join(paths)}")
        self.on_update.emit(paths)
        return True

    def close(self) -> None:
        """Stop watching and drop every subscriber."""
        self.closed = True
        self.on_update.clear()
        self.on_log.clear()
        self._mtimes.clear()

    def _snapshot(self) -> None:
        for path in self.dependencies():
            self._mtimes[path] = self._mtime(path)

    @staticmethod
    def _mtime(path: str) -> Optional[float]:
        try:
            return os.stat(path).st_mtime
        except OSError:
            return None

    def __repr__(self) -> str:
        return f"<WatchingBundler {self.bundler!r} closed={self.closed}>"
