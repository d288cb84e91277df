"""
Command Bundler

Drives an external bundler executable (browserify by default) through
``subprocess``. Path entries are passed as a command-line argument; stream
entries are piped to the bundler's stdin with ``-`` as the entry argument
and the session's base directory as working directory, so relative imports
resolve as if the source lived there.

After every successful run the session asks the bundler which files the
bundle was built from (``browserify --list``). Watch sessions poll those
files for changes.
"""

import logging
import os
import shlex
import subprocess
import time
from typing import Iterator, List, Optional, Sequence, Union

from bro.bundlers.base import Entry, entry_path
from bro.errors import BundleError, bundle_error_from_output


logger = logging.getLogger(__name__)


DEFAULT_COMMAND = ("browserify",)
DEFAULT_CHUNK_SIZE = 64 * 1024
STDIN_ENTRY = "-"
LIST_FLAG = "--list"

Command = Union[str, Sequence[str], None]


def split_command(command: Command) -> List[str]:
    """Normalize a command given as a shell-like string or an argv list."""
    if command is None:
        return list(DEFAULT_COMMAND)
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def default_list_command(command: Sequence[str]) -> Optional[List[str]]:
    """Dependency listing command for bundlers known to provide one."""
    if command and os.path.basename(command[0]) == "browserify":
        return list(command) + [LIST_FLAG]
    return None


class CommandBundler:
    """Bundler session backed by an external command.

    Example:
        >>> bundler = CommandBundler("/src/main.js", command="browserify --debug")
        >>> output = b"".join(bundler.bundle())
        >>> bundler.dependencies()
        ['/src/main.js', '/src/x.js']
    """

    def __init__(
        self,
        entries: Entry,
        basedir: Optional[str] = None,
        command: Command = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: Optional[float] = None,
        list_command: Command = None,
    ):
        """Initialize the session.

        Args:
            entries: Entry file path, or readable byte stream holding the source
            basedir: Directory relative dependencies resolve against
            command: Bundler command line (default: browserify)
            chunk_size: Size of the output chunks yielded by ``bundle()``
            timeout: Seconds before a bundler run is aborted
            list_command: Command printing the bundle's input files, one per
                line (default: ``<command> --list`` for browserify, else none)
        """
        self.entries = entries
        self.basedir = basedir
        self.command = split_command(command)
        self.chunk_size = chunk_size
        self.timeout = timeout
        if list_command is None:
            self.list_command = default_list_command(self.command)
        else:
            self.list_command = split_command(list_command)
        self._listed: List[str] = []

    def dependencies(self) -> List[str]:
        path = entry_path(self.entries)
        paths = [os.path.abspath(path)] if path else []
        for listed in self._listed:
            if listed not in paths:
                paths.append(listed)
        return paths

    def _entry_argument(self) -> str:
        path = entry_path(self.entries)
        return path if path is not None else STDIN_ENTRY

    def _read_source(self) -> Optional[bytes]:
        if entry_path(self.entries) is not None:
            return None
        if self.entries.seekable():
            self.entries.seek(0)
        return self.entries.read()

    def _run(self, argv: List[str], source: Optional[bytes]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                argv,
                input=source,
                stdin=subprocess.DEVNULL if source is None else None,
                capture_output=True,
                cwd=self.basedir,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise BundleError(f"Bundler command not found: {argv[0]}", command=argv) from e
        except subprocess.TimeoutExpired as e:
            raise BundleError(
                f"Bundler timed out after {self.timeout}s", command=argv
            ) from e
        except OSError as e:
            raise BundleError(f"Failed to start bundler: {e}", command=argv) from e

    def bundle(self) -> Iterator[bytes]:
        """Run the bundler command and yield its stdout in chunks.

        Raises:
            BundleError: If the command is missing, times out or exits non-zero
            ParseError: If the bundler reports a parse error
        """
        argv = self.command + [self._entry_argument()]
        source = self._read_source()
        logger.debug(f"Running bundler: {' '.join(argv)} (cwd={self.basedir})")

        start_time = time.time()
        result = self._run(argv, source)

        stderr = result.stderr.decode("utf-8", errors="replace")
        if result.returncode != 0:
            raise bundle_error_from_output(argv, result.returncode, stderr)
        if stderr:
            logger.debug(f"Bundler stderr: {stderr.rstrip()}")

        logger.debug(
            f"Bundler produced {len(result.stdout)} bytes in {time.time() - start_time:.2f}s"
        )
        if self.list_command:
            self._listed = self._list_dependencies(source)

        output = result.stdout
        for offset in range(0, len(output), self.chunk_size):
            yield output[offset:offset + self.chunk_size]

    def _list_dependencies(self, source: Optional[bytes]) -> List[str]:
        """Ask the bundler for the files of the last bundle.

        A failing listing keeps the previously known files.
        """
        argv = self.list_command + [self._entry_argument()]
        try:
            result = self._run(argv, source)
        except BundleError as e:
            logger.warning(f"Could not list bundle dependencies: {e}")
            return self._listed
        if result.returncode != 0:
            logger.warning(
                f"Could not list bundle dependencies: {' '.join(argv)} exited "
                f"with status {result.returncode}"
            )
            return self._listed

        root = self.basedir or os.getcwd()
        paths = []
        for line in result.stdout.decode("utf-8", errors="replace").splitlines():
            line = line.strip()
            if not line:
                continue
            path = os.path.abspath(os.path.join(root, line))
            if os.path.isfile(path) and path not in paths:
                paths.append(path)
        logger.debug(f"Bundle depends on {len(paths)} file(s)")
        return paths

    def __repr__(self) -> str:
        entry = entry_path(self.entries) or "<stream>"
        return f"<CommandBundler {' '.join(self.command)} {entry}>"
