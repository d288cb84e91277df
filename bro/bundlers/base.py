"""
Bundler Protocol

Defines the contract the pipeline stage expects from a module bundler.
The bundler itself (dependency resolution, transforms, source maps) is an
external collaborator; bro only drives it and collects its output.
"""

from typing import BinaryIO, Callable, Iterator, List, Optional, Protocol, Union, runtime_checkable


# A bundler entry is either a filesystem path or a readable byte stream
Entry = Union[str, BinaryIO]


@runtime_checkable
class Bundler(Protocol):
    """
    Protocol for bundler sessions.

    A session is bound to one entry and can be bundled repeatedly. Each call
    to ``bundle()`` starts an independent run.

    Example:
        >>> bundler = CommandBundler("/src/main.js")
        >>> output = b"".join(bundler.bundle())
    """

    def bundle(self) -> Iterator[bytes]:
        """
        Run the bundler and yield its output.

        Chunks are yielded in the order the bundler produces them. Failures
        are raised while iterating, never when the session is constructed.

        Returns:
            Iterator over output byte chunks

        Raises:
            BundleError: If the bundler fails
        """
        ...

    def dependencies(self) -> List[str]:
        """
        Return the files this session's output depends on.

        Used by watch sessions to decide which files to poll. Sessions bundling
        an in-memory stream may return an empty list.

        Returns:
            List of absolute file paths
        """
        ...


BundlerClass = Callable[[Entry, Optional[str]], Bundler]


def entry_path(entries: Entry) -> Optional[str]:
    """Return the filesystem path of an entry, or None for stream entries."""
    return entries if isinstance(entries, str) else None
