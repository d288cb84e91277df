"""
Pipeline Stage

The record-by-record transform at the heart of bro. For each incoming
FileRecord the stage builds a bundler session, runs one bundle cycle, and in
watch mode keeps the session subscribed so every dependency change runs a
new cycle over the same record.

Only the first cycle of a record completes it in the pipeline. Later watch
cycles re-emit the rebundled record into the destination out-of-band.

Usage:
    >>> stage = bro({"error": "emit"})
    >>> for record in stage.process([FileRecord.from_path("src/main.js")]):
    ...     print(record.contents)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Union

from bro.bundlers.watch import WatchingBundler
from bro.channels import RecordChannel
from bro.config import BroOptions, parse_arguments
from bro.cycle import BundleCycle, BundleOutcome, OnComplete
from bro.factory import BundlerFactory
from bro.records import FileRecord
from bro.utils.logging_config import bro_log


logger = logging.getLogger(__name__)


@dataclass
class WatchHandle:
    """A live watch session and the subscriptions the stage registered on it."""
    session: WatchingBundler
    record: FileRecord
    unsubscribers: List[Callable[[], None]] = field(default_factory=list)

    def dispose(self) -> None:
        for unsubscribe in self.unsubscribers:
            unsubscribe()
        self.unsubscribers.clear()
        self.session.close()


class BroStage:
    """Bundles every record that passes through it.

    Attributes:
        options: Options shared by every record of this stage
        destination: Channel receiving forwarded records and emitted errors
    """

    def __init__(
        self,
        options: BroOptions,
        factory: Optional[BundlerFactory] = None,
        cycle: Optional[BundleCycle] = None,
        destination: Optional[RecordChannel] = None,
    ):
        self.options = options
        self.factory = factory or BundlerFactory()
        self.cycle = cycle or BundleCycle()
        self.destination = destination or RecordChannel()
        self.watches: List[WatchHandle] = []

    def transform(self, record: FileRecord, on_complete: OnComplete) -> BundleOutcome:
        """Bundle one record.

        Args:
            record: Incoming record
            on_complete: Pipeline continuation, called at most once

        Returns:
            Outcome of the first bundle cycle
        """
        session = self.factory.create(self.options, record)
        completed = False

        def complete(error: Optional[BaseException], result: Optional[FileRecord]) -> None:
            nonlocal completed
            if completed:
                if result is not None:
                    self.destination.push(result)
                return
            completed = True
            on_complete(error, result)

        if self.options.watch:
            def rebundle(paths: List[str]) -> None:
                logger.debug(f"Rebundling {record!r} after change to {paths}")
                self.cycle.run(session, self.options, self.destination, record, complete)

            handle = WatchHandle(session=session, record=record)
            handle.unsubscribers.append(session.on_update.subscribe(rebundle))
            handle.unsubscribers.append(session.on_log.subscribe(bro_log))
            self.watches.append(handle)

        return self.cycle.run(session, self.options, self.destination, record, complete)

    def process(self, records: Iterable[FileRecord]) -> Iterator[FileRecord]:
        """Bundle records in arrival order, yielding what reaches the destination.

        Raises:
            Exception: An error emitted on the destination with no error listener
        """
        for record in records:
            self.transform(record, self._forward)
            yield from self.flush()

    def flush(self) -> List[FileRecord]:
        """Collect the records waiting in the destination.

        Raises:
            Exception: The oldest error emitted with no error listener
        """
        error = self.destination.take_error()
        if error is not None:
            raise error
        return self.destination.drain()

    def poll(self) -> int:
        """Check every watch session for changed dependencies.

        Returns:
            Number of sessions that fired an update
        """
        return sum(1 for handle in list(self.watches) if handle.session.poll())

    def close(self) -> None:
        """Dispose of every watch session created by this stage."""
        for handle in self.watches:
            handle.dispose()
        if self.watches:
            logger.debug(f"Closed {len(self.watches)} watch session(s)")
        self.watches.clear()

    def _forward(self, error: Optional[BaseException], record: Optional[FileRecord]) -> None:
        if error is not None:
            self.destination.emit_error(error)
        elif record is not None:
            self.destination.push(record)

    def __enter__(self) -> "BroStage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def bro(
    opts: Union[None, Mapping[str, Any], BroOptions, Callable[..., Any]] = None,
    callback: Optional[Callable[..., Any]] = None,
    factory: Optional[BundlerFactory] = None,
) -> BroStage:
    """Create a bundling stage.

    Args:
        opts: Options mapping (``watch``, ``error``, ``callback``), BroOptions,
            or a lone callback
        callback: Receives a side channel for each bundled record
        factory: Bundler factory (default: CommandBundler sessions)

    Returns:
        BroStage
    """
    return BroStage(parse_arguments(opts, callback), factory=factory)
