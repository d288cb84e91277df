"""
Record channels: the pipeline destination and the callback side channels.

A RecordChannel buffers the records pushed into it, remembers end signals,
and routes errors either to subscribed listeners or, when nobody listens,
keeps them pending so the driver of the pipeline can fail the run.
"""

import logging
from typing import Iterator, List, Optional

from bro.events import EventHook
from bro.records import FileRecord


logger = logging.getLogger(__name__)


class RecordChannel:
    """Buffered stream of FileRecords with data, end and error signals.

    Attributes:
        name: Label used in log messages
        ended: Whether an end signal has been received
        end_count: Number of end signals received
        pending_errors: Errors emitted while no error listener was subscribed
    """

    def __init__(self, name: str = "bro"):
        self.name = name
        self.ended = False
        self.end_count = 0
        self.pending_errors: List[BaseException] = []
        self._buffer: List[FileRecord] = []

        self.on_data = EventHook("data")
        self.on_end = EventHook("end")
        self.on_error = EventHook("error")

    def push(self, record: FileRecord) -> None:
        """Deliver a record to listeners and buffer it for readers."""
        self._buffer.append(record)
        self.on_data.emit(record)

    def end(self) -> None:
        """Signal end-of-stream."""
        self.ended = True
        self.end_count += 1
        logger.debug(f"Channel {self.name!r} received end signal #{self.end_count}")
        self.on_end.emit()

    def emit_error(self, error: BaseException) -> None:
        """Raise an error on the channel's error channel.

        Listeners take ownership of the error; without listeners it stays
        pending until the pipeline driver collects it.
        """
        if not self.on_error.emit(error):
            self.pending_errors.append(error)

    def take_error(self) -> Optional[BaseException]:
        """Pop the oldest pending error, or None."""
        if self.pending_errors:
            return self.pending_errors.pop(0)
        return None

    def drain(self) -> List[FileRecord]:
        """Return and forget every buffered record."""
        records, self._buffer = self._buffer, []
        return records

    @property
    def records(self) -> List[FileRecord]:
        """Buffered records, without draining them."""
        return list(self._buffer)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.drain())

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return f"<RecordChannel {self.name!r} records={len(self._buffer)} ended={self.ended}>"
