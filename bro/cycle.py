"""
Bundle Cycle

One bundling run for one record: run the session, concatenate its output in
arrival order, attach it to the record, and deliver the record either
downstream or to a fresh side channel. Failures go to the ErrorRouter.

Every run ends in exactly one BundleOutcome:
- Forwarded: the record was passed to ``on_complete``
- Diverted: the record was pushed into a new side channel given to the callback
- Aborted: the bundler failed and the error was routed
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from bro.bundlers.base import Bundler
from bro.channels import RecordChannel
from bro.config import BroOptions
from bro.records import FileRecord
from bro.routing import ErrorRouter
from bro.utils.logging_config import logging_config


logger = logging.getLogger(__name__)


OnComplete = Callable[[Optional[BaseException], Optional[FileRecord]], Any]


@dataclass
class Forwarded:
    """The bundled record continued down the main pipeline."""
    record: FileRecord


@dataclass
class Diverted:
    """The bundled record was delivered to a caller side channel."""
    channel: RecordChannel


@dataclass
class Aborted:
    """The bundle run failed; the error was routed."""
    error: BaseException


BundleOutcome = Union[Forwarded, Diverted, Aborted]


class BundleCycle:
    """Drives bundle runs for the pipeline stage.

    Example:
        >>> cycle = BundleCycle()
        >>> outcome = cycle.run(session, options, destination, record, on_complete)
        >>> isinstance(outcome, Forwarded)
        True
    """

    def __init__(self, error_router: Optional[ErrorRouter] = None):
        self.error_router = error_router or ErrorRouter()

    def run(
        self,
        session: Bundler,
        options: BroOptions,
        destination: RecordChannel,
        record: FileRecord,
        on_complete: OnComplete,
    ) -> BundleOutcome:
        """Bundle the record once.

        Args:
            session: Bundler session bound to the record's entry
            options: Resolved stage options
            destination: Pipeline destination, used for error routing
            record: Record to mutate with the bundled output
            on_complete: Pipeline continuation, called as ``on_complete(None, record)``

        Returns:
            The outcome of the run
        """
        buffer = bytearray()
        start_time = time.time()

        try:
            for chunk in session.bundle():
                buffer.extend(chunk)
        except Exception as e:
            logger.debug(f"Bundling {record!r} failed: {type(e).__name__}")
            self.error_router.handle(e, options, destination)
            return Aborted(error=e)

        record.contents = bytes(buffer)
        logging_config.log_operation_timing(
            f"Bundling {record.relative}", time.time() - start_time
        )

        if options.callback is not None:
            channel = RecordChannel(name="bro-callback")
            options.callback(channel)
            channel.push(record)
            channel.end()
            return Diverted(channel=channel)

        on_complete(None, record)
        return Forwarded(record=record)
