"""
Error Router

Applies the configured error strategy to a failed bundle run, then forces
the record's processing to end so nothing waits on it:

- LogErrors: format the error and write it to the ``[bro]`` channel
- EmitErrors: re-raise it on the destination's error channel
- CustomErrors: hand it to the caller's handler

Afterwards the destination always receives an end signal, and a configured
callback receives an empty, already-ended side channel.
"""

import logging

import click

from bro.channels import RecordChannel
from bro.config import BroOptions, CustomErrors, EmitErrors, LogErrors
from bro.errors import PARSE_ERROR_PATTERN
from bro.utils.logging_config import bro_log


logger = logging.getLogger(__name__)


def format_error_message(error: BaseException) -> str:
    """Render an error for the log: red name, then the error text with
    parse errors highlighted."""
    name = click.style(type(error).__name__, fg="red")
    text = PARSE_ERROR_PATTERN.sub(
        lambda match: click.style(match.group(1), fg="red"),
        str(error),
        count=1,
    )
    return f"{name}\n{text}"


class ErrorRouter:
    """Routes bundling errors to the configured strategy."""

    def handle(self, error: BaseException, options: BroOptions, destination: RecordChannel) -> None:
        """Apply ``options.error`` to the error and end the destination.

        Args:
            error: The exception raised by the bundler
            options: Resolved stage options
            destination: Pipeline destination of the failed record

        Raises:
            Exception: Whatever a custom handler raises, after the end signal
                and the callback channel have been delivered
        """
        strategy = options.error

        try:
            if isinstance(strategy, EmitErrors):
                destination.emit_error(error)
            elif isinstance(strategy, CustomErrors):
                strategy.handler(error)
            else:
                if not isinstance(strategy, LogErrors):
                    logger.debug(f"Unknown error strategy {strategy!r}, logging instead")
                bro_log(format_error_message(error))
        finally:
            destination.end()

            if options.callback is not None:
                channel = RecordChannel(name="bro-callback")
                options.callback(channel)
                channel.end()
