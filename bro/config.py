"""
Stage options for the bro pipeline stage.

Options are resolved once per stage by ``parse_arguments`` and shared,
read-only, by every record the stage processes.

The error strategy is a tagged choice:
- LogErrors: log a formatted message, keep the pipeline alive (default)
- EmitErrors: re-raise on the pipeline's error channel
- CustomErrors: hand the error to a caller-supplied function
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union


logger = logging.getLogger(__name__)


class ErrorMode(Enum):
    """Error strategy names accepted as strings."""
    LOG = "log"
    EMIT = "emit"


@dataclass(frozen=True)
class LogErrors:
    """Log bundling errors through the bro logging channel."""
    pass


@dataclass(frozen=True)
class EmitErrors:
    """Emit bundling errors on the pipeline's error channel."""
    pass


@dataclass(frozen=True)
class CustomErrors:
    """Pass bundling errors to a caller-supplied handler."""
    handler: Callable[[BaseException], Any]


ErrorStrategy = Union[LogErrors, EmitErrors, CustomErrors]


@dataclass(frozen=True)
class BroOptions:
    """Resolved stage options.

    Attributes:
        watch: Rebundle when a dependency changes
        error: Strategy applied to bundling errors
        callback: Receives a fresh side channel per bundled record instead of
            forwarding the record downstream
    """
    watch: bool = False
    error: ErrorStrategy = field(default_factory=LogErrors)
    callback: Optional[Callable[[Any], Any]] = None


def resolve_error_strategy(value: Any) -> ErrorStrategy:
    """Turn a user-supplied ``error`` option into a tagged strategy.

    Unrecognized values fall back to LogErrors.
    """
    if isinstance(value, (LogErrors, EmitErrors, CustomErrors)):
        return value
    if value is None:
        return LogErrors()
    if isinstance(value, str):
        if value.lower() == ErrorMode.EMIT.value:
            return EmitErrors()
        if value.lower() != ErrorMode.LOG.value:
            logger.debug(f"Unknown error option {value!r}, falling back to 'log'")
        return LogErrors()
    if callable(value):
        return CustomErrors(handler=value)

    logger.debug(f"Unsupported error option {value!r}, falling back to 'log'")
    return LogErrors()


def parse_arguments(
    opts: Union[None, Mapping[str, Any], BroOptions, Callable[..., Any]] = None,
    callback: Optional[Callable[..., Any]] = None,
) -> BroOptions:
    """Normalize the arguments given to ``bro()`` into BroOptions.

    A lone callable in place of the options is the callback, with default
    options. An explicit ``callback`` argument takes precedence over one
    given in the options.

    Args:
        opts: Options mapping, BroOptions, callback, or None
        callback: Optional callback receiving side channels

    Returns:
        BroOptions
    """
    if isinstance(opts, BroOptions):
        if callback is None:
            return opts
        return BroOptions(watch=opts.watch, error=opts.error, callback=callback)

    if callable(opts):
        callback = opts
        opts = {}

    opts = dict(opts or {})
    unknown = set(opts) - {"watch", "error", "callback"}
    if unknown:
        logger.debug(f"Ignoring unknown options: {', '.join(sorted(unknown))}")

    return BroOptions(
        watch=bool(opts.get("watch", False)),
        error=resolve_error_strategy(opts.get("error")),
        callback=callback if callback is not None else opts.get("callback"),
    )
