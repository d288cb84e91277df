"""
bro - bundle files flowing through a file-processing pipeline.

Each FileRecord passing through the stage is handed to an external module
bundler; the bundled output replaces the record's contents and the record
continues downstream (or to a caller-supplied side channel).

Architecture:
    BroStage (stage.py)
        ↓
    BundlerFactory (factory.py) → CommandBundler / WatchingBundler (bundlers/)
        ↓
    BundleCycle (cycle.py)
        ↓
    ErrorRouter (routing.py), on failure only

Usage:
    >>> from bro import bro, FileRecord
    >>>
    >>> stage = bro({"watch": False, "error": "log"})
    >>> bundled = list(stage.process([FileRecord.from_path("src/main.js")]))
"""

from bro.bundlers import Bundler, CommandBundler, WatchingBundler
from bro.channels import RecordChannel
from bro.config import (
    BroOptions,
    CustomErrors,
    EmitErrors,
    ErrorStrategy,
    LogErrors,
    parse_arguments,
)
from bro.cycle import Aborted, BundleCycle, BundleOutcome, Diverted, Forwarded
from bro.errors import BroError, BundleError, ConfigurationError, ParseError
from bro.factory import BundlerFactory
from bro.records import FileRecord
from bro.routing import ErrorRouter, format_error_message
from bro.stage import BroStage, bro

__version__ = "1.0.0"

__all__ = [
    # Stage
    "bro",
    "BroStage",

    # Records and channels
    "FileRecord",
    "RecordChannel",

    # Options
    "BroOptions",
    "ErrorStrategy",
    "LogErrors",
    "EmitErrors",
    "CustomErrors",
    "parse_arguments",

    # Bundling
    "Bundler",
    "CommandBundler",
    "WatchingBundler",
    "BundlerFactory",
    "BundleCycle",
    "BundleOutcome",
    "Forwarded",
    "Diverted",
    "Aborted",
    "ErrorRouter",
    "format_error_message",

    # Errors
    "BroError",
    "BundleError",
    "ParseError",
    "ConfigurationError",
]
