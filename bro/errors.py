"""
Bro Error Classes

This module defines custom exception classes for bundling operations.
Bundler failures are caught at the bundle cycle boundary and routed by the
configured error strategy; configuration errors surface to the caller.
"""

import re
from typing import Optional, Sequence


# Marker used by JavaScript bundlers when a source file fails to parse
PARSE_ERROR_PATTERN = re.compile(r"(ParseError.*)")


class BroError(Exception):
    """Base exception class for all bro-related errors.

    Example:
        try:
            stage.process(records)
        except BroError as e:
            logger.error(f"Bundling failed: {e}")
    """
    pass


class ConfigurationError(BroError):
    """Exception raised for invalid settings.

    This exception is raised when:
    - A settings file contains invalid YAML
    - A settings value fails validation
    - A referenced environment variable is not set
    """
    pass


class BundleError(BroError):
    """Exception raised when the external bundler fails.

    Attributes:
        command: Command line that was executed (if any)
        returncode: Exit status of the bundler process (if it ran)
        stderr: Diagnostic output captured from the bundler
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command) if command else None
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}\n{self.stderr.rstrip()}"
        return message


class ParseError(BundleError):
    """Exception raised when the bundler cannot parse a source file."""
    pass


def bundle_error_from_output(
    command: Sequence[str],
    returncode: int,
    stderr: str,
) -> BundleError:
    """Build the right BundleError subclass for a failed bundler run."""
    message = f"Bundler exited with status {returncode}"
    if PARSE_ERROR_PATTERN.search(stderr):
        return ParseError(message, command=command, returncode=returncode, stderr=stderr)
    return BundleError(message, command=command, returncode=returncode, stderr=stderr)
