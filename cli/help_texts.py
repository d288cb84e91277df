"""
Centralized Help Text Constants

This module provides all CLI help text constants for commands and options,
ensuring consistency across subcommands and enabling easy maintenance.
"""

# Exit codes for different error types
class ExitCodes:
    SUCCESS = 0
    GENERAL_ERROR = 1
    MISSING_REQUIRED_OPTION = 2
    INVALID_CONFIGURATION = 3
    FILE_NOT_FOUND = 6

# Command help texts
BUNDLE_HELP = (
    "Bundle entry files with an external module bundler and write the "
    "bundled output to an output directory."
)

# Option help texts - Bundle command
BUNDLE_OUT_DIR_HELP = (
    "Directory for bundled files. Each entry keeps its path relative to --base. "
    "Can also be set via BRO_OUT_DIR (default: ./dist)."
)

BUNDLE_BASE_HELP = (
    "Base directory entries are resolved against. "
    "Defaults to each entry's own directory."
)

BUNDLE_WATCH_HELP = (
    "Keep running and rebundle an entry whenever one of its dependencies changes."
)

BUNDLE_ERROR_HELP = (
    "What to do when bundling fails:\n"
    "  log: print the error and carry on with the next entry (default)\n"
    "  emit: stop the run with a non-zero exit code"
)

BUNDLE_COMMAND_HELP = (
    "Bundler command line, e.g. 'browserify --debug'. "
    "Can also be set via BRO_COMMAND (default: browserify)."
)

BUNDLE_LIST_COMMAND_HELP = (
    "Command printing the files a bundle was built from, one per line; --watch "
    "polls them for changes. Can also be set via BRO_LIST_COMMAND "
    "(default: <command> --list for browserify)."
)

BUNDLE_NO_READ_HELP = (
    "Do not read entry contents; pass the entry paths to the bundler instead of "
    "streaming the file contents."
)

BUNDLE_POLL_INTERVAL_HELP = "Seconds between dependency checks in --watch mode."

BUNDLE_TIMEOUT_HELP = "Seconds before a single bundler run is aborted."
