"""
Bundle Subcommand Module

Implements the ``bundle`` subcommand: every entry file becomes a FileRecord,
passes through the bro stage, and the bundled output is written below the
output directory. With --watch the command keeps polling the entries'
dependencies and rewrites rebundled output until interrupted.
"""

import functools
import logging
import sys
import time
from typing import List, Optional

import click

from bro.bundlers.command import CommandBundler
from bro.errors import BroError, ConfigurationError
from bro.factory import BundlerFactory
from bro.records import FileRecord
from bro.routing import format_error_message
from bro.settings import BroSettings, SettingsManager
from bro.stage import BroStage, bro
from bro.utils.logging_config import logging_config
from bro.writer import RecordWriter

from .help_texts import (
    BUNDLE_HELP, BUNDLE_OUT_DIR_HELP, BUNDLE_BASE_HELP,
    BUNDLE_WATCH_HELP, BUNDLE_ERROR_HELP, BUNDLE_COMMAND_HELP, BUNDLE_LIST_COMMAND_HELP,
    BUNDLE_NO_READ_HELP, BUNDLE_POLL_INTERVAL_HELP, BUNDLE_TIMEOUT_HELP, ExitCodes,
)
from .shared_options import out_dir_option, config_option, log_level_option


logger = logging.getLogger(__name__)


@click.command(help=BUNDLE_HELP)
@click.argument("entries", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@out_dir_option(help=BUNDLE_OUT_DIR_HELP)
@click.option("--base", "-b", default=None, type=click.Path(file_okay=False), help=BUNDLE_BASE_HELP)
@click.option("--watch/--no-watch", default=None, help=BUNDLE_WATCH_HELP)
@click.option(
    "--error", "-e",
    "error_mode",
    type=click.Choice(["log", "emit"], case_sensitive=False),
    default=None,
    help=BUNDLE_ERROR_HELP,
)
@click.option("--command", "-c", "bundler_command", default=None, help=BUNDLE_COMMAND_HELP)
@click.option("--list-command", default=None, help=BUNDLE_LIST_COMMAND_HELP)
@click.option("--no-read", is_flag=True, default=False, help=BUNDLE_NO_READ_HELP)
@click.option("--poll-interval", type=float, default=None, help=BUNDLE_POLL_INTERVAL_HELP)
@click.option("--timeout", type=float, default=None, help=BUNDLE_TIMEOUT_HELP)
@config_option()
@log_level_option()
def bundle(
    entries: List[str],
    out_dir: Optional[str],
    base: Optional[str],
    watch: Optional[bool],
    error_mode: Optional[str],
    bundler_command: Optional[str],
    list_command: Optional[str],
    no_read: bool,
    poll_interval: Optional[float],
    timeout: Optional[float],
    config: Optional[str],
    log_level: Optional[str],
):
    """Bundle entry files.

    Examples:
        # Bundle one entry into ./dist
        bro bundle src/main.js

        # Use a custom bundler command and fail on the first error
        bro bundle src/main.js --command "browserify --debug" --error emit

        # Rebundle on every change
        bro bundle src/*.js --out-dir public/js --watch
    """
    try:
        settings = SettingsManager().load_settings(
            config_file=config,
            cli_overrides={
                "out_dir": out_dir,
                "watch": watch,
                "error": error_mode,
                "command": bundler_command,
                "list_command": list_command,
                "read": False if no_read else None,
                "poll_interval": poll_interval,
                "timeout": timeout,
                "log_level": log_level,
            },
        )
    except ConfigurationError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(ExitCodes.INVALID_CONFIGURATION)

    logging_config.configure_logging(level=settings.log_level, log_file=settings.log_file)

    try:
        records = [FileRecord.from_path(entry, base=base, read=settings.read) for entry in entries]
    except OSError as e:
        click.echo(f"❌ Cannot read entry: {e}", err=True)
        sys.exit(ExitCodes.FILE_NOT_FOUND)

    writer = RecordWriter(settings.out_dir)
    start_time = time.time()

    with create_stage(settings) as stage:
        try:
            written = _write_all(writer, stage.process(records))
        except BroError as e:
            click.echo(f"❌ {format_error_message(e)}", err=True)
            sys.exit(ExitCodes.GENERAL_ERROR)

        failed = len(records) - written
        logging_config.log_operation_timing("Bundling", time.time() - start_time)
        click.echo(f"✅ {written} bundled")
        if failed:
            click.echo(f"❌ {failed} failed")

        if settings.watch:
            _watch(stage, writer, settings.poll_interval)


def create_stage(settings: BroSettings) -> BroStage:
    """Build the bro stage described by the settings."""
    bundler_class = functools.partial(
        CommandBundler,
        command=settings.command,
        timeout=settings.timeout,
        list_command=settings.list_command,
    )
    factory = BundlerFactory(bundler_class=bundler_class)
    return bro({"watch": settings.watch, "error": settings.error}, factory=factory)


def _write_all(writer: RecordWriter, records) -> int:
    written = 0
    for record in records:
        result = writer.write(record)
        if result.success:
            written += 1
            click.echo(f"  {record.relative} → {result.output_path}")
        else:
            click.echo(f"❌ {record.relative}: {result.error}", err=True)
    return written


def _watch(stage: BroStage, writer: RecordWriter, poll_interval: float) -> None:
    click.echo("Watching for changes. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(poll_interval)
            if stage.poll():
                _write_all(writer, stage.flush())
    except KeyboardInterrupt:
        click.echo("Stopped watching.")
    except BroError as e:
        click.echo(f"❌ {format_error_message(e)}", err=True)
        sys.exit(ExitCodes.GENERAL_ERROR)
