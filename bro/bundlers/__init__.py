"""
Bundler sessions driven by the bro pipeline stage.

Key Components:
    - base.py: Bundler protocol and entry helpers
    - command.py: CommandBundler, running an external bundler executable
    - watch.py: WatchingBundler, the watch-mode decorator
"""

from bro.bundlers.base import Bundler, BundlerClass, Entry, entry_path
from bro.bundlers.command import CommandBundler, DEFAULT_COMMAND
from bro.bundlers.watch import WatchingBundler

__all__ = [
    "Bundler",
    "BundlerClass",
    "Entry",
    "entry_path",
    "CommandBundler",
    "DEFAULT_COMMAND",
    "WatchingBundler",
]
