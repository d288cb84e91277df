"""
CLI Package for bro

The main entry point is the main() Click group, which registers all
available subcommands. The cli() function serves as the console script
entry point for setup.py.
"""

import click

from bro import __version__
from .bundle import bundle


@click.group()
@click.version_option(version=__version__, prog_name='bro')
def main():
    """bro - bundle JavaScript entry files with an external module bundler."""
    pass

# Register subcommands
main.add_command(bundle)

# Entry point for setup.py console script
def cli():
    """Console script entry point."""
    main()
