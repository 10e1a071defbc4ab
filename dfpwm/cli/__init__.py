"""
Command-line tools for DFPWM encoding and decoding.
"""

import logging

import click

from dfpwm import PROFILES, DEFAULT_PROFILE_NAME

profile_option = click.option(
    "-p", "--profile",
    type=click.Choice(sorted(PROFILES), case_sensitive=False),
    default=DEFAULT_PROFILE_NAME,
    show_default=True,
    help="Codec profile",
)

sample_rate_option = click.option(
    "-s", "--sample-rate",
    type=click.IntRange(min=1),
    default=None,
    help="Sample rate in Hz (default: the profile's base rate)",
)

raw_option = click.option(
    "--raw",
    is_flag=True,
    help="Treat PCM as headerless unsigned 8-bit mono",
)

verbose_option = click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output with detailed logging",
)


def configure_logging(verbose: bool):
    """Set up root logging for the command-line tools."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
