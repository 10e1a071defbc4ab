#!/usr/bin/env python3
"""
DFPWM Encoder CLI - Encode audio files to DFPWM.
"""

import sys
from pathlib import Path

import click

from dfpwm import encode_file, get_profile
from dfpwm.cli import (
    configure_logging,
    profile_option,
    raw_option,
    sample_rate_option,
    verbose_option,
)


@click.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output DFPWM file path (default: INPUT with .dfpwm extension)",
)
@profile_option
@sample_rate_option
@raw_option
@verbose_option
def main(input: str, output: str | None, profile: str, sample_rate: int | None, raw: bool, verbose: bool):
    """
    Encode an audio file to headerless DFPWM.

    Examples:

        dfpwm-encode song.wav

        dfpwm-encode song.flac -p dfpwm -s 32768 -o song.dfpwm

        dfpwm-encode samples.u8 --raw -o samples.dfpwm
    """
    configure_logging(verbose)

    codec_profile = get_profile(profile)
    if output is None:
        output = str(Path(input).with_suffix(".dfpwm"))

    if verbose:
        click.echo(f"Encoding {input}...")
        click.echo(f"  Output: {output}")
        click.echo(f"  Profile: {codec_profile.name}")
        click.echo(f"  Sample rate: {sample_rate or codec_profile.base_sample_rate} Hz")

    try:
        encoded = encode_file(input, output, codec_profile, sample_rate, raw=raw)
    except Exception as e:
        click.echo(f"Error encoding file: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Generated {output} ({len(encoded)} bytes)")


if __name__ == "__main__":
    main()
