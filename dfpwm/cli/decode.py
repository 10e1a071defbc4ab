#!/usr/bin/env python3
"""
DFPWM Decoder CLI - Decode DFPWM files to 8-bit audio.
"""

import sys
from pathlib import Path

import click

from dfpwm import SAMPLES_PER_BYTE, decode_file, get_profile
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
    help="Output file path (default: INPUT with .wav extension)",
)
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    default=0,
    help="Encoded byte offset to start decoding from (default: 0)",
)
@profile_option
@sample_rate_option
@raw_option
@verbose_option
def main(
    input: str,
    output: str | None,
    offset: int,
    profile: str,
    sample_rate: int | None,
    raw: bool,
    verbose: bool,
):
    """
    Decode a headerless DFPWM file to 8-bit audio.

    Examples:

        dfpwm-decode song.dfpwm

        dfpwm-decode song.dfpwm -p dfpwm -s 32768 -o song.wav

        dfpwm-decode song.dfpwm --offset 6000 --raw -o tail.u8
    """
    configure_logging(verbose)

    codec_profile = get_profile(profile)
    if output is None:
        suffix = ".u8" if raw else ".wav"
        output = str(Path(input).with_suffix(suffix))

    rate = sample_rate or codec_profile.base_sample_rate
    if verbose:
        click.echo(f"Decoding {input}...")
        click.echo(f"  Output: {output}")
        click.echo(f"  Profile: {codec_profile.name}")
        click.echo(f"  Sample rate: {rate} Hz")
        if offset:
            click.echo(f"  Offset: {offset} bytes ({offset * SAMPLES_PER_BYTE / rate:.2f}s)")

    try:
        pcm = decode_file(input, output, codec_profile, sample_rate, offset=offset, raw=raw)
    except Exception as e:
        click.echo(f"Error decoding file: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Decoded {output} ({len(pcm) / rate:.2f}s)")


if __name__ == "__main__":
    main()
