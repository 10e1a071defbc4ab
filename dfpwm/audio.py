"""
Audio file helpers - Convert between audio files and DFPWM.
"""

import logging
import math
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf
from scipy import signal

from . import PCM_OFFSET
from .encoder import as_pcm8
from .profile import DFPWM1A, Profile
from .stream import DFPWMStream

# Module-level logger
_logger = logging.getLogger(__name__)


def float_to_pcm8(samples: np.ndarray) -> np.ndarray:
    """Quantize float samples (-1.0 to 1.0) to unsigned 8-bit PCM."""
    scaled = np.round(np.asarray(samples, dtype=np.float64) * 128) + PCM_OFFSET
    return np.clip(scaled, 0, 255).astype(np.uint8)


def load_pcm8(path: str | Path, sample_rate: int) -> np.ndarray:
    """
    Load an audio file as mono unsigned 8-bit PCM.

    Channels are averaged and the audio is resampled when the file's rate
    differs from the requested one.

    Args:
        path: Any format soundfile can read
        sample_rate: Target sample rate (Hz)

    Returns:
        uint8 array of samples
    """
    samples, file_rate = sf.read(str(path), dtype="float32", always_2d=True)
    mono = samples.mean(axis=1)

    if file_rate != sample_rate:
        _logger.info(f"Resampling {path} from {file_rate} Hz to {sample_rate} Hz")
        common = math.gcd(file_rate, sample_rate)
        mono = signal.resample_poly(mono, sample_rate // common, file_rate // common)

    return float_to_pcm8(mono)


def save_pcm8(path: str | Path, pcm, sample_rate: int):
    """
    Save unsigned 8-bit PCM as an 8-bit WAV file.

    Args:
        path: Output path
        pcm: Unsigned 8-bit samples
        sample_rate: Sample rate (Hz)
    """
    # 16-bit values with an empty low byte map exactly onto PCM_U8
    data = (as_pcm8(pcm).astype(np.int16) - PCM_OFFSET) << 8
    sf.write(str(path), data, sample_rate, subtype="PCM_U8", format="WAV")


def encode_file(
    input_path: str | Path,
    output_path: str | Path,
    profile: Profile = DFPWM1A,
    sample_rate: Optional[int] = None,
    raw: bool = False,
) -> bytes:
    """
    Encode an audio file to a headerless DFPWM file.

    Args:
        input_path: Audio file, or raw unsigned 8-bit PCM if raw is set
        output_path: Output DFPWM path
        profile: Codec parameters
        sample_rate: Target sample rate (default: the profile's base rate)
        raw: Treat the input as headerless unsigned 8-bit mono PCM

    Returns:
        The encoded bytes
    """
    stream = DFPWMStream(profile, sample_rate)

    if raw:
        pcm = Path(input_path).read_bytes()
    else:
        pcm = load_pcm8(input_path, stream.sample_rate)

    stream.encode(pcm)
    encoded = stream.getvalue()
    Path(output_path).write_bytes(encoded)

    _logger.info(
        f"Encoded {len(pcm)} samples ({stream.duration:.2f}s) "
        f"to {output_path} [{len(encoded)} bytes]"
    )
    return encoded


def decode_file(
    input_path: str | Path,
    output_path: str | Path,
    profile: Profile = DFPWM1A,
    sample_rate: Optional[int] = None,
    offset: int = 0,
    raw: bool = False,
) -> bytes:
    """
    Decode a headerless DFPWM file.

    Args:
        input_path: DFPWM file
        output_path: Output WAV path, or raw PCM path if raw is set
        profile: Codec parameters the file was encoded with
        sample_rate: Sample rate of the stream (default: the profile's base rate)
        offset: Encoded byte offset to start decoding from
        raw: Write headerless unsigned 8-bit PCM instead of WAV

    Returns:
        The decoded PCM bytes
    """
    stream = DFPWMStream(profile, sample_rate, Path(input_path).read_bytes())
    stream.seek(offset)
    pcm = stream.decode()

    if raw:
        Path(output_path).write_bytes(pcm)
    else:
        save_pcm8(output_path, pcm, stream.sample_rate)

    _logger.info(f"Decoded {len(pcm)} samples from {input_path} to {output_path}")
    return pcm
