"""
DFPWM Encoder - Quantizes unsigned 8-bit PCM to one bit per sample.
"""

from typing import Tuple

import numpy as np

from . import PCM_OFFSET, SAMPLES_PER_BYTE
from .decoder import decode_bit
from .predictor import LEVEL_MAX, PredictorState
from .profile import Profile


def as_pcm8(samples) -> np.ndarray:
    """
    Coerce bytes-like objects, integer sequences or arrays to a uint8 array.

    Raises:
        ValueError: If the samples are not integers in range(0, 256)
    """
    if isinstance(samples, (bytes, bytearray, memoryview)):
        return np.frombuffer(samples, dtype=np.uint8)

    pcm = np.asarray(samples)
    if pcm.size == 0:
        return np.zeros(0, dtype=np.uint8)
    if pcm.dtype.kind not in "biu":
        raise ValueError(f"PCM samples must be integers, got {pcm.dtype}")
    if pcm.min() < 0 or pcm.max() > 255:
        raise ValueError("PCM samples must be in range(0, 256)")
    return pcm.astype(np.uint8)


def quantize(sample_level: int, level: int) -> bool:
    """
    Choose the bit that moves the predictor toward a signed sample.

    A sample equal to the predicted level encodes 0, except at the top
    rail where it encodes 1 so full-scale input holds at +127.
    """
    return sample_level > level or (sample_level == level == LEVEL_MAX)


def encode_samples(
    state: PredictorState,
    samples,
    profile: Profile,
) -> Tuple[bytes, PredictorState]:
    """
    Encode unsigned 8-bit PCM samples.

    Bits are packed least-significant first, eight samples per byte. A
    trailing partial byte keeps its bits in the low positions and is
    zero-filled above them. The returned state has also stepped over
    those zero bits, so it matches what a decoder of the output reaches.

    Args:
        state: Predictor state to start from
        samples: Unsigned 8-bit PCM samples
        profile: Codec parameters

    Returns:
        Tuple of (encoded_bytes, final_state)
    """
    pcm = as_pcm8(samples)
    bits = np.zeros(len(pcm), dtype=np.uint8)

    for i, sample in enumerate(pcm.tolist()):
        bit = quantize(sample - PCM_OFFSET, state.level)
        # Run the full decode step so the smoothing filter tracks the
        # same bits a decoder would see
        state = decode_bit(state, bit, profile)
        bits[i] = bit

    for _ in range((-len(pcm)) % SAMPLES_PER_BYTE):
        state = decode_bit(state, False, profile)

    return np.packbits(bits, bitorder="little").tobytes(), state
