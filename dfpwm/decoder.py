"""
DFPWM Decoder - Reconstructs unsigned 8-bit PCM from packed bits.
"""

from typing import Tuple

import numpy as np

from . import PCM_OFFSET
from .predictor import PredictorState, adapt, clamp_int8, wrap_int8
from .profile import Profile


def decode_bit(state: PredictorState, bit: bool, profile: Profile) -> PredictorState:
    """
    Advance the predictor by one bit and update the smoothing filter.

    On a polarity flip the output averages the levels before and after
    the transition, halving the visible step. The result then passes
    through a one-pole low-pass filter that saturates at the 8-bit rails.

    Args:
        state: Current state
        bit: Encoded bit
        profile: Codec parameters

    Returns:
        New state; filtered_level holds the signed output sample
    """
    adapted = adapt(state, bit, profile)

    if bit != state.previous_bit:
        blended = wrap_int8((state.level + adapted.level + 1) >> 1)
    else:
        blended = adapted.level

    filtered = state.filtered_level
    filtered = clamp_int8(
        filtered
        + ((profile.low_pass_filter_strength * (blended - filtered) + 0x80) >> 8)
    )

    return adapted._replace(previous_level=state.level, filtered_level=filtered)


def decode_bits(
    state: PredictorState,
    packed,
    profile: Profile,
) -> Tuple[bytes, PredictorState]:
    """
    Decode packed DFPWM bytes, least-significant bit first.

    Args:
        state: State to start from
        packed: Encoded bytes
        profile: Codec parameters

    Returns:
        Tuple of (pcm_bytes, final_state), eight PCM bytes per input byte
    """
    data = np.frombuffer(bytes(packed), dtype=np.uint8)
    bits = np.unpackbits(data, bitorder="little")
    pcm = np.empty(len(bits), dtype=np.uint8)

    for i, bit in enumerate(bits.tolist()):
        state = decode_bit(state, bool(bit), profile)
        pcm[i] = state.filtered_level + PCM_OFFSET

    return pcm.tobytes(), state


def replay_bits(state: PredictorState, packed, profile: Profile) -> PredictorState:
    """
    Advance the state over packed DFPWM bytes without producing output.

    Args:
        state: State to start from
        packed: Encoded bytes
        profile: Codec parameters

    Returns:
        State after the last bit
    """
    data = np.frombuffer(bytes(packed), dtype=np.uint8)
    for bit in np.unpackbits(data, bitorder="little").tolist():
        state = decode_bit(state, bool(bit), profile)
    return state
