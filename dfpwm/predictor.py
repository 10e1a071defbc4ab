"""
Adaptive predictor shared by the DFPWM encoder, decoder and seek replay.

The predictor tracks an 8-bit signed level that chases the input signal
one bit at a time, and an 8-bit unsigned response that scales how far
each bit moves the level. Arithmetic is fixed-width: the level wraps on
overflow while the response saturates.
"""

from typing import NamedTuple

from .profile import Profile

LEVEL_MAX = 127
LEVEL_MIN = -128
RESPONSE_MAX = 255


class PredictorState(NamedTuple):
    """
    Predictor state after some number of bits.

    previous_level and filtered_level are only advanced by the decoder's
    smoothing step; the predictor transition leaves them untouched.
    """

    level: int = 0
    response: int = 0
    previous_bit: bool = False
    previous_level: int = 0
    filtered_level: int = 0


def wrap_int8(value: int) -> int:
    """Reduce to signed 8-bit with two's complement wraparound."""
    return ((value + 128) & 0xFF) - 128


def wrap_uint8(value: int) -> int:
    """Reduce to unsigned 8-bit with wraparound."""
    return value & 0xFF


def clamp_int8(value: int) -> int:
    """Saturate to the signed 8-bit range."""
    return max(LEVEL_MIN, min(LEVEL_MAX, value))


def adapt(state: PredictorState, bit: bool, profile: Profile) -> PredictorState:
    """
    Advance the predictor by one bit.

    Args:
        state: Current predictor state
        bit: Bit value to adapt to
        profile: Codec parameters

    Returns:
        New predictor state with level, response and previous_bit updated
    """
    precision = profile.response_precision_bits
    level = state.level
    response = state.response

    # Move the level toward the rail selected by the bit
    level_target = LEVEL_MAX if bit else LEVEL_MIN
    level_adapted = wrap_int8(
        level + ((response * (level_target - level) + (1 << (precision - 1))) >> precision)
    )

    # Scaled step rounded to zero, force one unit of progress
    if level_adapted == level and level != level_target:
        level_adapted = wrap_int8(level_adapted + (1 if bit else -1))

    bit_changed = bit != state.previous_bit
    response_target = 0 if bit_changed else (1 << precision) - 1

    response_adapted = response
    if not (profile.response_increment == 1 and profile.response_decrement == 1):
        response_delta = (
            profile.response_decrement if bit_changed else profile.response_increment
        )
        response_adapted = max(0, min(
            RESPONSE_MAX,
            response + ((response_delta * (response_target - response) + 0x80) >> 8),
        ))

    if response_adapted == response and response != response_target:
        response_adapted = wrap_uint8(response_adapted + (-1 if bit_changed else 1))

    if precision > 8:
        response_min = wrap_uint8(2 << (precision - 8))
        if response_adapted < response_min:
            response_adapted = response_min

    return state._replace(
        level=level_adapted,
        response=response_adapted,
        previous_bit=bool(bit),
    )
