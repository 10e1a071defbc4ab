"""
DFPWM - Dynamic Pulse Width Modulation
A 1-bit-per-sample adaptive predictive audio codec.
"""

__version__ = "0.1.0"

# Codec constants
PCM_OFFSET = 128  # unsigned 8-bit PCM midpoint
SAMPLES_PER_BYTE = 8  # one bit per sample, LSB first
DEFAULT_PROFILE_NAME = "dfpwm1a"

from .profile import Profile, DFPWM, DFPWM1A
from .predictor import PredictorState, adapt
from .encoder import quantize, encode_samples
from .decoder import decode_bit, decode_bits
from .stream import DFPWMStream
from .audio import encode_file, decode_file

PROFILES = {
    "dfpwm": DFPWM,
    "dfpwm1a": DFPWM1A,
}


def get_profile(name: str) -> Profile:
    """
    Look up a profile by name (case-insensitive).

    Raises:
        ValueError: If the name is not a known profile
    """
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise ValueError(f"Unknown profile '{name}' (known: {known})") from None


__all__ = [
    "Profile",
    "DFPWM",
    "DFPWM1A",
    "PROFILES",
    "get_profile",
    "PredictorState",
    "adapt",
    "quantize",
    "encode_samples",
    "decode_bit",
    "decode_bits",
    "DFPWMStream",
    "encode_file",
    "decode_file",
]
