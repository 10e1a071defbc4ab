"""
DFPWM codec profiles.
"""

from typing import Optional


class Profile:
    """
    Parameter set for DFPWM encoding and decoding.

    Holds the response adaptation steps, the fixed-point precision of the
    response scale, the decoder's low-pass filter strength and the base
    sample rate. Instances are immutable.
    """

    __slots__ = (
        "_response_increment",
        "_response_decrement",
        "_response_precision_bits",
        "_low_pass_filter_strength",
        "_base_sample_rate",
        "_name",
    )

    def __init__(
        self,
        response_increment: int,
        response_decrement: int,
        response_precision_bits: int,
        low_pass_filter_strength: int,
        base_sample_rate: int,
        name: Optional[str] = None,
    ):
        """
        Initialize a profile.

        Args:
            response_increment: Response step while the bit value repeats
            response_decrement: Response step when the bit value flips
            response_precision_bits: Width of the fixed-point response scale
            low_pass_filter_strength: Strength of the decoder's smoothing filter
            base_sample_rate: Default playback rate (Hz)
            name: Optional display name
        """
        object.__setattr__(self, "_response_increment", response_increment)
        object.__setattr__(self, "_response_decrement", response_decrement)
        object.__setattr__(self, "_response_precision_bits", response_precision_bits)
        object.__setattr__(self, "_low_pass_filter_strength", low_pass_filter_strength)
        object.__setattr__(self, "_base_sample_rate", base_sample_rate)
        object.__setattr__(self, "_name", name)

    def __setattr__(self, key, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, key):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def response_increment(self) -> int:
        return self._response_increment

    @property
    def response_decrement(self) -> int:
        return self._response_decrement

    @property
    def response_precision_bits(self) -> int:
        return self._response_precision_bits

    @property
    def low_pass_filter_strength(self) -> int:
        return self._low_pass_filter_strength

    @property
    def base_sample_rate(self) -> int:
        return self._base_sample_rate

    @property
    def min_sample_rate(self) -> int:
        """Lowest recommended playback rate, a quarter of the base rate."""
        return self._base_sample_rate // 4

    @property
    def max_sample_rate(self) -> int:
        """Highest recommended playback rate, twice the base rate."""
        return self._base_sample_rate * 2

    @property
    def name(self) -> Optional[str]:
        return self._name

    def is_recommended_rate(self, sample_rate: int) -> bool:
        """Check a sample rate against the range supported by playback hardware."""
        return self.min_sample_rate <= sample_rate <= self.max_sample_rate

    def _key(self) -> tuple:
        return (
            self._response_increment,
            self._response_decrement,
            self._response_precision_bits,
            self._low_pass_filter_strength,
            self._base_sample_rate,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        label = f"{self._name}: " if self._name else ""
        return (
            f"Profile({label}inc={self._response_increment}, "
            f"dec={self._response_decrement}, "
            f"prec={self._response_precision_bits}, "
            f"lpf={self._low_pass_filter_strength}, "
            f"rate={self._base_sample_rate})"
        )


# Original profile, as played by Computronics on Minecraft 1.7.10
DFPWM = Profile(7, 20, 8, 100, 32768, name="DFPWM")

# Revised profile, the default for new streams
DFPWM1A = Profile(1, 1, 10, 140, 48000, name="DFPWM1a")
