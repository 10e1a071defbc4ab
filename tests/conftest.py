"""
Shared fixtures for DFPWM tests.
"""

import numpy as np
import pytest


def make_sine(num_samples: int, freq: float, sample_rate: int, amplitude: float = 0.5) -> np.ndarray:
    """Unsigned 8-bit sine wave."""
    t = np.arange(num_samples) / sample_rate
    wave = np.round(np.sin(2 * np.pi * freq * t) * amplitude * 127) + 128
    return np.clip(wave, 0, 255).astype(np.uint8)


@pytest.fixture
def sine_pcm() -> np.ndarray:
    """512 samples of a 440 Hz tone at 48 kHz."""
    return make_sine(512, 440.0, 48000)
