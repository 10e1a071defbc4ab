"""
DFPWM Stream - Seekable in-memory DFPWM audio with predictor resync.

The predictor state at any cursor position depends on every bit before
it, so moving the cursor replays the stream from the start up to the new
position. Bulk encode and decode passes advance the cursor themselves
and run with that replay suppressed.
"""

import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from . import SAMPLES_PER_BYTE
from .decoder import decode_bits, replay_bits
from .encoder import as_pcm8, encode_samples
from .predictor import PredictorState
from .profile import DFPWM1A, Profile

# Module-level logger
_logger = logging.getLogger(__name__)


class DFPWMStream:
    """
    DFPWM audio held in a growable byte buffer with a read/write cursor.

    Unless automatic adaptation is suppressed, the predictor state always
    equals the state reached by processing every bit from offset 0 up to
    the cursor.
    """

    def __init__(
        self,
        profile: Profile = DFPWM1A,
        sample_rate: Optional[int] = None,
        data: bytes = b"",
    ):
        """
        Initialize a stream.

        Args:
            profile: Codec parameters (default DFPWM1a)
            sample_rate: Playback rate in Hz (default: the profile's base rate)
            data: Initial encoded content; the cursor starts at offset 0
        """
        if profile is None:
            raise TypeError("profile must not be None")

        self._profile = profile
        self._sample_rate = 0
        self.sample_rate = profile.base_sample_rate if sample_rate is None else sample_rate

        self._buffer = io.BytesIO(data)
        self._state = PredictorState()
        self._suppress_auto_adapt = False

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, value: int):
        if value <= 0:
            raise ValueError("Sample rate must be greater than zero.")
        if not self._profile.is_recommended_rate(value):
            _logger.warning(
                f"Sample rate {value} Hz outside recommended range "
                f"{self._profile.min_sample_rate}-{self._profile.max_sample_rate} Hz "
                f"for {self._profile.name or 'profile'}"
            )
        self._sample_rate = value

    @property
    def state(self) -> PredictorState:
        """Predictor state at the cursor."""
        return self._state

    @property
    def suppressed(self) -> bool:
        """Whether cursor moves currently skip predictor resync."""
        return self._suppress_auto_adapt

    @property
    def length(self) -> int:
        with self._buffer.getbuffer() as view:
            return view.nbytes

    def __len__(self) -> int:
        return self.length

    @property
    def duration(self) -> float:
        """Playback duration in seconds at the stream's sample rate."""
        return self.length * SAMPLES_PER_BYTE / self._sample_rate

    def getvalue(self) -> bytes:
        """Return the full encoded content."""
        return self._buffer.getvalue()

    # Cursor

    @property
    def position(self) -> int:
        return self._buffer.tell()

    @position.setter
    def position(self, value: int):
        if value < 0:
            raise ValueError(f"Negative seek position {value}")
        if value == self._buffer.tell():
            return

        if not self._suppress_auto_adapt:
            self._resync(value)
        self._buffer.seek(value)

    def tell(self) -> int:
        return self.position

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move the cursor, resynchronizing the predictor.

        Args:
            offset: Byte offset
            whence: io.SEEK_SET, io.SEEK_CUR or io.SEEK_END

        Returns:
            New absolute position
        """
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self.position + offset
        elif whence == io.SEEK_END:
            target = self.length + offset
        else:
            raise ValueError(f"Invalid whence ({whence})")

        self.position = target
        return self.position

    def _resync(self, target: int):
        """Rebuild predictor state for a cursor about to move to target."""
        self._state = PredictorState()

        # Offset 0 is the zero state; at or past the end there is nothing
        # to replay until more data is written
        if not 0 < target < self.length:
            return

        _logger.debug(f"Resynchronizing predictor over {target} bytes")
        self._buffer.seek(0)
        self._state = replay_bits(self._state, self._buffer.read(target), self._profile)

    @contextmanager
    def suppress_auto_adapt(self) -> Iterator["DFPWMStream"]:
        """
        Suspend predictor resync on cursor moves for the duration of a block.

        The previous setting is restored on every exit path, so nested
        blocks leave suppression off once the outermost block exits.
        """
        previous = self._suppress_auto_adapt
        self._suppress_auto_adapt = True
        try:
            yield self
        finally:
            self._suppress_auto_adapt = previous

    # Raw access

    def read(self, size: int = -1) -> bytes:
        """Read raw encoded bytes, advancing the predictor over them."""
        data = self._buffer.read(size)
        self._state = replay_bits(self._state, data, self._profile)
        return data

    def read_byte(self) -> Optional[int]:
        """Read one raw encoded byte, or None at end of data."""
        data = self.read(1)
        return data[0] if data else None

    def write(self, data: bytes) -> int:
        """
        Write raw encoded bytes at the cursor, advancing the predictor over them.

        After a seek to or past the end of data the predictor restarts from
        the zero state; it is not replayed over earlier content or over the
        zero-filled gap a past-end seek leaves behind.
        """
        written = self._buffer.write(data)
        self._state = replay_bits(self._state, data, self._profile)
        return written

    def write_byte(self, value: int):
        if not 0 <= value <= 0xFF:
            raise ValueError("byte must be in range(0, 256)")
        self.write(bytes((value,)))

    # Codec

    def encode(self, pcm, length: Optional[int] = None) -> int:
        """
        Encode unsigned 8-bit PCM into the stream at the cursor.

        Args:
            pcm: Bytes-like object, numpy array or binary file object
            length: Maximum number of samples to encode (default: all)

        Returns:
            Number of encoded bytes written
        """
        if length is not None and length < 0:
            raise ValueError("length must be non-negative")

        with self.suppress_auto_adapt():
            if hasattr(pcm, "read"):
                samples = as_pcm8(pcm.read() if length is None else pcm.read(length))
            else:
                samples = as_pcm8(pcm)
                if length is not None:
                    samples = samples[:length]

            encoded, self._state = encode_samples(self._state, samples, self._profile)
            self._buffer.write(encoded)

        _logger.debug(f"Encoded {len(samples)} samples into {len(encoded)} bytes")
        return len(encoded)

    def decode(self, pcm_out: Optional[BinaryIO] = None, length: Optional[int] = None) -> bytes:
        """
        Decode encoded bytes from the cursor into unsigned 8-bit PCM.

        Args:
            pcm_out: Optional binary file object receiving the PCM output
            length: Number of encoded bytes to decode (default: to the end)

        Returns:
            Decoded PCM, eight bytes per encoded byte
        """
        if length is not None and length < 0:
            raise ValueError("length must be non-negative")

        with self.suppress_auto_adapt():
            data = self._buffer.read(-1 if length is None else length)
            pcm, self._state = decode_bits(self._state, data, self._profile)
            if pcm_out is not None:
                pcm_out.write(pcm)

        _logger.debug(f"Decoded {len(data)} bytes into {len(pcm)} samples")
        return pcm

    def __repr__(self) -> str:
        return (
            f"DFPWMStream(profile={self._profile!r}, sample_rate={self._sample_rate}, "
            f"length={self.length}, position={self.position})"
        )
