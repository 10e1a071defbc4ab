"""
Tests for the seekable DFPWM stream.
"""

import io
import logging

import pytest

from dfpwm import DFPWM, DFPWM1A, DFPWMStream, PredictorState, decode_bits


def state_after(data: bytes, profile) -> PredictorState:
    """State reached by sequentially processing data from offset 0."""
    _, state = decode_bits(PredictorState(), data, profile)
    return state


class FailingSink(io.RawIOBase):
    def writable(self):
        return True

    def write(self, data):
        raise OSError("disk full")


class FailingSource(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device unplugged")


@pytest.fixture
def encoded_stream(sine_pcm) -> DFPWMStream:
    stream = DFPWMStream(DFPWM)
    stream.encode(sine_pcm)
    return stream


class TestConstruction:
    """Test constructor defaults and validation."""

    def test_defaults(self):
        stream = DFPWMStream()
        assert stream.profile is DFPWM1A
        assert stream.sample_rate == 48000
        assert stream.length == 0
        assert stream.position == 0
        assert stream.state == PredictorState()
        assert stream.suppressed is False

    def test_profile_base_rate(self):
        assert DFPWMStream(DFPWM).sample_rate == 32768

    def test_explicit_rate(self):
        assert DFPWMStream(DFPWM1A, 24000).sample_rate == 24000

    def test_missing_profile(self):
        with pytest.raises(TypeError):
            DFPWMStream(None)

    def test_zero_sample_rate(self):
        with pytest.raises(ValueError, match="greater than zero"):
            DFPWMStream(DFPWM1A, 0)

    def test_sample_rate_setter(self):
        stream = DFPWMStream()
        stream.sample_rate = 96000
        assert stream.sample_rate == 96000
        with pytest.raises(ValueError):
            stream.sample_rate = 0
        with pytest.raises(ValueError):
            stream.sample_rate = -1
        assert stream.sample_rate == 96000

    def test_unusual_rate_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dfpwm.stream"):
            stream = DFPWMStream(DFPWM1A, 8000)
        assert stream.sample_rate == 8000
        assert "outside recommended range" in caplog.text

    def test_initial_data(self):
        stream = DFPWMStream(DFPWM, data=b"\x01\x02\x03")
        assert len(stream) == 3
        assert stream.position == 0
        assert stream.getvalue() == b"\x01\x02\x03"

    def test_duration(self):
        stream = DFPWMStream(DFPWM1A, data=bytes(6000))
        assert stream.duration == pytest.approx(1.0)


class TestEncodeDecode:
    """Test bulk passes through the stream."""

    def test_silence_round_trip(self):
        stream = DFPWMStream(DFPWM1A)
        assert stream.encode(bytes([128] * 8)) == 1
        assert stream.getvalue() == b"\xaa"

        stream.seek(0)
        assert stream.decode() == bytes([127] + [128] * 7)

    def test_encode_from_file_object(self, sine_pcm):
        from_file = DFPWMStream(DFPWM)
        from_file.encode(io.BytesIO(sine_pcm.tobytes()))

        from_array = DFPWMStream(DFPWM)
        from_array.encode(sine_pcm)

        assert from_file.getvalue() == from_array.getvalue()

    def test_encode_length_bound(self):
        source = io.BytesIO(bytes([255] * 16))
        stream = DFPWMStream(DFPWM)
        assert stream.encode(source, length=5) == 1
        assert stream.getvalue() == b"\x1f"
        assert source.tell() == 5

    def test_partial_byte_keeps_state_in_step(self):
        stream = DFPWMStream(DFPWM1A)
        assert stream.encode(bytes([200] * 5)) == 1
        assert stream.state == state_after(stream.getvalue(), DFPWM1A)

        assert stream.encode(bytes([60] * 11)) == 2
        assert stream.state == state_after(stream.getvalue(), DFPWM1A)

    def test_encode_appends_continuously(self, sine_pcm):
        chunked = DFPWMStream(DFPWM1A)
        chunked.encode(sine_pcm[:256])
        chunked.encode(sine_pcm[256:])

        whole = DFPWMStream(DFPWM1A)
        whole.encode(sine_pcm)

        assert chunked.getvalue() == whole.getvalue()

    def test_decode_to_sink(self, encoded_stream):
        encoded_stream.seek(0)
        sink = io.BytesIO()
        pcm = encoded_stream.decode(sink)
        assert sink.getvalue() == pcm
        assert len(pcm) == 8 * len(encoded_stream)

    def test_decode_length(self, encoded_stream):
        encoded_stream.seek(0)
        first = encoded_stream.decode(length=10)
        rest = encoded_stream.decode()

        encoded_stream.seek(0)
        assert first + rest == encoded_stream.decode()
        assert len(first) == 80

    def test_decode_at_end_is_empty(self, encoded_stream):
        assert encoded_stream.decode() == b""

    def test_negative_lengths(self, encoded_stream):
        with pytest.raises(ValueError):
            encoded_stream.encode(b"\x80", length=-1)
        with pytest.raises(ValueError):
            encoded_stream.decode(length=-1)

    def test_deterministic(self, sine_pcm):
        a = DFPWMStream(DFPWM1A)
        b = DFPWMStream(DFPWM1A)
        a.encode(sine_pcm)
        b.encode(sine_pcm)
        assert a.getvalue() == b.getvalue()

        a.seek(0)
        b.seek(0)
        assert a.decode() == b.decode()


class TestSeek:
    """Test predictor resync on cursor moves."""

    def test_decode_after_seek_matches_sequential(self, encoded_stream):
        encoded_stream.seek(0)
        sequential = encoded_stream.decode()

        for offset in range(len(encoded_stream)):
            encoded_stream.position = offset
            assert encoded_stream.decode(length=1) == sequential[8 * offset:8 * offset + 8]

    def test_seek_restores_state(self, encoded_stream):
        data = encoded_stream.getvalue()
        for offset in (1, 7, 31, len(data) - 1):
            encoded_stream.seek(offset)
            assert encoded_stream.position == offset
            assert encoded_stream.state == state_after(data[:offset], DFPWM)

    def test_seek_to_start_resets(self, encoded_stream):
        encoded_stream.seek(0)
        assert encoded_stream.state == PredictorState()

    def test_seek_to_end_resets(self, encoded_stream):
        encoded_stream.seek(3)
        encoded_stream.seek(0, io.SEEK_END)
        assert encoded_stream.position == len(encoded_stream)
        assert encoded_stream.state == PredictorState()

    def test_seek_past_end_resets(self, encoded_stream):
        encoded_stream.seek(len(encoded_stream) + 10)
        assert encoded_stream.state == PredictorState()

    def test_seek_whence(self, encoded_stream):
        length = len(encoded_stream)
        assert encoded_stream.seek(-4, io.SEEK_END) == length - 4
        assert encoded_stream.seek(2, io.SEEK_CUR) == length - 2
        assert encoded_stream.tell() == length - 2

    def test_invalid_seeks(self, encoded_stream):
        with pytest.raises(ValueError):
            encoded_stream.seek(-1)
        with pytest.raises(ValueError):
            encoded_stream.seek(0, 3)

    def test_same_position_keeps_state(self, encoded_stream):
        encoded_stream.seek(5)
        state = encoded_stream.state
        encoded_stream.position = 5
        assert encoded_stream.state == state

    def test_encode_after_seek_overwrites_in_place(self, sine_pcm):
        stream = DFPWMStream(DFPWM)
        stream.encode(sine_pcm)
        original = stream.getvalue()

        stream.seek(16)
        stream.encode(sine_pcm[128:])
        assert stream.getvalue() == original


class TestSuppression:
    """Test the scoped suppression guard."""

    def test_scope_restores_flag(self):
        stream = DFPWMStream()
        with stream.suppress_auto_adapt() as guarded:
            assert guarded is stream
            assert stream.suppressed is True
        assert stream.suppressed is False

    def test_nested_scopes(self):
        stream = DFPWMStream()
        with stream.suppress_auto_adapt():
            with stream.suppress_auto_adapt():
                assert stream.suppressed is True
            assert stream.suppressed is True
        assert stream.suppressed is False

    def test_restored_after_exception(self):
        stream = DFPWMStream()
        with pytest.raises(RuntimeError):
            with stream.suppress_auto_adapt():
                raise RuntimeError("boom")
        assert stream.suppressed is False

    def test_suppressed_seek_skips_resync(self, encoded_stream):
        state = encoded_stream.state
        with encoded_stream.suppress_auto_adapt():
            encoded_stream.position = 3
            assert encoded_stream.state == state
        assert encoded_stream.position == 3

    def test_failing_sink_propagates(self, encoded_stream):
        encoded_stream.seek(0)
        with pytest.raises(OSError, match="disk full"):
            encoded_stream.decode(FailingSink())
        assert encoded_stream.suppressed is False

    def test_failing_source_propagates(self):
        stream = DFPWMStream()
        with pytest.raises(OSError, match="device unplugged"):
            stream.encode(FailingSource())
        assert stream.suppressed is False


class TestRawAccess:
    """Raw reads and writes keep the predictor in step with the cursor."""

    def test_write_advances_state(self):
        data = bytes(range(0, 256, 7))
        stream = DFPWMStream(DFPWM)
        assert stream.write(data) == len(data)
        assert stream.position == len(data)
        assert stream.state == state_after(data, DFPWM)

    def test_read_advances_state(self):
        data = bytes(range(0, 256, 7))
        stream = DFPWMStream(DFPWM, data=data)
        assert stream.read(4) == data[:4]
        assert stream.state == state_after(data[:4], DFPWM)

    def test_write_after_past_end_seek_restarts(self):
        stream = DFPWMStream(DFPWM, data=b"\xff" * 4)
        stream.seek(8)
        stream.write(b"\x0f")
        assert stream.getvalue() == b"\xff" * 4 + bytes(4) + b"\x0f"
        assert stream.state == state_after(b"\x0f", DFPWM)

    def test_read_byte(self):
        stream = DFPWMStream(DFPWM, data=b"\x10\x20")
        assert stream.read_byte() == 0x10
        assert stream.read_byte() == 0x20
        assert stream.read_byte() is None

    def test_write_byte(self):
        stream = DFPWMStream(DFPWM)
        stream.write_byte(0xAA)
        assert stream.getvalue() == b"\xaa"
        with pytest.raises(ValueError):
            stream.write_byte(256)

    def test_repr(self):
        assert "length=0" in repr(DFPWMStream())
