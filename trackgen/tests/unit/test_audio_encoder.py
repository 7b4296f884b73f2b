from __future__ import annotations

import io
import struct
import wave

import pytest

from trackgen.audio import (
    WAV_HEADER_SIZE,
    decode_wav,
    encode_wav,
    interleave,
    pcm16le_from_floats,
    read_wav_header,
    wav_header,
)
from trackgen.errors import EncodingError
from trackgen.models import SampleBuffer


def _raw_header(
    *,
    num_channels: int = 1,
    sample_rate: int = 8000,
    byte_rate: int | None = None,
    block_align: int | None = None,
    data_size: int = 0,
) -> bytes:
    if block_align is None:
        block_align = num_channels * 2
    if byte_rate is None:
        byte_rate = sample_rate * block_align
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        1,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        16,
        b"data",
        data_size,
    )


def _buffer(*channels: tuple[float, ...], sample_rate_hz: int = 8000) -> SampleBuffer:
    return SampleBuffer(sample_rate_hz=sample_rate_hz, channels=tuple(channels))


def test_zero_buffer_round_trips_through_stdlib_wave() -> None:
    buf = SampleBuffer.from_mono([0.0] * 1000, sample_rate_hz=22050, num_channels=2)

    blob = encode_wav(buf)

    assert blob.media_type == "audio/wav"
    assert len(blob) == 44 + 1000 * 2 * 2
    with wave.open(io.BytesIO(blob.data), "rb") as wav:
        assert wav.getnchannels() == 2
        assert wav.getframerate() == 22050
        assert wav.getsampwidth() == 2
        assert wav.getnframes() == 1000
        frames = wav.readframes(wav.getnframes())
    assert frames == b"\x00" * 4000

    decoded = decode_wav(blob.data)
    assert decoded.channels == ((0.0,) * 1000, (0.0,) * 1000)


def test_header_fields_at_fixed_offsets() -> None:
    buf = _buffer((0.1, 0.2, 0.3), (0.0, 0.0, 0.0), sample_rate_hz=44100)
    data = encode_wav(buf).data
    data_size = 3 * 2 * 2

    assert data[0:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 4)[0] == 36 + data_size
    assert data[8:12] == b"WAVE"
    assert data[12:16] == b"fmt "
    assert struct.unpack_from("<I", data, 16)[0] == 16
    assert struct.unpack_from("<H", data, 20)[0] == 1
    assert struct.unpack_from("<H", data, 22)[0] == 2
    assert struct.unpack_from("<I", data, 24)[0] == 44100
    assert struct.unpack_from("<I", data, 28)[0] == 44100 * 2 * 2
    assert struct.unpack_from("<H", data, 32)[0] == 4
    assert struct.unpack_from("<H", data, 34)[0] == 16
    assert data[36:40] == b"data"
    assert struct.unpack_from("<I", data, 40)[0] == data_size
    assert len(data) == WAV_HEADER_SIZE + data_size


def test_read_wav_header_recovers_layout() -> None:
    header = read_wav_header(wav_header(num_frames=500, sample_rate=16000, num_channels=1))

    assert header["num_channels"] == 1
    assert header["sample_rate"] == 16000
    assert header["data_size"] == 1000
    assert header["block_align"] == 2
    assert header["byte_rate"] == 32000


def test_frames_are_interleaved_channel_major() -> None:
    buf = _buffer((0.1, 0.2), (-0.1, -0.2))

    assert interleave(buf) == [0.1, -0.1, 0.2, -0.2]
    payload = encode_wav(buf).data[WAV_HEADER_SIZE:]
    assert struct.unpack("<4h", payload) == (3276, -3276, 6553, -6553)


def test_samples_are_clamped_and_truncated() -> None:
    pcm = pcm16le_from_floats([2.0, -2.0, 1.0, -1.0, 0.5, -0.5, 0.0])
    assert struct.unpack("<7h", pcm) == (32767, -32767, 32767, -32767, 16383, -16383, 0)


def test_out_of_range_samples_decode_within_full_scale() -> None:
    buf = _buffer((5.0, -5.0, 0.25))
    decoded = decode_wav(encode_wav(buf).data)

    assert decoded.channel(0)[0] == 1.0
    assert decoded.channel(0)[1] == -1.0
    assert decoded.channel(0)[2] == pytest.approx(0.25, abs=1 / 32767)


def test_mono_encoding_size() -> None:
    buf = SampleBuffer.from_mono([0.5] * 123, sample_rate_hz=8000, num_channels=1)
    assert len(encode_wav(buf)) == 44 + 123 * 2


@pytest.mark.parametrize(
    "buf",
    [
        _buffer((), ()),
        _buffer(),
        _buffer((0.0,), (0.0,), (0.0,)),
        _buffer((0.0, 0.0), (0.0,)),
        _buffer((0.0,), sample_rate_hz=0),
    ],
    ids=["empty", "no-channels", "three-channels", "ragged", "zero-rate"],
)
def test_invalid_buffers_raise_encoding_error(buf: SampleBuffer) -> None:
    with pytest.raises(EncodingError):
        encode_wav(buf)


def test_encoding_error_is_raised_before_header_is_built(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    from trackgen import audio

    def fail_header(*args, **kwargs):  # type: ignore[no-untyped-def]
        raise AssertionError("header must not be written for invalid buffers")

    monkeypatch.setattr(audio, "wav_header", fail_header)

    with pytest.raises(EncodingError):
        audio.encode_wav(_buffer((), ()))


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"RIFF",
        b"JUNK" + b"\x00" * 40,
        wav_header(num_frames=10, sample_rate=8000, num_channels=1),
        wav_header(num_frames=1, sample_rate=8000, num_channels=1, bits_per_sample=8)
        + b"\x00",
        _raw_header(block_align=0, data_size=4) + b"\x00" * 4,
        _raw_header(num_channels=2, block_align=6, data_size=6) + b"\x00" * 6,
        _raw_header(num_channels=3, data_size=6) + b"\x00" * 6,
        _raw_header(sample_rate=0, byte_rate=0, data_size=2) + b"\x00" * 2,
        _raw_header(byte_rate=1234, data_size=2) + b"\x00" * 2,
    ],
    ids=[
        "empty",
        "short",
        "not-riff",
        "truncated-payload",
        "8-bit",
        "zero-block-align",
        "stereo-block-align-6",
        "three-channels",
        "zero-rate",
        "byte-rate-mismatch",
    ],
)
def test_decode_rejects_malformed_containers(data: bytes) -> None:
    with pytest.raises(EncodingError):
        decode_wav(data)


def test_header_fields_that_overflow_32_bits_are_rejected() -> None:
    with pytest.raises(EncodingError):
        encode_wav(_buffer((0.0,), sample_rate_hz=5_000_000_000))


def test_payload_over_4_gib_is_rejected_before_packing() -> None:
    # range() gives the channel a length without allocating samples.
    huge = SampleBuffer(
        sample_rate_hz=8000,
        channels=(range(2**31), range(2**31)),  # type: ignore[arg-type]
    )
    with pytest.raises(EncodingError):
        encode_wav(huge)


def test_valid_raw_header_decodes() -> None:
    data = _raw_header(num_channels=2, data_size=8) + struct.pack("<4h", 1, 2, 3, 4)
    decoded = decode_wav(data)
    assert decoded.length == 2
    assert decoded.channel(0) == (1 / 32767, 3 / 32767)
    assert decoded.channel(1) == (2 / 32767, 4 / 32767)
