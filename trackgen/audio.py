from __future__ import annotations

import struct
from typing import Iterable

from trackgen.errors import EncodingError
from trackgen.logging_utils import get_logger
from trackgen.models import WAV_MEDIA_TYPE, EncodedAudioBlob, SampleBuffer


logger = get_logger(__name__)


WAV_HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
PCM16_FULL_SCALE = 32767.0
SUPPORTED_CHANNEL_COUNTS = (1, 2)
UINT32_MAX = 0xFFFFFFFF

_HEADER_FORMAT = '<4sI4s4sIHHIIHH4sI'


def pcm16le_from_floats(samples: Iterable[float]) -> bytes:
    # Clamp to [-1.0, 1.0] and truncate toward zero into 16-bit little-endian PCM
    ints = [int(max(-1.0, min(1.0, float(s))) * PCM16_FULL_SCALE) for s in samples]
    return struct.pack(f'<{len(ints)}h', *ints)


def wav_header(
    num_frames: int,
    sample_rate: int,
    num_channels: int = 1,
    bits_per_sample: int = BITS_PER_SAMPLE,
) -> bytes:
    byte_rate = sample_rate * num_channels * bits_per_sample // 8
    block_align = num_channels * bits_per_sample // 8
    data_size = num_frames * block_align
    riff_size = 36 + data_size
    return struct.pack(
        _HEADER_FORMAT,
        b'RIFF',
        riff_size,
        b'WAVE',
        b'fmt ',
        16,  # Subchunk1Size for PCM
        1,   # AudioFormat PCM
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b'data',
        data_size,
    )


def interleave(buffer: SampleBuffer) -> list[float]:
    """Flatten channels frame by frame: L0 R0 L1 R1 ..."""
    if buffer.num_channels == 1:
        return list(buffer.channels[0])
    out: list[float] = []
    for frame in zip(*buffer.channels):
        out.extend(frame)
    return out


def _validate_for_encoding(buffer: SampleBuffer) -> None:
    if buffer.num_channels not in SUPPORTED_CHANNEL_COUNTS:
        raise EncodingError(
            f"Unsupported channel count {buffer.num_channels}; "
            f"expected one of {SUPPORTED_CHANNEL_COUNTS}"
        )
    if buffer.length == 0:
        raise EncodingError("Cannot encode an empty sample buffer")
    if any(len(ch) != buffer.length for ch in buffer.channels):
        raise EncodingError("All channels must have the same length")
    if buffer.sample_rate_hz <= 0:
        raise EncodingError(f"Invalid sample rate {buffer.sample_rate_hz}")
    block_align = buffer.num_channels * BITS_PER_SAMPLE // 8
    # RIFF size, byte rate and data size are unsigned 32-bit header fields.
    if buffer.sample_rate_hz * block_align > UINT32_MAX:
        raise EncodingError(
            f"Sample rate {buffer.sample_rate_hz} is too high for a WAV header"
        )
    if 36 + buffer.length * block_align > UINT32_MAX:
        raise EncodingError(
            f"{buffer.length} frames exceed the 4 GiB WAV size limit"
        )


def encode_wav(buffer: SampleBuffer) -> EncodedAudioBlob:
    """Serialize a buffer into a 16-bit PCM WAV container.

    The result is always ``44 + length * channels * 2`` bytes long. Invalid
    buffers raise ``EncodingError`` before any bytes are produced.
    """
    _validate_for_encoding(buffer)

    header = wav_header(
        num_frames=buffer.length,
        sample_rate=buffer.sample_rate_hz,
        num_channels=buffer.num_channels,
    )
    pcm = pcm16le_from_floats(interleave(buffer))

    logger.debug(
        "Encoded %d frames x %d ch @%dHz (%d bytes)",
        buffer.length,
        buffer.num_channels,
        buffer.sample_rate_hz,
        len(header) + len(pcm),
    )
    return EncodedAudioBlob(data=header + pcm, media_type=WAV_MEDIA_TYPE)


def read_wav_header(data: bytes) -> dict[str, int]:
    """Parse the canonical 44-byte header into its numeric fields."""
    if len(data) < WAV_HEADER_SIZE:
        raise EncodingError(
            f"WAV data too short for header ({len(data)} < {WAV_HEADER_SIZE} bytes)"
        )
    (
        riff,
        riff_size,
        wave_id,
        fmt_id,
        fmt_size,
        audio_format,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_id,
        data_size,
    ) = struct.unpack(_HEADER_FORMAT, data[:WAV_HEADER_SIZE])

    if riff != b'RIFF' or wave_id != b'WAVE':
        raise EncodingError("Not a RIFF/WAVE container")
    if fmt_id != b'fmt ' or fmt_size != 16 or data_id != b'data':
        raise EncodingError("Unsupported WAV chunk layout")
    if audio_format != 1 or bits_per_sample != BITS_PER_SAMPLE:
        raise EncodingError(
            f"Only 16-bit PCM is supported (format={audio_format}, bits={bits_per_sample})"
        )
    if num_channels not in SUPPORTED_CHANNEL_COUNTS:
        raise EncodingError(f"Unsupported channel count {num_channels}")
    if sample_rate <= 0:
        raise EncodingError(f"Invalid sample rate {sample_rate}")
    if block_align != num_channels * BITS_PER_SAMPLE // 8:
        raise EncodingError(
            f"block_align={block_align} does not match {num_channels} x 16-bit channels"
        )
    if byte_rate != sample_rate * block_align:
        raise EncodingError(
            f"byte_rate={byte_rate} does not match sample_rate x block_align"
        )

    return {
        "riff_size": riff_size,
        "num_channels": num_channels,
        "sample_rate": sample_rate,
        "byte_rate": byte_rate,
        "block_align": block_align,
        "bits_per_sample": bits_per_sample,
        "data_size": data_size,
    }


def decode_wav(data: bytes) -> SampleBuffer:
    """Read a container written by ``encode_wav`` back into float samples."""
    header = read_wav_header(data)
    num_channels = header["num_channels"]

    payload = data[WAV_HEADER_SIZE:WAV_HEADER_SIZE + header["data_size"]]
    if len(payload) != header["data_size"] or len(payload) % header["block_align"]:
        raise EncodingError(
            f"Truncated WAV payload ({len(payload)} of {header['data_size']} bytes)"
        )

    ints = struct.unpack(f'<{len(payload) // 2}h', payload)
    channels = tuple(
        tuple(v / PCM16_FULL_SCALE for v in ints[ch::num_channels])
        for ch in range(num_channels)
    )
    return SampleBuffer(sample_rate_hz=header["sample_rate"], channels=channels)
