from __future__ import annotations

import math
import random
from typing import Optional

from trackgen.errors import InvalidParameter
from trackgen.models import SampleBuffer

from .base import (
    NoiseSource,
    noise_sample,
    require_positive,
    sample_count,
    validate_output,
)


BEATS_PER_CYCLE = 4
KICK_BEATS = (0, 2)
SNARE_BEATS = (1, 3)

KICK_FREQUENCY_HZ = 60.0
KICK_GAIN = 0.8
SNARE_GAIN = 0.6
HIHAT_GAIN = 0.3

# Fraction of a beat during which kick/snare (and hi-hat) sound.
HIT_WINDOW = 0.1
HIHAT_WINDOW = 0.05

MASTER_HEADROOM = 0.5


def beat_interval_samples(tempo_bpm: float, sample_rate_hz: int) -> float:
    """Length of one beat in (fractional) samples."""
    return (60.0 / tempo_bpm) * sample_rate_hz


def beat_frame(index: int, beat_interval: float) -> tuple[float, int]:
    """Return (beat_position in [0, 1), beat_number in 0..3) for a sample."""
    beat_position = (index % beat_interval) / beat_interval
    beat_number = math.floor(index / beat_interval) % BEATS_PER_CYCLE
    return beat_position, beat_number


def kick_sample(beat_number: int, beat_position: float) -> float:
    if beat_number not in KICK_BEATS or beat_position >= HIT_WINDOW:
        return 0.0
    return (
        math.sin(2.0 * math.pi * KICK_FREQUENCY_HZ * beat_position * 10.0)
        * math.exp(-beat_position * 20.0)
        * KICK_GAIN
    )


def snare_gate(beat_number: int, beat_position: float) -> bool:
    return beat_number in SNARE_BEATS and beat_position < HIT_WINDOW


def hihat_gate(index: int, beat_interval: float, beat_position: float) -> bool:
    """Active in the first sixteenth of every eighth note, near the beat start."""
    if beat_position >= HIHAT_WINDOW:
        return False
    eighth = beat_interval / 2.0
    sixteenth_slot = math.floor((index % eighth) / (beat_interval / 8.0))
    return sixteenth_slot == 0


def drum_sample(index: int, beat_interval: float, noise: NoiseSource) -> float:
    """Mixed kick + snare + hi-hat value for one sample, after master headroom."""
    beat_position, beat_number = beat_frame(index, beat_interval)

    value = kick_sample(beat_number, beat_position)

    if snare_gate(beat_number, beat_position):
        value += noise_sample(noise) * math.exp(-beat_position * 15.0) * SNARE_GAIN

    if hihat_gate(index, beat_interval, beat_position):
        value += noise_sample(noise) * math.exp(-beat_position * 30.0) * HIHAT_GAIN

    return value * MASTER_HEADROOM


def generate_drum_beat(
    tempo_bpm: float,
    duration_s: float,
    *,
    sample_rate_hz: int = 44100,
    num_channels: int = 2,
    noise: Optional[NoiseSource] = None,
) -> SampleBuffer:
    """Render a four-beat kick/snare/hi-hat loop.

    Snare and hi-hat layers draw from ``noise``; when omitted, an unseeded
    ``random.Random`` private to this call is used. The mono mix is copied to
    every channel and is not clipped here.
    """
    tempo_bpm = require_positive("tempo_bpm", tempo_bpm)
    duration_s = require_positive("duration_s", duration_s)
    validate_output(sample_rate_hz, num_channels)

    n = sample_count(sample_rate_hz, duration_s)
    if n <= 0:
        raise InvalidParameter(
            f"duration_s={duration_s} yields no samples at {sample_rate_hz}Hz"
        )

    source: NoiseSource = noise if noise is not None else random.Random()
    beat_interval = beat_interval_samples(tempo_bpm, sample_rate_hz)

    samples = [drum_sample(i, beat_interval, source) for i in range(n)]

    return SampleBuffer.from_mono(
        samples, sample_rate_hz=sample_rate_hz, num_channels=num_channels
    )
