from __future__ import annotations

import math
from typing import Callable, Dict

from trackgen.errors import InvalidParameter
from trackgen.models import SampleBuffer, Waveform

from .base import (
    fade_envelope,
    require_positive,
    sample_count,
    validate_output,
)


# Output gain applied after the envelope.
TONE_HEADROOM = 0.3


def _sine(phase: float) -> float:
    return math.sin(2.0 * math.pi * phase)


def _square(phase: float) -> float:
    # sin == 0 resolves to +1 so the wave never takes an intermediate value.
    return 1.0 if math.sin(2.0 * math.pi * phase) >= 0 else -1.0


def _sawtooth(phase: float) -> float:
    return 2.0 * (phase - math.floor(phase + 0.5))


def _triangle(phase: float) -> float:
    return 2.0 * abs(2.0 * (phase - math.floor(phase + 0.5))) - 1.0


# Each oscillator takes the phase in cycles, f * t.
OSCILLATORS: Dict[Waveform, Callable[[float], float]] = {
    Waveform.SINE: _sine,
    Waveform.SQUARE: _square,
    Waveform.SAWTOOTH: _sawtooth,
    Waveform.TRIANGLE: _triangle,
}


def coerce_waveform(waveform: Waveform | str) -> Waveform:
    try:
        return Waveform(waveform)
    except ValueError as exc:
        raise InvalidParameter(f"Unsupported waveform '{waveform}'") from exc


def tone_sample(
    waveform: Waveform,
    frequency_hz: float,
    time_s: float,
    duration_s: float,
) -> float:
    """Enveloped, attenuated value of a single tone sample."""
    raw = OSCILLATORS[waveform](frequency_hz * time_s)
    return raw * fade_envelope(time_s, duration_s) * TONE_HEADROOM


def generate_tone(
    frequency_hz: float,
    duration_s: float,
    waveform: Waveform | str = Waveform.SINE,
    *,
    sample_rate_hz: int = 44100,
    num_channels: int = 2,
) -> SampleBuffer:
    """Render a periodic waveform with a 100ms fade at both ends.

    All channels carry the same samples. Raises ``InvalidParameter`` before
    any samples are allocated.
    """
    frequency_hz = require_positive("frequency_hz", frequency_hz)
    duration_s = require_positive("duration_s", duration_s)
    kind = coerce_waveform(waveform)
    validate_output(sample_rate_hz, num_channels)

    n = sample_count(sample_rate_hz, duration_s)
    if n <= 0:
        raise InvalidParameter(
            f"duration_s={duration_s} yields no samples at {sample_rate_hz}Hz"
        )

    samples = [
        tone_sample(kind, frequency_hz, i / sample_rate_hz, duration_s)
        for i in range(n)
    ]

    return SampleBuffer.from_mono(
        samples, sample_rate_hz=sample_rate_hz, num_channels=num_channels
    )
