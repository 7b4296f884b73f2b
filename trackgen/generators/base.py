from __future__ import annotations

import math
from typing import Protocol

from trackgen.errors import InvalidParameter
from trackgen.models import MAX_SAMPLE_RATE_HZ


SUPPORTED_CHANNEL_COUNTS = (1, 2)


class NoiseSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float:
        ...


def noise_sample(source: NoiseSource) -> float:
    """Draw one uniform noise value in [-1, 1)."""
    return source.random() * 2.0 - 1.0


def require_positive(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number <= 0:
        raise InvalidParameter(
            f"{name} must be a positive finite number, got {value!r}"
        )
    return number


def validate_output(sample_rate_hz: int, num_channels: int) -> None:
    if (
        isinstance(sample_rate_hz, bool)
        or not isinstance(sample_rate_hz, int)
        or not 0 < sample_rate_hz <= MAX_SAMPLE_RATE_HZ
    ):
        raise InvalidParameter(
            f"sample_rate_hz must be an integer in (0, {MAX_SAMPLE_RATE_HZ}], "
            f"got {sample_rate_hz!r}"
        )
    if num_channels not in SUPPORTED_CHANNEL_COUNTS:
        raise InvalidParameter(
            f"num_channels must be one of {SUPPORTED_CHANNEL_COUNTS}, got {num_channels!r}"
        )


def sample_count(sample_rate_hz: int, duration_s: float) -> int:
    """Number of samples per channel for a clip (round half to even)."""
    return int(round(sample_rate_hz * duration_s))


def fade_envelope(time_s: float, duration_s: float) -> float:
    """Linear 100ms fade-in / fade-out gain in [0, 1]."""
    gain = min(1.0, min(time_s * 10.0, (duration_s - time_s) * 10.0))
    return max(0.0, gain)
