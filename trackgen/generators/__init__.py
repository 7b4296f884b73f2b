from .base import NoiseSource, SUPPORTED_CHANNEL_COUNTS, sample_count
from .drums import beat_interval_samples, generate_drum_beat
from .tone import coerce_waveform, generate_tone

__all__ = [
    "NoiseSource",
    "SUPPORTED_CHANNEL_COUNTS",
    "sample_count",
    "beat_interval_samples",
    "generate_drum_beat",
    "coerce_waveform",
    "generate_tone",
]
