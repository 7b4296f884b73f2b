from .presets import SAMPLE_TRACKS, PresetRepository

__all__ = [
    "SAMPLE_TRACKS",
    "PresetRepository",
]
