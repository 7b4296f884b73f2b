from .api import CreateTrackRequest, HealthResponse, Preset, PresetsResponse
from .domain import (
    MAX_SAMPLE_RATE_HZ,
    WAV_MEDIA_TYPE,
    DrumPatternParameters,
    EncodedAudioBlob,
    GeneratedTrack,
    SampleBuffer,
    SamplePreset,
    ToneParameters,
)
from .waveform import TrackKind, Waveform

__all__ = [
    "CreateTrackRequest",
    "HealthResponse",
    "Preset",
    "PresetsResponse",
    "MAX_SAMPLE_RATE_HZ",
    "WAV_MEDIA_TYPE",
    "DrumPatternParameters",
    "EncodedAudioBlob",
    "GeneratedTrack",
    "SampleBuffer",
    "SamplePreset",
    "ToneParameters",
    "TrackKind",
    "Waveform",
]
