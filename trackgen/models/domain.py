from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .waveform import TrackKind, Waveform


WAV_MEDIA_TYPE = "audio/wav"

# Highest output rate accepted by the generators and the HTTP/CLI layers.
MAX_SAMPLE_RATE_HZ = 384_000


@dataclass(frozen=True)
class SampleBuffer:
    """Per-channel float samples produced by a generator.

    Samples are nominally in [-1.0, 1.0]; values outside that range are
    clamped by the encoder, not here.
    """

    sample_rate_hz: int
    channels: tuple[tuple[float, ...], ...]

    @classmethod
    def from_mono(
        cls,
        samples: Sequence[float],
        *,
        sample_rate_hz: int,
        num_channels: int,
    ) -> "SampleBuffer":
        mono = tuple(samples)
        return cls(
            sample_rate_hz=sample_rate_hz,
            channels=tuple(mono for _ in range(num_channels)),
        )

    @property
    def num_channels(self) -> int:
        return len(self.channels)

    @property
    def length(self) -> int:
        """Samples per channel."""
        if not self.channels:
            return 0
        return len(self.channels[0])

    @property
    def duration_s(self) -> float:
        return self.length / self.sample_rate_hz

    def channel(self, index: int) -> tuple[float, ...]:
        return self.channels[index]


@dataclass(frozen=True)
class EncodedAudioBlob:
    """Encoded container bytes plus their media type."""

    data: bytes
    media_type: str = WAV_MEDIA_TYPE

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ToneParameters:
    frequency_hz: float
    duration_s: float
    waveform: Waveform = Waveform.SINE


@dataclass(frozen=True)
class DrumPatternParameters:
    tempo_bpm: float
    duration_s: float


@dataclass(frozen=True)
class SamplePreset:
    """A named parameter tuple from the preset catalog.

    ``frequency`` is in Hz for tonal kinds and in BPM for the drum kind.
    """

    name: str
    kind: TrackKind
    frequency: float
    duration_s: float
    description: str = ""

    @property
    def filename(self) -> str:
        return f"{self.name}.wav"


@dataclass
class GeneratedTrack:
    """Result of a generate-and-encode call, ready for the caller to save."""

    name: str
    kind: TrackKind
    filename: str
    blob: EncodedAudioBlob
    sample_rate_hz: int
    num_channels: int
    length: int

    @property
    def data(self) -> bytes:
        return self.blob.data

    @property
    def media_type(self) -> str:
        return self.blob.media_type
