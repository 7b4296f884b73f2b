from __future__ import annotations

from enum import Enum


class Waveform(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


class TrackKind(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"
    DRUM = "drum"

    @property
    def waveform(self) -> Waveform | None:
        """Waveform for tonal kinds, None for the drum pattern."""
        if self is TrackKind.DRUM:
            return None
        return Waveform(self.value)
