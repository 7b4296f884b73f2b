from __future__ import annotations

from typing import List, Optional

from trackgen.errors import InvalidParameter
from trackgen.models import SamplePreset, TrackKind


SAMPLE_TRACKS: tuple[SamplePreset, ...] = (
    SamplePreset(
        name="Bass Drop",
        kind=TrackKind.SINE,
        frequency=80,
        duration_s=30,
        description="Deep bass sine wave for testing low frequencies",
    ),
    SamplePreset(
        name="Synth Lead",
        kind=TrackKind.SAWTOOTH,
        frequency=440,
        duration_s=30,
        description="Sawtooth wave lead sound",
    ),
    SamplePreset(
        name="High Synth",
        kind=TrackKind.SQUARE,
        frequency=880,
        duration_s=30,
        description="High-pitched square wave",
    ),
    SamplePreset(
        name="Drum Beat 120",
        kind=TrackKind.DRUM,
        frequency=120,
        duration_s=30,
        description="120 BPM drum pattern with kick, snare, and hi-hat",
    ),
    SamplePreset(
        name="Drum Beat 128",
        kind=TrackKind.DRUM,
        frequency=128,
        duration_s=30,
        description="128 BPM drum pattern for house music",
    ),
    SamplePreset(
        name="Test Tone A",
        kind=TrackKind.TRIANGLE,
        frequency=220,
        duration_s=30,
        description="Triangle wave at 220Hz",
    ),
)


class PresetRepository:
    """Read-only view over the named preset catalog."""

    def __init__(self, presets: tuple[SamplePreset, ...] = SAMPLE_TRACKS) -> None:
        self._presets = {p.name: p for p in presets}

    def list_presets(self, kind: Optional[TrackKind] = None) -> List[SamplePreset]:
        items = list(self._presets.values())
        if kind is not None:
            items = [p for p in items if p.kind == kind]
        return items

    def find(self, name: str) -> Optional[SamplePreset]:
        return self._presets.get(name)

    def get(self, name: str) -> SamplePreset:
        preset = self.find(name)
        if preset is None:
            raise InvalidParameter(f"Unknown preset '{name}'")
        return preset
