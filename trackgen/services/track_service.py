from __future__ import annotations

import time
from typing import Callable, Optional

from trackgen import metrics as app_metrics
from trackgen.audio import encode_wav
from trackgen.errors import InvalidParameter, TrackGenError
from trackgen.generators import NoiseSource, generate_drum_beat, generate_tone
from trackgen.generators.base import require_positive
from trackgen.logging_utils import get_logger
from trackgen.models import (
    DrumPatternParameters,
    GeneratedTrack,
    SampleBuffer,
    TrackKind,
    ToneParameters,
)
from trackgen.repositories import PresetRepository


logger = get_logger(__name__)


def coerce_kind(kind: TrackKind | str) -> TrackKind:
    try:
        return TrackKind(kind)
    except ValueError as exc:
        raise InvalidParameter(f"Unsupported track kind '{kind}'") from exc


class TrackService:
    """Generates a track from a preset or explicit parameters and encodes it.

    The returned ``GeneratedTrack`` carries the WAV bytes and a suggested
    filename; saving or serving them is left to the caller.
    """

    def __init__(
        self,
        *,
        preset_repo: PresetRepository,
        sample_rate_hz: int = 44100,
        num_channels: int = 2,
        max_duration_s: Optional[float] = None,
        noise_factory: Optional[Callable[[], NoiseSource]] = None,
    ) -> None:
        self._presets = preset_repo
        self._sample_rate_hz = sample_rate_hz
        self._num_channels = num_channels
        self._max_duration_s = max_duration_s
        self._noise_factory = noise_factory

    def generate_preset(
        self,
        preset_name: str,
        *,
        sample_rate_hz: Optional[int] = None,
    ) -> GeneratedTrack:
        preset = self._presets.get(preset_name)
        return self.generate_sample_track(
            preset.name,
            preset.kind,
            preset.frequency,
            preset.duration_s,
            sample_rate_hz=sample_rate_hz,
        )

    def generate_sample_track(
        self,
        name: str,
        kind: TrackKind | str,
        frequency: float,
        duration_s: float,
        *,
        sample_rate_hz: Optional[int] = None,
    ) -> GeneratedTrack:
        """Render and encode one track.

        ``frequency`` is the tone frequency in Hz, or the tempo in BPM when
        ``kind`` is ``"drum"``.
        """
        kind_label = str(getattr(kind, "value", kind))
        try:
            track_kind = coerce_kind(kind)
            duration_s = self._validate_request(name, duration_s)
            rate = sample_rate_hz or self._sample_rate_hz

            logger.info(
                "[START] generate track name=%r kind=%s freq=%s dur=%ss @%dHz",
                name,
                track_kind.value,
                frequency,
                duration_s,
                rate,
            )
            start = time.monotonic()
            buffer = self._render(track_kind, frequency, duration_s, rate)
            blob = encode_wav(buffer)
            elapsed = time.monotonic() - start
        except TrackGenError as exc:
            logger.warning("Track generation rejected name=%r: %s", name, exc)
            app_metrics.record_track_failed(kind_label, reason=type(exc).__name__)
            raise

        app_metrics.record_track_generated(track_kind.value, len(blob), elapsed)
        logger.info(
            "[DONE] generate track name=%r (%d frames, %d bytes, %.3fs)",
            name,
            buffer.length,
            len(blob),
            elapsed,
        )
        return GeneratedTrack(
            name=name,
            kind=track_kind,
            filename=f"{name}.wav",
            blob=blob,
            sample_rate_hz=buffer.sample_rate_hz,
            num_channels=buffer.num_channels,
            length=buffer.length,
        )

    def _validate_request(self, name: str, duration_s: float) -> float:
        """Check the name and duration limit; return the duration as a float."""
        if not isinstance(name, str):
            raise InvalidParameter(f"name must be a string, got {name!r}")
        if not name.strip():
            raise InvalidParameter("name must not be empty")
        if "/" in name or "\\" in name:
            raise InvalidParameter(f"name must not contain path separators: {name!r}")
        duration_s = require_positive("duration_s", duration_s)
        if self._max_duration_s is not None and duration_s > self._max_duration_s:
            raise InvalidParameter(
                f"duration_s={duration_s} exceeds the limit of {self._max_duration_s}s"
            )
        return duration_s

    def _render(
        self,
        kind: TrackKind,
        frequency: float,
        duration_s: float,
        sample_rate_hz: int,
    ) -> SampleBuffer:
        if kind is TrackKind.DRUM:
            drum = DrumPatternParameters(tempo_bpm=frequency, duration_s=duration_s)
            noise = self._noise_factory() if self._noise_factory else None
            return generate_drum_beat(
                drum.tempo_bpm,
                drum.duration_s,
                sample_rate_hz=sample_rate_hz,
                num_channels=self._num_channels,
                noise=noise,
            )

        tone = ToneParameters(
            frequency_hz=frequency,
            duration_s=duration_s,
            waveform=kind.waveform,
        )
        return generate_tone(
            tone.frequency_hz,
            tone.duration_s,
            tone.waveform,
            sample_rate_hz=sample_rate_hz,
            num_channels=self._num_channels,
        )


def generate_sample_track(
    name: str,
    kind: TrackKind | str,
    frequency: float,
    duration_s: float,
    *,
    sample_rate_hz: int = 44100,
    num_channels: int = 2,
    noise_factory: Optional[Callable[[], NoiseSource]] = None,
) -> GeneratedTrack:
    """One-shot generate + encode without a configured service."""
    service = TrackService(
        preset_repo=PresetRepository(),
        sample_rate_hz=sample_rate_hz,
        num_channels=num_channels,
        noise_factory=noise_factory,
    )
    return service.generate_sample_track(name, kind, frequency, duration_s)
