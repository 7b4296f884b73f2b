from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .domain import MAX_SAMPLE_RATE_HZ
from .waveform import TrackKind


class CreateTrackRequest(BaseModel):
    """Request body for rendering a custom track."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=128,
        pattern=r"^[A-Za-z0-9 _.()-]+$",
        description="Track name, used for the filename",
    )
    kind: TrackKind = Field(..., description="Waveform kind or 'drum'")
    frequency: float = Field(
        ..., gt=0, description="Frequency in Hz, or tempo in BPM for 'drum'"
    )
    duration_s: float = Field(..., gt=0, description="Clip duration in seconds")
    sample_rate_hz: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_SAMPLE_RATE_HZ,
        description="Output sample rate; defaults to the configured rate",
    )


class Preset(BaseModel):
    name: str
    kind: TrackKind
    frequency: float
    duration_s: float
    description: str
    filename: str


class PresetsResponse(BaseModel):
    presets: List[Preset]


class HealthResponse(BaseModel):
    status: Literal["ok"]
