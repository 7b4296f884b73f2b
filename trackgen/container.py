from __future__ import annotations

from functools import lru_cache

from trackgen.config import settings
from trackgen.repositories import PresetRepository
from trackgen.services import TrackService


@lru_cache(maxsize=1)
def get_preset_repo() -> PresetRepository:
    return PresetRepository()


@lru_cache(maxsize=1)
def get_track_service() -> TrackService:
    return TrackService(
        preset_repo=get_preset_repo(),
        sample_rate_hz=settings.sample_rate_hz,
        num_channels=settings.num_channels,
        max_duration_s=settings.max_duration_s,
    )
