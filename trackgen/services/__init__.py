from .track_service import TrackService, generate_sample_track

__all__ = [
    "TrackService",
    "generate_sample_track",
]
