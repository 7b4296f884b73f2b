from __future__ import annotations

from prometheus_client import Counter, Histogram


TRACKGEN_TRACKS_GENERATED_TOTAL = Counter(
    "trackgen_tracks_generated_total",
    "Total number of tracks generated and encoded, by kind.",
    ["kind"],
)

TRACKGEN_TRACK_FAILURES_TOTAL = Counter(
    "trackgen_track_failures_total",
    "Total number of rejected track requests, by kind and reason.",
    ["kind", "reason"],
)

TRACKGEN_ENCODED_BYTES_TOTAL = Counter(
    "trackgen_encoded_bytes_total",
    "Total number of WAV bytes produced, by kind.",
    ["kind"],
)

TRACKGEN_GENERATION_SECONDS = Histogram(
    "trackgen_generation_seconds",
    "Wall time spent synthesizing and encoding a track.",
    ["kind"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


def record_track_generated(kind: str, num_bytes: int, elapsed_s: float) -> None:
    TRACKGEN_TRACKS_GENERATED_TOTAL.labels(kind=kind).inc()
    TRACKGEN_ENCODED_BYTES_TOTAL.labels(kind=kind).inc(num_bytes)
    TRACKGEN_GENERATION_SECONDS.labels(kind=kind).observe(elapsed_s)


def record_track_failed(kind: str, *, reason: str) -> None:
    """Record a request rejected with InvalidParameter or EncodingError."""
    TRACKGEN_TRACK_FAILURES_TOTAL.labels(kind=kind, reason=reason).inc()
