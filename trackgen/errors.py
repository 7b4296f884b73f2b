from __future__ import annotations


class TrackGenError(Exception):
    """Base error for sample-track synthesis and encoding."""


class InvalidParameter(TrackGenError, ValueError):
    """Raised when synthesis parameters are rejected before generation."""


class EncodingError(TrackGenError, ValueError):
    """Raised when a sample buffer cannot be written to (or read from) WAV."""
