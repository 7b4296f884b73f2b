from __future__ import annotations

import os
from dataclasses import dataclass, field


def _split_origins(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class AppConfig:
    """Application configuration loaded from environment.

    Output defaults for the generators live here so the CLI and the HTTP
    layer render tracks with the same sample rate and channel layout.
    """

    sample_rate_hz: int = int(os.getenv("TRACKGEN_SAMPLE_RATE_HZ", "44100"))
    num_channels: int = int(os.getenv("TRACKGEN_NUM_CHANNELS", "2"))

    # Upper bound on requested clip length, enforced by the service layer.
    max_duration_s: float = float(os.getenv("TRACKGEN_MAX_DURATION_S", "60"))

    cors_origins: list[str] = field(
        default_factory=lambda: _split_origins(
            os.getenv(
                "TRACKGEN_CORS_ORIGINS",
                "http://localhost:5173,http://127.0.0.1:5173",
            )
        )
    )

    log_level: str = os.getenv("TRACKGEN_LOG_LEVEL", "INFO").upper()


settings = AppConfig()
