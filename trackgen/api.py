from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from trackgen.container import get_preset_repo, get_track_service
from trackgen.errors import TrackGenError
from trackgen.logging_utils import get_logger
from trackgen.models import (
    CreateTrackRequest,
    GeneratedTrack,
    HealthResponse,
    Preset,
    PresetsResponse,
    TrackKind,
)


logger = get_logger(__name__)
router = APIRouter()


def _wav_response(track: GeneratedTrack) -> Response:
    return Response(
        content=track.data,
        media_type=track.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{track.filename}"',
        },
    )


@router.get("/", response_class=PlainTextResponse)
async def root() -> PlainTextResponse:
    """Simple root endpoint for quick sanity checks."""
    return PlainTextResponse("trackgen sample-track service", media_type="text/plain")


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/v1/presets", response_model=PresetsResponse)
async def list_presets(kind: Optional[TrackKind] = Query(None)) -> PresetsResponse:
    items = [
        Preset(
            name=p.name,
            kind=p.kind,
            frequency=p.frequency,
            duration_s=p.duration_s,
            description=p.description,
            filename=p.filename,
        )
        for p in get_preset_repo().list_presets(kind=kind)
    ]
    return PresetsResponse(presets=items)


@router.get("/v1/presets/{name}/audio")
async def render_preset(name: str) -> Response:
    if get_preset_repo().find(name) is None:
        raise HTTPException(status_code=404, detail=f"Unknown preset '{name}'")

    service = get_track_service()
    try:
        # Synthesis is CPU-bound; keep it off the event loop.
        track = await asyncio.to_thread(service.generate_preset, name)
    except TrackGenError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _wav_response(track)


@router.post("/v1/tracks")
async def create_track(req: CreateTrackRequest) -> Response:
    service = get_track_service()
    try:
        track = await asyncio.to_thread(
            service.generate_sample_track,
            req.name,
            req.kind,
            req.frequency,
            req.duration_s,
            sample_rate_hz=req.sample_rate_hz,
        )
    except TrackGenError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _wav_response(track)


@router.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
