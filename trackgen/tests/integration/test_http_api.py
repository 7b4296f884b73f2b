from __future__ import annotations

import asyncio
import io
import logging
import wave
from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from trackgen import container
from trackgen.config import settings
from trackgen.main import create_app
from trackgen.metrics import TRACKGEN_TRACKS_GENERATED_TOTAL


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    # Render at a low rate so 30s presets stay fast.
    monkeypatch.setattr(settings, "sample_rate_hz", 8000)
    container.get_track_service.cache_clear()
    app = create_app()
    yield TestClient(app)
    container.get_track_service.cache_clear()


def _generated_metric_value(kind: str) -> float:
    for metric in TRACKGEN_TRACKS_GENERATED_TOTAL.collect():
        for sample in metric.samples:
            if (
                sample.name == "trackgen_tracks_generated_total"
                and sample.labels.get("kind") == kind
            ):
                return float(sample.value)
    return 0.0


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_http_logging_middleware_logs_request(caplog, client: TestClient) -> None:
    with caplog.at_level(logging.INFO):
        response = client.get("/healthz")

    assert response.status_code == 200
    messages = [record.getMessage() for record in caplog.records]
    assert any("HTTP GET /healthz" in msg for msg in messages)


def test_list_presets(client: TestClient) -> None:
    response = client.get("/v1/presets")
    assert response.status_code == 200
    presets = response.json()["presets"]
    assert len(presets) == 6
    assert presets[0] == {
        "name": "Bass Drop",
        "kind": "sine",
        "frequency": 80.0,
        "duration_s": 30.0,
        "description": "Deep bass sine wave for testing low frequencies",
        "filename": "Bass Drop.wav",
    }


def test_list_presets_filtered_by_kind(client: TestClient) -> None:
    response = client.get("/v1/presets", params={"kind": "drum"})
    assert response.status_code == 200
    assert [p["name"] for p in response.json()["presets"]] == [
        "Drum Beat 120",
        "Drum Beat 128",
    ]


def test_render_preset_audio(client: TestClient) -> None:
    response = client.get("/v1/presets/Bass Drop/audio")

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert 'filename="Bass Drop.wav"' in response.headers["content-disposition"]
    assert len(response.content) == 44 + 30 * 8000 * 2 * 2
    with wave.open(io.BytesIO(response.content), "rb") as wav:
        assert wav.getnchannels() == 2
        assert wav.getframerate() == 8000


def test_render_unknown_preset_returns_404(client: TestClient) -> None:
    response = client.get("/v1/presets/Nope/audio")
    assert response.status_code == 404


def test_create_custom_track(client: TestClient) -> None:
    before = _generated_metric_value("square")

    response = client.post(
        "/v1/tracks",
        json={
            "name": "beep",
            "kind": "square",
            "frequency": 440,
            "duration_s": 0.5,
            "sample_rate_hz": 16000,
        },
    )

    assert response.status_code == 200
    assert 'filename="beep.wav"' in response.headers["content-disposition"]
    assert len(response.content) == 44 + 8000 * 2 * 2
    assert _generated_metric_value("square") == before + 1.0


def test_create_drum_track_uses_configured_rate(client: TestClient) -> None:
    response = client.post(
        "/v1/tracks",
        json={"name": "groove", "kind": "drum", "frequency": 128, "duration_s": 1},
    )
    assert response.status_code == 200
    assert len(response.content) == 44 + 8000 * 2 * 2


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "x", "kind": "hexagon", "frequency": 440, "duration_s": 1},
        {"name": "x", "kind": "sine", "frequency": -10, "duration_s": 1},
        {"name": "x", "kind": "sine", "frequency": 440, "duration_s": 0},
        {"name": "a/b", "kind": "sine", "frequency": 440, "duration_s": 1},
        {"kind": "sine", "frequency": 440, "duration_s": 1},
        {
            "name": "x",
            "kind": "sine",
            "frequency": 440,
            "duration_s": 1,
            "sample_rate_hz": 5_000_000_000,
        },
    ],
)
def test_create_track_schema_errors(client: TestClient, payload: dict) -> None:
    response = client.post("/v1/tracks", json=payload)
    assert response.status_code == 422


def test_create_track_over_duration_limit_returns_400(client: TestClient) -> None:
    response = client.post(
        "/v1/tracks",
        json={"name": "long", "kind": "sine", "frequency": 440, "duration_s": 600},
    )
    assert response.status_code == 400
    assert "exceeds" in response.json()["detail"]


def test_metrics_endpoint_exposes_prometheus_metrics(client: TestClient) -> None:
    client.post(
        "/v1/tracks",
        json={"name": "m", "kind": "sine", "frequency": 440, "duration_s": 0.1},
    )
    response = client.get("/metrics")
    assert response.status_code == 200
    assert response.headers.get("content-type", "").startswith("text/plain")
    assert "trackgen_tracks_generated_total" in response.text


@pytest.mark.asyncio
async def test_concurrent_renders_do_not_interfere(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "sample_rate_hz", 8000)
    container.get_track_service.cache_clear()
    app = create_app()

    payloads = [
        {"name": f"t{i}", "kind": kind, "frequency": 220 * (i + 1), "duration_s": 0.25}
        for i, kind in enumerate(["sine", "square", "sawtooth", "triangle"])
    ]
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        responses = await asyncio.gather(
            *(ac.post("/v1/tracks", json=p) for p in payloads)
        )

    container.get_track_service.cache_clear()
    for payload, response in zip(payloads, responses):
        assert response.status_code == 200
        assert f'filename="{payload["name"]}.wav"' in response.headers["content-disposition"]
        assert len(response.content) == 44 + 2000 * 2 * 2
