"""HTTP surface exercised through the FastAPI test client."""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from briefcast.application.interfaces import (
    FormatHint,
    ScriptGenerator,
    SpeechSynthesizer,
    SynthesizedAudio,
)
from briefcast.controllers.dependencies import get_library, get_pipeline, get_playback_engine
from briefcast.errors import AuthError, ConfigError, ProviderTimeoutError
from briefcast.library import BriefingLibrary
from briefcast.main import app, status_for_error
from briefcast.pipelines.briefing import BriefingPipeline
from briefcast.playback import PlaybackEngine

from conftest import FakeOutput, ManualTicker, MemoryStorage

PCM = b"\x00\x01" * 24000


class StubScriptGenerator(ScriptGenerator):
    def __init__(self) -> None:
        self.error: Exception | None = None

    async def generate(self, topic, length_seconds, tone):
        if self.error is not None:
            raise self.error
        return f"A {tone.lower()} update on {topic}."


class StubSynthesizer(SpeechSynthesizer):
    async def synthesize(self, text):
        return SynthesizedAudio(data=PCM, format_hint=FormatHint.RAW_PCM)


@pytest.fixture
def env():
    output = FakeOutput(duration=2.0)
    ticker = ManualTicker()
    engine = PlaybackEngine(output, ticker)
    storage = MemoryStorage()
    library = BriefingLibrary(storage)
    script = StubScriptGenerator()
    pipeline = BriefingPipeline(engine, script, StubSynthesizer())

    async def engine_override():
        return engine

    async def pipeline_override():
        return pipeline

    app.dependency_overrides[get_playback_engine] = engine_override
    app.dependency_overrides[get_pipeline] = pipeline_override
    app.dependency_overrides[get_library] = lambda: library

    yield {
        "client": TestClient(app),
        "engine": engine,
        "output": output,
        "ticker": ticker,
        "storage": storage,
        "library": library,
        "script": script,
    }

    app.dependency_overrides.clear()


def test_health_and_metrics(env):
    client = env["client"]

    assert client.get("/health").json()["status"] == "healthy"
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text


def _request_count(route: str, status: str, method: str = "GET") -> float:
    value = REGISTRY.get_sample_value(
        "http_requests_total",
        {"method": method, "route": route, "status": status},
    )
    return value or 0.0


def test_request_metrics_use_route_template(env):
    briefing = env["library"].add("Quick Tips", b"clip")
    route = "/library/{briefing_id}/audio"
    before = _request_count(route, "200")

    env["client"].get(f"/library/{briefing.id}/audio")

    assert _request_count(route, "200") == before + 1
    assert _request_count(f"/library/{briefing.id}/audio", "200") == 0.0


def test_unmatched_paths_share_one_label(env):
    before = _request_count("unmatched", "404")

    env["client"].get("/no-such-page")
    env["client"].get("/another-missing-page")

    assert _request_count("unmatched", "404") == before + 2


def test_health_polling_is_not_recorded(env):
    before = _request_count("/health", "200")

    env["client"].get("/health")

    assert _request_count("/health", "200") == before
    assert REGISTRY.get_sample_value("http_requests_in_flight", {"method": "GET"}) in (None, 0.0)


def test_options_list_presets(env):
    payload = env["client"].get("/briefings/options").json()

    assert payload["topics"][0] == "Market News"
    assert payload["lengths"] == [30, 60, 180]
    assert "Calm" in payload["tones"]
    assert [s["stage"] for s in payload["stages"]][0] == "script"


def test_generate_plays_and_exposes_audio(env):
    client = env["client"]
    response = client.post("/briefings/generate", json={"topic": "Market News", "tone": "Calm"})

    assert response.status_code == 200
    body = response.json()
    assert body["script"] == "A calm update on Market News."
    assert body["media_type"] == "audio/wav"
    assert body["playback"]["state"] == "playing"
    assert body["playback"]["duration_label"] == "0:02"

    audio = client.get("/playback/audio")
    assert audio.status_code == 200
    assert audio.headers["content-type"] == "audio/wav"
    assert audio.content[:4] == b"RIFF"


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ConfigError("OPENAI_API_KEY not set"), 503),
        (AuthError("bad key"), 502),
        (ProviderTimeoutError("slow"), 504),
    ],
)
def test_generate_failure_reports_stage(env, error, status_code):
    env["script"].error = error
    response = env["client"].post("/briefings/generate", json={"topic": "Market News"})

    assert response.status_code == status_code
    detail = response.json()["detail"]
    assert detail["stage"] == "script"
    assert detail["label"] == "Generating script"
    assert env["engine"].session.state.value == "idle"


def test_generate_unexpected_failure_is_500_with_stage(env):
    env["script"].error = KeyError("choices")
    response = env["client"].post("/briefings/generate", json={"topic": "Market News"})

    assert response.status_code == 500
    assert response.json()["detail"]["stage"] == "script"


@pytest.mark.parametrize(
    "payload",
    [{"topic": "   "}, {"topic": "News", "length_seconds": 5}, {"tone": "Calm"}],
)
def test_generate_validates_input(env, payload):
    assert env["client"].post("/briefings/generate", json=payload).status_code == 422


def test_playback_commands(env):
    client = env["client"]
    engine = env["engine"]
    engine.load(b"clip")

    assert client.get("/playback").json()["state"] == "ready"
    assert client.post("/playback/play").json()["state"] == "playing"

    env["output"].advance(1.0)
    env["ticker"].tick()
    state = client.get("/playback").json()
    assert state["position_label"] == "0:01"
    assert state["progress"] == pytest.approx(0.5)

    assert client.post("/playback/pause").json()["state"] == "paused"
    seek = client.post("/playback/seek", json={"fraction": 2.0}).json()
    assert seek["position_seconds"] == pytest.approx(2.0)
    assert client.post("/playback/stop").json()["state"] == "idle"


def test_audio_404_when_nothing_loaded(env):
    response = env["client"].get("/playback/audio")

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "No audio loaded"


def test_save_list_replay_delete(env):
    client = env["client"]
    client.post("/briefings/generate", json={"topic": "Market News"})

    saved = client.post("/library", json={"topic": "Market News"})
    assert saved.status_code == 201
    entry = saved.json()

    listing = client.get("/library").json()
    assert [item["id"] for item in listing] == [entry["id"]]

    audio = client.get(f"/library/{entry['id']}/audio")
    assert audio.content == env["engine"].current_audio_bytes()

    client.post("/playback/stop")
    replay = client.post(f"/library/{entry['id']}/play")
    assert replay.json()["state"] == "playing"

    deleted = client.delete(f"/library/{entry['id']}").json()
    assert deleted["clean"] is True
    assert deleted["blob"] == "removed"
    assert client.get("/library").json() == []


def test_save_without_audio_conflicts(env):
    assert env["client"].post("/library", json={"topic": "Quick Tips"}).status_code == 409


def test_save_after_stop_persists_last_loaded_audio(env):
    client = env["client"]
    env["engine"].load(b"clip")
    client.post("/playback/play")
    assert client.post("/playback/stop").json()["state"] == "idle"

    saved = client.post("/library", json={"topic": "Quick Tips"})

    assert saved.status_code == 201
    assert client.get(f"/library/{saved.json()['id']}/audio").content == b"clip"


def test_save_failure_maps_to_500(env):
    env["engine"].load(b"clip")
    env["storage"].fail_all_writes = True

    response = env["client"].post("/library", json={"topic": "Quick Tips"})

    assert response.status_code == 500
    assert env["client"].get("/library").json() == []


def test_delete_reports_blob_residue(env):
    briefing = env["library"].add("Quick Tips", b"clip")
    env["storage"].fail_removes.add(briefing.audio_ref)

    deleted = env["client"].delete(f"/library/{briefing.id}").json()

    assert deleted["index_removed"] is True
    assert deleted["blob"] == "failed"
    assert deleted["clean"] is False


def test_unknown_briefing_is_404(env):
    client = env["client"]
    missing = uuid4()

    assert client.get(f"/library/{missing}/audio").status_code == 404
    assert client.post(f"/library/{missing}/play").status_code == 404
    assert client.delete(f"/library/{missing}").status_code == 404


def test_replay_of_undecodable_blob_is_422(env):
    engine = env["engine"]
    engine.load(b"clip")
    engine.play()
    briefing = env["library"].add("Quick Tips", b"bad audio")
    before = len(env["output"].calls)

    assert env["client"].post(f"/library/{briefing.id}/play").status_code == 422
    assert engine.session.state.value == "idle"
    assert env["output"].calls[before:] == ["measure", "pause", "unload"]


def test_library_validation_error_on_save_is_422(env, monkeypatch):
    env["engine"].load(b"clip")

    def reject(topic, audio_bytes):
        raise ValueError("Briefing topic must not be empty")

    monkeypatch.setattr(env["library"], "add", reject)
    response = env["client"].post("/library", json={"topic": "Quick Tips"})

    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Briefing topic must not be empty"


def test_value_error_outside_validation_is_a_server_error(env, monkeypatch):
    briefing = env["library"].add("Quick Tips", b"clip")

    def corrupt(target):
        raise ValueError("Missing RIFF/WAVE signature")

    monkeypatch.setattr(env["library"], "read_audio", corrupt)
    client = TestClient(app, raise_server_exceptions=False)
    response = client.get(f"/library/{briefing.id}/audio")

    assert response.status_code == 500
    assert response.json()["detail"]["message"] == "Internal server error"


def test_status_mapping_for_plain_errors():
    from briefcast.errors import DecodeError, MissingBlobError, NetworkError

    assert status_for_error(NetworkError("down")) == 502
    assert status_for_error(DecodeError("bad")) == 422
    assert status_for_error(MissingBlobError("gone")) == 500
