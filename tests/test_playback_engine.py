"""Playback engine driven by fake output and ticker."""

from __future__ import annotations

from pathlib import Path

import pytest

from briefcast.errors import DecodeError
from briefcast.playback import PlaybackEngine, PlaybackState
from briefcast.playback.state import PositionSampled


def test_two_second_clip_plays_to_the_end(engine, output, ticker):
    states = []
    engine.subscribe(lambda session: states.append(session.state))

    session = engine.load(b"clip")
    assert session.state is PlaybackState.READY
    assert session.duration_seconds == 2.0

    engine.play()
    assert ticker.running
    assert output.playing

    output.advance(0.8)
    ticker.tick()
    assert engine.session.position_seconds == pytest.approx(0.8)
    assert engine.session.progress == pytest.approx(0.4)

    output.advance(1.2)
    ticker.tick()
    assert engine.session.state is PlaybackState.FINISHED
    assert engine.session.position_seconds == 2.0
    assert not ticker.running

    # The device reports completion afterwards; nothing changes.
    before = engine.session
    output.fire_finished()
    assert engine.session == before

    assert states == [
        PlaybackState.LOADING,
        PlaybackState.READY,
        PlaybackState.PLAYING,
        PlaybackState.PLAYING,
        PlaybackState.FINISHED,
    ]


def test_pause_then_resume_keeps_position(engine, output, ticker):
    engine.load(b"clip")
    engine.play()
    output.advance(0.5)
    ticker.tick()

    engine.pause()
    assert engine.session.state is PlaybackState.PAUSED
    assert not ticker.running
    assert not output.playing

    engine.play()
    assert engine.session.position_seconds == pytest.approx(0.5)
    assert ticker.running


def test_seek_moves_output(engine, output):
    engine.load(b"clip")
    engine.seek(0.75)

    assert output.calls[-1] == "seek:1.5"
    assert engine.session.position_seconds == pytest.approx(1.5)
    assert engine.session.state is PlaybackState.READY


def test_completion_callback_finishes_playback(engine, output):
    engine.load(b"clip")
    engine.play()
    output.fire_finished()

    assert engine.session.state is PlaybackState.FINISHED
    assert engine.session.progress == 1.0


def test_decode_error_leaves_engine_idle(engine, output, ticker):
    engine.load(b"clip")
    engine.play()

    with pytest.raises(DecodeError):
        engine.load(b"bad bytes")

    assert engine.session.state is PlaybackState.IDLE
    assert not ticker.running
    assert output.callback is None


def test_unexpected_output_failure_is_reported_as_decode_error(ticker):
    class BrokenOutput:
        def load(self, source, duration_seconds=None):
            raise OSError("device gone")

        def unload(self):
            pass

        def set_finished_callback(self, callback):
            pass

        def pause(self):
            pass

    engine = PlaybackEngine(BrokenOutput(), ticker)
    with pytest.raises(DecodeError):
        engine.load(b"clip")
    assert engine.session.state is PlaybackState.IDLE


def test_reload_drops_stale_ticks_and_completions(engine, output, ticker):
    engine.load(b"first")
    engine.play()
    stale_tick = ticker.callback
    stale_completion = output.callback
    old_generation = engine.session.generation

    engine.load(b"second")
    assert engine.session.generation == old_generation + 1
    assert ticker.callback is None

    stale_tick()
    stale_completion()
    engine.submit(PositionSampled(old_generation, 1.9, 2.0))

    assert engine.session.state is PlaybackState.READY
    assert engine.session.position_seconds == 0.0


def test_stop_tears_everything_down(engine, output, ticker):
    engine.load(b"clip")
    engine.play()
    completion = output.callback

    engine.stop()

    assert engine.session.state is PlaybackState.IDLE
    assert not ticker.running
    assert output.loaded_bytes is None
    completion()
    assert engine.session.state is PlaybackState.IDLE


def test_current_audio_bytes_tracks_last_load(engine, tmp_path: Path):
    assert engine.current_audio_bytes() is None

    engine.load(b"clip")
    assert engine.current_audio_bytes() == b"clip"

    path = tmp_path / "saved.wav"
    path.write_bytes(b"from disk")
    engine.load(path)
    assert engine.current_audio_bytes() == b"from disk"


def test_failed_load_keeps_previous_saveable_audio(engine):
    engine.load(b"clip")
    with pytest.raises(DecodeError):
        engine.load(b"bad")

    assert engine.current_audio_bytes() == b"clip"


def test_listener_events_are_queued_not_nested(engine):
    seen = []

    def listener(session):
        seen.append(session.state)
        if session.state is PlaybackState.READY:
            engine.play()

    engine.subscribe(listener)
    engine.load(b"clip")

    assert seen == [PlaybackState.LOADING, PlaybackState.READY, PlaybackState.PLAYING]


def test_unsubscribe_stops_notifications(engine):
    seen = []
    unsubscribe = engine.subscribe(lambda session: seen.append(session.state))
    unsubscribe()
    engine.load(b"clip")

    assert seen == []


def test_dispatcher_marshals_completion():
    from conftest import FakeOutput, ManualTicker

    pending = []
    output = FakeOutput()
    engine = PlaybackEngine(output, ManualTicker(), dispatcher=pending.append)
    engine.load(b"clip")
    engine.play()

    output.fire_finished()
    assert engine.session.state is PlaybackState.PLAYING

    pending.pop()()
    assert engine.session.state is PlaybackState.FINISHED


def test_stop_keeps_loaded_audio_saveable(engine):
    engine.load(b"clip-one")
    engine.play()
    engine.stop()

    assert engine.session.state is PlaybackState.IDLE
    assert engine.current_audio_bytes() == b"clip-one"
