"""Headless clocked audio output."""

from __future__ import annotations

import pytest

from briefcast.audio import encode_wav
from briefcast.errors import DecodeError
from briefcast.playback import ClockedAudioOutput


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class FakeTimer:
    created: list["FakeTimer"] = []

    def __init__(self, interval, function) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def player(clock) -> ClockedAudioOutput:
    FakeTimer.created = []
    return ClockedAudioOutput(clock=clock, timer_factory=FakeTimer, read_encoded=lambda data: 3.0)


def _two_second_wav() -> bytes:
    return encode_wav(b"\x00\x00" * 48000)


def test_wav_duration_comes_from_header(player):
    assert player.load(_two_second_wav()) == pytest.approx(2.0)
    assert player.current_duration() == pytest.approx(2.0)
    assert player.current_position() == 0.0


def test_non_wav_payload_goes_through_encoded_reader(player):
    assert player.load(b"ID3 fake mp3") == 3.0


def test_known_duration_skips_decoding(clock):
    def refuse(data):
        raise AssertionError("decoded twice")

    player = ClockedAudioOutput(clock=clock, timer_factory=FakeTimer, read_encoded=refuse)

    assert player.load(b"ID3 fake mp3", duration_seconds=4.5) == 4.5
    assert player.current_duration() == 4.5


def test_measure_leaves_player_untouched(player):
    player.load(_two_second_wav())

    assert player.measure(b"ID3 fake mp3") == 3.0
    assert player.current_duration() == pytest.approx(2.0)


def test_empty_payload_is_rejected(player):
    with pytest.raises(DecodeError):
        player.load(b"")


def test_truncated_wav_is_rejected(player):
    with pytest.raises(DecodeError):
        player.load(b"RIFF\x00\x00")


def test_position_follows_clock_and_pause(player, clock):
    player.load(_two_second_wav())
    player.play()
    clock.now += 0.5
    assert player.current_position() == pytest.approx(0.5)

    player.pause()
    clock.now += 1.0
    assert player.current_position() == pytest.approx(0.5)

    player.play()
    clock.now += 5.0
    assert player.current_position() == pytest.approx(2.0)


def test_timer_armed_for_remaining_time_and_fires_callback(player, clock):
    fired = []
    player.load(_two_second_wav())
    player.set_finished_callback(lambda: fired.append(True))
    player.seek_to(0.5)
    player.play()

    timer = FakeTimer.created[-1]
    assert timer.started and timer.daemon
    assert timer.interval == pytest.approx(1.5)

    timer.function()
    assert fired == [True]


def test_seek_while_playing_rearms_timer(player, clock):
    player.load(_two_second_wav())
    player.play()
    first = FakeTimer.created[-1]

    player.seek_to(1.0)

    assert first.cancelled
    assert FakeTimer.created[-1].interval == pytest.approx(1.0)
    assert player.current_position() == pytest.approx(1.0)


def test_unload_cancels_timer_and_callback(player):
    fired = []
    player.load(_two_second_wav())
    player.set_finished_callback(lambda: fired.append(True))
    player.play()
    timer = FakeTimer.created[-1]

    player.unload()

    assert timer.cancelled
    assert not player.loaded
    timer.function()
    assert fired == []
