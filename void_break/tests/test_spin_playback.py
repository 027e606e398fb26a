import random

import pytest

from void_break.config import TestingConfig
from void_break.services.animation_sequencer import AnimationSequencer
from void_break.services.game_session import GameSession
from void_break.services.game_state_machine import GameState
from void_break.services.spin_playback import schedule_spin_playback


def drive(sequencer, delta=0.05, limit=10000):
    ticks = 0
    while sequencer.is_playing and ticks < limit:
        sequencer.update(delta)
        ticks += 1
    return ticks


@pytest.fixture
def session():
    return GameSession(config=TestingConfig, rng=random.Random(31))


def test_dead_spin_timeline(session):
    result = session.spin('DEAD_SPIN')
    sequencer = AnimationSequencer()

    steps = schedule_spin_playback(session, result, sequencer)

    assert [s.name for s in steps] == ['spin', 'show_win', 'win_display']
    assert steps[-1].duration == pytest.approx(1.2)
    drive(sequencer)
    assert session.state is GameState.IDLE


def test_cascading_spin_walks_the_state_machine(session):
    result = session.spin('BIG_CLUSTER')
    sequencer = AnimationSequencer()
    seen = []
    session.state_machine.on_change(lambda new, old: seen.append(new))

    steps = schedule_spin_playback(session, result, sequencer)

    assert len(steps) == 3 + 3 * len(result.steps)
    assert steps[-1].duration == pytest.approx(1.5)
    assert steps[1].duration == pytest.approx(0.8)
    assert steps[2].duration == pytest.approx(0.8)
    assert steps[3].duration == pytest.approx(0.15)

    drive(sequencer)

    expected = [GameState.CASCADING, GameState.RESOLVING] * len(result.steps) + [GameState.WIN_DISPLAY]
    assert seen[:len(expected)] == expected
    assert session.state in (GameState.IDLE, GameState.EVENT_HORIZON)


def test_scatter_spin_ends_in_event_horizon(session):
    result = session.spin('SCATTER_TRIGGER')
    sequencer = AnimationSequencer()
    schedule_spin_playback(session, result, sequencer)

    drive(sequencer)

    assert session.state is GameState.EVENT_HORIZON


def test_on_finished_and_duration_overrides(session):
    result = session.spin('DEAD_SPIN')
    sequencer = AnimationSequencer()
    finished = []

    schedule_spin_playback(session, result, sequencer,
                           durations={'NO_WIN_DISPLAY': 0.0, 'SPIN_SCATTER_OUT': 0.0, 'SPIN_SNAP_BACK': 0.0},
                           on_finished=lambda: finished.append(session.state))

    ticks = drive(sequencer)

    assert finished == [GameState.IDLE]
    assert ticks <= 4
