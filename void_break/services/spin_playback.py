"""
Paced presentation of a resolved spin.

The outcome is fully known when GameSession.spin() returns; playback only
walks the state machine through it at presentation speed so a renderer can
hang its own animations off the state changes.
"""

from void_break.constants import ANIM
from void_break.services.animation_sequencer import TimedStep


def schedule_spin_playback(session, result, sequencer, durations=None, on_finished=None):
    """
    Enqueues the timeline for `result` on `sequencer` and starts it if idle.

    Timeline: spin -> per cascade step (win glow and absorb, then start_cascade;
    drift and spawn; pause, then cascade_complete) -> show_win -> win display
    hold -> session.finish_spin().

    Args:
        session (GameSession): Session that produced `result`, left in RESOLVING.
        result (SpinResult): The resolved spin.
        sequencer (AnimationSequencer): Sequencer to drive with update(delta).
        durations (dict, optional): Overrides for ANIM entries.
        on_finished (callable, optional): Called once the whole timeline has played.

    Returns:
        list[TimedStep]: The enqueued steps in order.
    """
    timing = dict(ANIM)
    if durations:
        timing.update(durations)

    machine = session.state_machine
    steps = [TimedStep(timing['SPIN_SCATTER_OUT'] + timing['SPIN_SNAP_BACK'], name='spin')]

    for index, _ in enumerate(result.steps):
        steps.append(TimedStep(timing['WIN_GLOW'] + timing['WIN_ABSORB'],
                               on_complete=machine.start_cascade, name=f'win_{index}'))
        steps.append(TimedStep(timing['CASCADE_DRIFT'] + timing['CASCADE_SPAWN'], name=f'cascade_{index}'))
        steps.append(TimedStep(timing['CASCADE_PAUSE'], on_complete=machine.cascade_complete,
                               name=f'pause_{index}'))

    steps.append(TimedStep(0, on_complete=machine.show_win, name='show_win'))
    hold = timing['WIN_DISPLAY'] if result.is_win else timing['NO_WIN_DISPLAY']
    steps.append(TimedStep(hold, on_complete=session.finish_spin, name='win_display'))

    for step in steps:
        sequencer.enqueue(step)
    if on_finished is not None:
        sequencer.on_empty(on_finished)
    if not sequencer.active:
        sequencer.play_next()
    return steps
