"""Mute vote: fold per-stream mute flags into one aggregate state."""

from collections.abc import Iterable

from mutepuck.models import State


def step(state: State, mute: bool) -> State:
    """
    Apply one stream's mute flag to a partial vote.

    Args:
        state: Vote over the streams seen so far
        mute: Mute flag of the next stream

    Returns:
        Vote including the next stream
    """
    if state is State.SILENT:
        return State.MUTED if mute else State.UNMUTED
    if state is State.MUTED:
        return State.MUTED if mute else State.CONFUSED
    if state is State.UNMUTED:
        return State.CONFUSED if mute else State.UNMUTED
    return State.CONFUSED


def fold(flags: Iterable[bool]) -> State:
    """
    Aggregate mute flags into a single state.

    The result does not depend on the order of ``flags``: it is SILENT for
    no streams, MUTED/UNMUTED when every stream agrees and CONFUSED as soon
    as two streams disagree.

    Args:
        flags: Mute flag of every tracked stream

    Returns:
        Aggregate state
    """
    state = State.SILENT
    for mute in flags:
        state = step(state, mute)
    return state
