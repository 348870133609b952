"""Coordination core: mute vote, stream tracking and dispatch."""

from .dispatcher import Dispatcher
from .stream_tracker import StreamTracker
from .voting import fold, step

__all__ = ["Dispatcher", "StreamTracker", "fold", "step"]
