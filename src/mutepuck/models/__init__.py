"""Data models for the mute puck."""

from .config import PuckConfig
from .enums import Event, State
from .message import Message
from .stream import StreamEntry

__all__ = [
    # Enums
    "Event",
    "State",
    # Models
    "Message",
    "PuckConfig",
    "StreamEntry",
]
