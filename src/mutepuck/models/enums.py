"""Enumerations for the mute puck."""

from enum import Enum
from typing import Optional


class Event(str, Enum):
    """Button and connection events produced by the hardware side."""

    PRESS = "press"
    RELEASE = "release"
    HOTPLUG = "hotplug"  # Device (re)connected


class State(str, Enum):
    """Aggregate mute state across all tracked input streams."""

    SILENT = "silent"  # No tracked streams
    MUTED = "muted"  # Every stream muted
    UNMUTED = "unmuted"  # Every stream unmuted
    CONFUSED = "confused"  # Streams disagree

    @property
    def is_muted(self) -> Optional[bool]:
        """
        Concrete mute value for unanimous states.

        Returns:
            True for MUTED, False for UNMUTED, None otherwise
        """
        if self is State.MUTED:
            return True
        if self is State.UNMUTED:
            return False
        return None

    def toggled(self) -> "State":
        """
        Target state after a button release.

        Anything that is not fully muted becomes muted, so a confused
        vote always resolves towards privacy. With no streams there is
        nothing to toggle.
        """
        if self is State.SILENT:
            return State.SILENT
        if self is State.MUTED:
            return State.UNMUTED
        return State.MUTED
