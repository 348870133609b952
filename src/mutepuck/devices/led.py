"""LED encoding and output for the puck."""

import logging

from mutepuck.exceptions import DeviceNotFoundError
from mutepuck.models import Event, State
from mutepuck.protocols import HidTransport

logger = logging.getLogger(__name__)

# Color bits
RED = 0x01
GREEN = 0x02
BLUE = 0x04

# Brightness/pattern bits
STRONG = 0x00
WEAK = 0x10
FAST_PULSE = 0x20
SLOW_PULSE = 0x30

# (pressed, not pressed) pattern per aggregate state
_LED_TABLE: dict[State, tuple[int, int]] = {
    State.SILENT: (BLUE | WEAK, 0),
    State.MUTED: (RED | STRONG, RED | SLOW_PULSE),
    State.UNMUTED: (GREEN | STRONG, GREEN | WEAK),
    State.CONFUSED: (RED | GREEN | FAST_PULSE, RED | GREEN | FAST_PULSE),
}

OFF_REPORT = bytes(3)


def encode_led(state: State, event: Event) -> int:
    """
    Encode a state/event pair into the LED control byte.

    Only PRESS is distinguished; RELEASE and HOTPLUG share the idle pattern.

    Args:
        state: Aggregate mute state
        event: Latest button event

    Returns:
        Byte 0 of the output report
    """
    pressed, idle = _LED_TABLE[state]
    return pressed if event is Event.PRESS else idle


def build_report(state: State, event: Event) -> bytes:
    """Build the 3-byte output report for a state/event pair."""
    return bytes((encode_led(state, event), 0, 0))


class LedActuator:
    """
    Writes LED output reports to the puck.

    The LED is best effort: when the puck is not attached the write is
    dropped, never queued or retried. The next processed message renders
    the current state again anyway.
    """

    def __init__(self, transport: HidTransport) -> None:
        """
        Initialize the actuator.

        Args:
            transport: Transport used to open a handle for each write
        """
        self._transport = transport

    def render(self, state: State, event: Event) -> bool:
        """
        Show the pattern for a state/event pair.

        Returns:
            True if the report reached the device
        """
        report = build_report(state, event)
        logger.debug(f"LED {state.name}/{event.name} -> 0x{report[0]:02x}")
        return self._write(report)

    def clear(self) -> bool:
        """Switch the LED off. Returns True if the report reached the device."""
        return self._write(OFF_REPORT)

    def _write(self, report: bytes) -> bool:
        try:
            handle = self._transport.open()
        except DeviceNotFoundError:
            logger.debug("LED write skipped, mute device not connected")
            return False

        try:
            written = handle.write(report)
        except OSError as e:
            logger.debug(f"LED write failed: {e}")
            return False
        finally:
            handle.close()

        return written >= 0
