"""Protocol definitions for the collaborators around the dispatcher.

This module contains the narrow contracts between the coordination core
and the outside world:
- Mute command sink / audio registry: the audio server side
- LED output: the device side that shows the aggregate state
- HID handle / transport: raw report I/O with the puck
- Hotplug source: OS device add/remove notifications
"""

from typing import Optional, Protocol, runtime_checkable

from mutepuck.models import Event, State


@runtime_checkable
class MuteCommandSink(Protocol):
    """
    Receiver of mute-set commands.

    Commands are fire-and-forget: the audio server never acknowledges them,
    the resulting state change comes back as a regular stream update.
    """

    def set_mute(self, stream_id: int, mute: bool) -> None:
        """
        Request a new mute flag for one stream.

        Args:
            stream_id: Server-assigned stream id
            mute: Requested mute flag
        """
        ...


@runtime_checkable
class LedOutput(Protocol):
    """Anything that can show a (state, event) pair on the puck LED."""

    def render(self, state: State, event: Event) -> bool:
        """
        Show the pattern for a state/event pair.

        Returns:
            True if the report reached the device
        """
        ...

    def clear(self) -> bool:
        """Switch the LED off. Returns True if the report reached the device."""
        ...


class HidHandle(Protocol):
    """An open HID device handle."""

    def read(self, max_length: int, timeout_ms: int = 0) -> list[int]:
        """Read one input report; empty on timeout, raises OSError on failure."""
        ...

    def write(self, data: bytes) -> int:
        """Write one output report; returns bytes written or -1."""
        ...

    def close(self) -> None:
        ...


class HidTransport(Protocol):
    """Opens handles to one specific device."""

    def open(self) -> HidHandle:
        """
        Open the device.

        Raises:
            DeviceNotFoundError: The device is not attached
            DeviceAccessError: HID access is unavailable altogether
        """
        ...


class HotplugSource(Protocol):
    """Subsystem-filtered device add/remove notifications."""

    def wait_for_event(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Block until the next notification.

        Returns:
            The notification action ("add", "remove", ...) or None on timeout
        """
        ...

    def clear_events(self) -> int:
        """Drop every already-queued notification without blocking; returns how many."""
        ...

    def close(self) -> None:
        ...


class AudioRegistry(MuteCommandSink, Protocol):
    """The audio server side as seen by the orchestrator."""

    def connect(self) -> None:
        """Connect, subscribe to stream events and track the existing streams."""
        ...

    def pump(self, timeout: Optional[float] = None) -> int:
        """Wait for server events (or a wakeup) and apply them; returns how many."""
        ...

    def wakeup(self) -> None:
        """Interrupt a running ``pump``. Safe to call from any thread."""
        ...

    def close(self) -> None:
        ...
