"""Hot-plug supervision of the puck connection."""

import logging
import threading
import time
from collections.abc import Callable
from typing import Optional

from mutepuck.exceptions import DeviceAccessError, DeviceNotFoundError
from mutepuck.models import Event
from mutepuck.protocols import HidTransport, HotplugSource

from .input import ButtonEventSource

logger = logging.getLogger(__name__)


class UdevHotplugMonitor:
    """
    udev add/remove notifications for one subsystem (pyudev).

    Supports a blocking wait for the next notification and a non-blocking
    drain of everything already queued.
    """

    def __init__(self, subsystem: str = "hidraw") -> None:
        """
        Start listening for notifications.

        Args:
            subsystem: udev subsystem to filter on

        Raises:
            DeviceAccessError: udev is not available
        """
        try:
            import pyudev

            context = pyudev.Context()
            self._monitor = pyudev.Monitor.from_netlink(context)
            self._monitor.filter_by(subsystem)
            self._monitor.start()
        except (ImportError, OSError) as e:
            raise DeviceAccessError(f"cannot monitor {subsystem} hotplug events: {e}") from e

        self.subsystem = subsystem
        logger.debug(f"Monitoring udev subsystem '{subsystem}'")

    def wait_for_event(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Block until the next notification.

        Args:
            timeout: Seconds to wait, None waits forever

        Returns:
            The udev action ("add", "remove", ...) or None on timeout

        Raises:
            OSError: The notification could not be received
        """
        device = self._monitor.poll(timeout=timeout)
        if device is None:
            return None
        logger.debug(f"udev {device.action}: {device.sys_path}")
        return device.action

    def clear_events(self) -> int:
        """Drop every already-queued notification; returns how many."""
        count = 0
        while self._monitor.poll(timeout=0) is not None:
            count += 1
        return count

    def close(self) -> None:
        # pyudev closes the netlink socket when the monitor is collected
        self._monitor = None


class HotplugSupervisor:
    """
    Keeps the puck connected across unplug/replug cycles.

    Disconnected: try to open the puck. On success emit HOTPLUG, drop
    hotplug notifications that queued up before the open, then read button
    reports until the device fails. On failure block until udev reports an
    "add" in the watched subsystem, then try again.

    A missing puck is expected and retried forever. DeviceAccessError (no
    HID access at all) is not caught and ends the supervisor.

    ``run`` blocks; start it on its own thread and call ``stop`` to end it.
    """

    # Upper bound on one hotplug wait, so stop() is noticed
    WAIT_SLICE = 1.0

    def __init__(
        self,
        transport: HidTransport,
        hotplug: HotplugSource,
        source: ButtonEventSource,
        emit: Callable[[Event], None],
        hotplug_timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the supervisor.

        Args:
            transport: Opens the puck
            hotplug: Notification source filtered to the puck's subsystem
            source: Classifies input reports while connected
            emit: Receives the HOTPLUG event on every (re)connection
            hotplug_timeout: Retry the open after this many seconds without
                             an "add" notification (None = wait forever)
        """
        self._transport = transport
        self._hotplug = hotplug
        self._source = source
        self._emit = emit
        self._hotplug_timeout = hotplug_timeout
        # Only ever set: a stop() issued before run() starts must still end it
        self._stopping = threading.Event()

    def run(self) -> None:
        """Supervise the connection until ``stop`` is called."""
        logger.debug("Hotplug supervisor started")

        while self._should_run():
            try:
                handle = self._transport.open()
            except DeviceNotFoundError as e:
                logger.debug(e.technical_message)
                logger.info("Waiting for add event")
                self._wait_for_add()
                continue

            self._serve(handle)

        logger.debug("Hotplug supervisor stopped")

    def stop(self) -> None:
        """
        Ask ``run`` to return at its next read timeout or wait slice.

        May be called before ``run`` has started; ``run`` then returns
        without opening the device.
        """
        self._stopping.set()

    def _should_run(self) -> bool:
        return not self._stopping.is_set()

    def _serve(self, handle) -> None:
        logger.info("Connected to mute device")
        try:
            drained = self._hotplug.clear_events()
            if drained:
                logger.debug(f"Dropped {drained} stale hotplug notification(s)")
            self._emit(Event.HOTPLUG)
            self._source.pump(handle, self._should_run)
        finally:
            try:
                handle.close()
            except OSError as e:
                logger.debug(f"Error closing mute device: {e}")

        if self._should_run():
            logger.warning("Mute device disconnected")

    def _wait_for_add(self) -> None:
        deadline = None
        if self._hotplug_timeout is not None:
            deadline = time.monotonic() + self._hotplug_timeout

        while self._should_run():
            timeout = self.WAIT_SLICE
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug("No hotplug event before timeout, retrying open")
                    return
                timeout = min(timeout, remaining)

            try:
                action = self._hotplug.wait_for_event(timeout)
            except OSError as e:
                logger.info(f"Re-waiting for event ({e})")
                continue

            if action == "add":
                return
            if action is not None:
                logger.debug(f"Ignoring hotplug '{action}' notification")
