"""Tests for the hot-plug supervisor."""

import sys
import threading
import time
from unittest.mock import MagicMock, Mock, patch

import pytest

from fakes import FakeHandle, FakeHotplug, FakeTransport
from mutepuck.devices import ButtonEventSource, HotplugSupervisor, UdevHotplugMonitor
from mutepuck.exceptions import DeviceAccessError
from mutepuck.models import Event

PRESS = [0, 0, 0, 4, 0, 0, 0, 0]
RELEASE = [0, 0, 0, 0, 0, 0, 0, 0]


def connect_before_add(transport):
    """on_wait hook: plug the device in just before an "add" is delivered."""

    def hook(hotplug):
        if hotplug.actions and hotplug.actions[0] == "add":
            transport.connected = True

    return hook


class Harness:
    """Supervisor wired to fakes, recording emitted events."""

    def __init__(self, transport, hotplug, hotplug_timeout=None):
        self.events = []
        self.on_emit = None
        self.transport = transport
        self.hotplug = hotplug
        source = ButtonEventSource(self.emit)
        self.supervisor = HotplugSupervisor(transport, hotplug, source, self.emit, hotplug_timeout)

    def emit(self, event):
        self.events.append(event)
        if self.on_emit is not None:
            self.on_emit(event)


class TestHotplugSupervisor:
    """Test connect, disconnect and reconnect cycles."""

    def test_replug_cycle(self):
        first = FakeHandle([PRESS, RELEASE])
        second = FakeHandle([PRESS])
        transport = FakeTransport(connected=True)
        transport.reader_handles.extend([first, second])
        hotplug = FakeHotplug(["remove", "add"], queued=2)
        hotplug.on_wait = connect_before_add(transport)
        harness = Harness(transport, hotplug)

        def on_emit(event):
            if event is Event.RELEASE:
                # Unplugged right after the release
                transport.connected = False
            elif event is Event.PRESS and harness.events.count(Event.HOTPLUG) == 2:
                harness.supervisor.stop()

        harness.on_emit = on_emit
        harness.supervisor.run()

        assert harness.events == [
            Event.HOTPLUG,
            Event.PRESS,
            Event.RELEASE,
            Event.HOTPLUG,
            Event.PRESS,
        ]
        assert hotplug.cleared == 2
        assert first.closed and second.closed

    def test_stale_events_dropped_before_hotplug(self):
        handle = FakeHandle()
        transport = FakeTransport(connected=True)
        transport.reader_handles.append(handle)
        hotplug = FakeHotplug(queued=5)
        harness = Harness(transport, hotplug)
        seen = {}

        def on_emit(event):
            seen["queued"] = hotplug.queued
            seen["closed"] = handle.closed
            harness.supervisor.stop()

        harness.on_emit = on_emit
        harness.supervisor.run()

        assert seen == {"queued": 0, "closed": False}
        assert handle.closed

    def test_starts_disconnected_and_waits_for_add(self):
        transport = FakeTransport(connected=False)
        transport.reader_handles.append(FakeHandle())
        hotplug = FakeHotplug(["change", "remove", "add"])
        hotplug.on_wait = connect_before_add(transport)
        harness = Harness(transport, hotplug)
        harness.on_emit = lambda event: harness.supervisor.stop()

        harness.supervisor.run()

        assert harness.events == [Event.HOTPLUG]
        assert hotplug.waits == 3
        assert transport.open_count == 2

    def test_wait_error_rewaits(self):
        transport = FakeTransport(connected=False)
        transport.reader_handles.append(FakeHandle())
        hotplug = FakeHotplug([OSError("netlink"), "add"])
        hotplug.on_wait = connect_before_add(transport)
        harness = Harness(transport, hotplug)
        harness.on_emit = lambda event: harness.supervisor.stop()

        harness.supervisor.run()

        assert harness.events == [Event.HOTPLUG]
        assert hotplug.waits == 2

    def test_timeout_retries_open(self):
        transport = FakeTransport(connected=False)
        hotplug = FakeHotplug()
        harness = Harness(transport, hotplug, hotplug_timeout=0.05)

        def on_wait(_):
            time.sleep(0.02)
            if transport.open_count >= 2:
                harness.supervisor.stop()

        hotplug.on_wait = on_wait
        harness.supervisor.run()

        assert transport.open_count == 2
        assert harness.events == []

    def test_stop_from_other_thread(self):
        transport = FakeTransport(connected=False)
        hotplug = FakeHotplug()
        hotplug.on_wait = lambda _: time.sleep(0.001)
        harness = Harness(transport, hotplug)

        thread = threading.Thread(target=harness.supervisor.run, daemon=True)
        thread.start()
        deadline = time.monotonic() + 2.0
        while not hotplug.waits and time.monotonic() < deadline:
            time.sleep(0.001)

        harness.supervisor.stop()
        thread.join(timeout=2.0)

        assert not thread.is_alive()

    def test_access_error_propagates(self):
        transport = Mock()
        transport.open.side_effect = DeviceAccessError("no hidraw")
        harness = Harness(transport, FakeHotplug())

        with pytest.raises(DeviceAccessError):
            harness.supervisor.run()

        assert harness.events == []

    def test_stop_before_run(self):
        transport = FakeTransport(connected=True)
        harness = Harness(transport, FakeHotplug())

        harness.supervisor.stop()
        harness.supervisor.run()

        assert transport.open_count == 0
        assert harness.events == []

    def test_stop_before_thread_starts(self):
        transport = FakeTransport(connected=False)
        hotplug = FakeHotplug()
        hotplug.on_wait = lambda _: time.sleep(0.001)
        harness = Harness(transport, hotplug)

        harness.supervisor.stop()
        thread = threading.Thread(target=harness.supervisor.run, daemon=True)
        thread.start()
        thread.join(timeout=1.0)

        assert not thread.is_alive()
        assert transport.open_count == 0


@pytest.fixture
def pyudev():
    """Mocked pyudev module; its monitor is ``pyudev.Monitor.from_netlink.return_value``."""
    fake_pyudev = MagicMock()
    with patch.dict(sys.modules, {"pyudev": fake_pyudev}):
        yield fake_pyudev


def udev_device(action):
    return Mock(action=action, sys_path=f"/sys/class/hidraw/hidraw3 ({action})")


class TestUdevHotplugMonitor:
    """Test the pyudev-backed notification source."""

    def test_monitors_subsystem(self, pyudev):
        monitor = UdevHotplugMonitor("hidraw")

        netlink = pyudev.Monitor.from_netlink
        netlink.assert_called_once_with(pyudev.Context.return_value)
        netlink.return_value.filter_by.assert_called_once_with("hidraw")
        netlink.return_value.start.assert_called_once()
        assert monitor.subsystem == "hidraw"

    def test_wait_returns_action(self, pyudev):
        udev = pyudev.Monitor.from_netlink.return_value
        udev.poll.return_value = udev_device("add")
        monitor = UdevHotplugMonitor()

        assert monitor.wait_for_event(1.0) == "add"
        udev.poll.assert_called_with(timeout=1.0)

    def test_wait_timeout_returns_none(self, pyudev):
        udev = pyudev.Monitor.from_netlink.return_value
        udev.poll.return_value = None
        monitor = UdevHotplugMonitor()

        assert monitor.wait_for_event(0.5) is None

    def test_wait_blocks_without_timeout(self, pyudev):
        udev = pyudev.Monitor.from_netlink.return_value
        udev.poll.return_value = udev_device("remove")
        monitor = UdevHotplugMonitor()

        assert monitor.wait_for_event() == "remove"
        udev.poll.assert_called_with(timeout=None)

    def test_wait_error_propagates(self, pyudev):
        udev = pyudev.Monitor.from_netlink.return_value
        udev.poll.side_effect = OSError("netlink receive failed")
        monitor = UdevHotplugMonitor()

        with pytest.raises(OSError):
            monitor.wait_for_event(1.0)

    def test_clear_events_counts_queued(self, pyudev):
        udev = pyudev.Monitor.from_netlink.return_value
        udev.poll.side_effect = [udev_device("add"), udev_device("change"), None]
        monitor = UdevHotplugMonitor()

        assert monitor.clear_events() == 2
        assert all(call.kwargs == {"timeout": 0} for call in udev.poll.call_args_list)

    def test_clear_events_when_empty(self, pyudev):
        pyudev.Monitor.from_netlink.return_value.poll.return_value = None
        assert UdevHotplugMonitor().clear_events() == 0

    def test_netlink_failure_is_access_error(self, pyudev):
        pyudev.Monitor.from_netlink.side_effect = OSError("Operation not permitted")

        with pytest.raises(DeviceAccessError) as exc_info:
            UdevHotplugMonitor("hidraw")

        assert "hidraw" in exc_info.value.technical_message
        assert not exc_info.value.recoverable

    def test_missing_pyudev_is_access_error(self):
        with patch.dict(sys.modules, {"pyudev": None}):
            with pytest.raises(DeviceAccessError):
                UdevHotplugMonitor()
