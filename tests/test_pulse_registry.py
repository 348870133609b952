"""Tests for the pulsectl-backed audio registry."""

import importlib.abc
import importlib.util
import sys
import types
from types import SimpleNamespace

import pytest

from fakes import drain_messages
from mutepuck.audio import PulseRegistry
from mutepuck.exceptions import AudioServerConnectionError, MalformedPayloadError
from mutepuck.models import State


class PulseError(Exception):
    pass


class PulseIndexError(PulseError):
    pass


class PulseOperationFailed(PulseError):
    pass


def stream(index, mute=0, application="Firefox", **properties):
    properties.setdefault("application.name", application)
    return SimpleNamespace(index=index, mute=mute, proplist=properties)


class FakePulse:
    """In-memory audio server speaking the pulsectl client API."""

    def __init__(self, client_name):
        self.client_name = client_name
        self.outputs = {}
        self.script = []
        self.callback = None
        self.mask = None
        self.mute_calls = []
        self.failing = set()
        self.stop_calls = 0
        self.listen_timeouts = []
        self.closed = False

    def event_mask_set(self, *masks):
        self.mask = masks

    def event_callback_set(self, callback):
        self.callback = callback

    def event_listen(self, timeout=None):
        self.listen_timeouts.append(timeout)
        script, self.script = self.script, []
        for event_type, index in script:
            self.callback(SimpleNamespace(t=event_type, index=index))

    def event_listen_stop(self):
        self.stop_calls += 1

    def source_output_list(self):
        return list(self.outputs.values())

    def source_output_info(self, index):
        try:
            return self.outputs[index]
        except KeyError:
            raise PulseIndexError(index) from None

    def source_output_mute(self, index, mute):
        if index in self.failing:
            raise PulseOperationFailed(index)
        self.mute_calls.append((index, mute))

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def pulsectl_module(monkeypatch):
    """Stand-in pulsectl module so the registry never talks to a real server."""
    module = types.ModuleType("pulsectl")
    module.PulseError = PulseError
    module.PulseIndexError = PulseIndexError
    module.PulseOperationFailed = PulseOperationFailed
    module.Pulse = FakePulse
    monkeypatch.setitem(sys.modules, "pulsectl", module)
    return module


@pytest.fixture
def server():
    return FakePulse("mutepuck")


@pytest.fixture
def registry(tracker, server):
    return PulseRegistry(tracker, poll_interval=0.1, pulse_factory=lambda name: server)


def states(channel):
    return [message.state for message in drain_messages(channel)]


class TestConnect:
    """Test connecting and the initial scan."""

    def test_subscribes_to_source_outputs(self, registry, server):
        registry.connect()

        assert server.mask == ("source_output",)
        assert server.callback is not None

    def test_tracks_existing_streams(self, registry, server, tracker, channel):
        server.outputs[1] = stream(1, mute=1)
        server.outputs[2] = stream(2, application="PulseAudio Volume Control")
        server.outputs[3] = stream(3, **{"media.category": "Manager"})

        registry.connect()

        assert tracker.stream_ids() == [1]
        assert tracker.get(1).mute is True
        assert states(channel) == [State.MUTED]

    def test_connection_failure(self, tracker):
        def refuse(name):
            raise PulseError("Failed to connect to pulseaudio server")

        registry = PulseRegistry(tracker, client_name="puck", pulse_factory=refuse)

        with pytest.raises(AudioServerConnectionError) as exc_info:
            registry.connect()

        assert exc_info.value.client_name == "puck"
        assert "Failed to connect" in exc_info.value.technical_message

    def test_default_factory_is_pulsectl(self, tracker):
        registry = PulseRegistry(tracker, client_name="puck")
        registry.connect()

        assert registry._pulse.client_name == "puck"


class TestPump:
    """Test applying server events to the tracker."""

    def test_new_stream(self, registry, server, tracker, channel):
        registry.connect()
        server.outputs[4] = stream(4, mute=0)
        server.script = [("new", 4)]

        assert registry.pump() == 1

        assert 4 in tracker
        assert states(channel) == [State.UNMUTED]
        assert server.listen_timeouts == [0.1]

    def test_ignored_new_stream(self, registry, server, tracker, channel):
        registry.connect()
        server.outputs[4] = stream(4, application="GNOME Settings")
        server.script = [("new", 4)]

        registry.pump()

        assert len(tracker) == 0
        assert channel.empty()

    def test_change_updates_mute(self, registry, server, tracker, channel):
        server.outputs[4] = stream(4, mute=0)
        registry.connect()
        server.outputs[4].mute = 1
        server.script = [("change", 4)]

        registry.pump(timeout=0)

        assert tracker.get(4).mute is True
        assert states(channel) == [State.UNMUTED, State.MUTED]
        assert server.listen_timeouts == [0]

    def test_change_for_untracked_stream_is_ignored(self, registry, server, tracker, channel):
        registry.connect()
        server.outputs[8] = stream(8, application="GNOME Settings", mute=1)
        server.script = [("change", 8)]

        registry.pump()

        assert channel.empty()

    def test_remove(self, registry, server, tracker, channel):
        server.outputs[4] = stream(4, mute=1)
        registry.connect()
        del server.outputs[4]
        server.script = [("remove", 4)]

        registry.pump()

        assert 4 not in tracker
        assert states(channel) == [State.MUTED, State.SILENT]

    def test_stream_vanished_before_lookup(self, registry, server, tracker, channel):
        server.outputs[4] = stream(4)
        registry.connect()
        del server.outputs[4]
        server.script = [("change", 4)]

        registry.pump()

        assert 4 not in tracker

    def test_events_applied_in_order(self, registry, server, tracker, channel):
        registry.connect()
        server.outputs[1] = stream(1, mute=0)
        server.outputs[2] = stream(2, mute=1)
        server.script = [("new", 1), ("new", 2), ("remove", 1)]

        assert registry.pump() == 3

        assert states(channel) == [State.UNMUTED, State.CONFUSED, State.MUTED]

    def test_malformed_mute_raises(self, registry, server):
        server.outputs[4] = stream(4)
        registry.connect()
        server.outputs[4].mute = "maybe"
        server.script = [("change", 4)]

        with pytest.raises(MalformedPayloadError):
            registry.pump()


class TestCommands:
    """Test mute commands, wakeup and close."""

    def test_set_mute(self, registry, server):
        registry.connect()
        registry.set_mute(5, True)

        assert server.mute_calls == [(5, True)]

    def test_set_mute_failure_is_logged(self, registry, server, caplog):
        registry.connect()
        server.failing.add(5)

        registry.set_mute(5, False)

        assert server.mute_calls == []
        assert "Could not unmute stream 5" in caplog.text

    def test_wakeup(self, registry, server):
        registry.wakeup()
        assert server.stop_calls == 0

        registry.connect()
        registry.wakeup()
        assert server.stop_calls == 1

    def test_close(self, registry, server):
        registry.connect()
        registry.close()
        registry.close()

        assert server.closed
        registry.wakeup()
        assert server.stop_calls == 0

    def test_wakeup_during_close_is_ignored(self, registry, server):
        registry.connect()
        closed = []

        def close():
            # Hardware thread waking the loop while the client shuts down
            registry.wakeup()
            closed.append(True)

        server.close = close
        registry.close()

        assert closed == [True]
        assert server.stop_calls == 0


class MissingLibpulseFinder(importlib.abc.MetaPathFinder, importlib.abc.Loader):
    """Import hook that fails ``import pulsectl`` the way a missing libpulse does."""

    def find_spec(self, name, path=None, target=None):
        if name == "pulsectl":
            return importlib.util.spec_from_loader(name, self)
        return None

    def create_module(self, spec):
        return None

    def exec_module(self, module):
        raise OSError("libpulse.so.0: cannot open shared object file: No such file or directory")


class TestLibraryLoading:
    """Test failures to load the audio client library."""

    def test_missing_pulsectl(self, tracker, monkeypatch):
        monkeypatch.setitem(sys.modules, "pulsectl", None)
        registry = PulseRegistry(tracker, client_name="puck")

        with pytest.raises(AudioServerConnectionError) as exc_info:
            registry.connect()

        assert "cannot load pulsectl" in exc_info.value.technical_message
        assert exc_info.value.recovery_hint

    def test_libpulse_not_loadable(self, tracker, monkeypatch):
        monkeypatch.delitem(sys.modules, "pulsectl")
        monkeypatch.setattr(sys, "meta_path", [MissingLibpulseFinder()] + sys.meta_path)
        registry = PulseRegistry(tracker)

        with pytest.raises(AudioServerConnectionError) as exc_info:
            registry.connect()

        assert "libpulse.so.0" in exc_info.value.technical_message
        assert isinstance(exc_info.value.__cause__, OSError)
