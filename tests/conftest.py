"""Pytest fixtures for tests."""

import queue

import pytest

from fakes import FakeLed, FakeMuteSink
from mutepuck.core import Dispatcher, StreamTracker


@pytest.fixture
def channel():
    """Dispatcher channel."""
    return queue.Queue()


@pytest.fixture
def tracker(channel):
    """Stream tracker publishing on the channel."""
    return StreamTracker(channel)


@pytest.fixture
def mute_sink():
    return FakeMuteSink()


@pytest.fixture
def led():
    return FakeLed()


@pytest.fixture
def dispatcher(channel, tracker, mute_sink, led):
    """Dispatcher wired to fakes."""
    return Dispatcher(channel, tracker, mute_sink, led)
