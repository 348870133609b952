"""Audio registry collaborator backed by the PulseAudio protocol (pulsectl).

PipeWire serves the same protocol through pipewire-pulse, where
"source outputs" are the Stream/Input/Audio nodes: one per application
currently recording.
"""

import logging
from collections.abc import Callable, Collection
from typing import Any, Optional

from mutepuck.core import StreamTracker
from mutepuck.exceptions import AudioServerConnectionError

from .filters import DEFAULT_IGNORED_APPLICATIONS, decode_mute, is_tracked_stream

logger = logging.getLogger(__name__)


class PulseRegistry:
    """
    Feeds the stream tracker from audio server events and executes mute commands.

    All methods except ``wakeup`` must be called from the thread that owns
    the registry (the main thread). ``pump`` waits for server events and
    applies them to the tracker; ``wakeup`` interrupts that wait from any
    thread so queued button events are dispatched promptly.

    pulsectl does not allow server requests from inside its event callback,
    so the callback only records (type, index) pairs and ``pump`` resolves
    them once the listen loop has returned.
    """

    def __init__(
        self,
        tracker: StreamTracker,
        client_name: str = "mutepuck",
        ignored_applications: Collection[str] = DEFAULT_IGNORED_APPLICATIONS,
        poll_interval: float = 0.25,
        pulse_factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            tracker: Stream tracker to feed
            client_name: Client name announced to the server
            ignored_applications: Applications whose streams are never tracked
            poll_interval: Upper bound on one event wait (seconds)
            pulse_factory: Builds the client from a name (defaults to pulsectl.Pulse)
        """
        self._tracker = tracker
        self._client_name = client_name
        self._ignored_applications = frozenset(ignored_applications)
        self._poll_interval = poll_interval
        self._pulse_factory = pulse_factory
        self._pulse: Any = None
        self._pending: list[tuple[str, int]] = []

    def connect(self) -> None:
        """
        Connect to the server, subscribe to stream events and track existing streams.

        Raises:
            AudioServerConnectionError: The server cannot be reached or
                libpulse cannot be loaded
        """
        try:
            import pulsectl
        except (ImportError, OSError) as e:
            # pulsectl loads libpulse through ctypes at import time
            raise AudioServerConnectionError(self._client_name, f"cannot load pulsectl: {e}") from e

        factory = self._pulse_factory or pulsectl.Pulse
        try:
            self._pulse = factory(self._client_name)
        except pulsectl.PulseError as e:
            raise AudioServerConnectionError(self._client_name, str(e)) from e

        self._pulse.event_mask_set("source_output")
        self._pulse.event_callback_set(self._on_event)
        logger.info(f"Connected to audio server as '{self._client_name}'")

        for info in self._pulse.source_output_list():
            self._track(info)

    def pump(self, timeout: Optional[float] = None) -> int:
        """
        Wait for server events and apply them to the tracker.

        Returns after ``timeout`` (default: the poll interval), or earlier
        when ``wakeup`` is called.

        Returns:
            Number of server events applied
        """
        self._pulse.event_listen(timeout=self._poll_interval if timeout is None else timeout)

        events, self._pending = self._pending, []
        for event_type, index in events:
            self._apply(event_type, index)
        return len(events)

    def wakeup(self) -> None:
        """Interrupt a running ``pump`` wait. Safe to call from any thread."""
        pulse = self._pulse
        if pulse is None:
            return
        try:
            pulse.event_listen_stop()
        except Exception as e:
            # Only happens while the client is being closed during shutdown
            logger.debug(f"Audio loop wakeup failed: {e}")

    def set_mute(self, stream_id: int, mute: bool) -> None:
        """
        Ask the server to (un)mute one stream. Fire and forget.

        The stream may disappear before the request arrives; that is
        logged and otherwise ignored.
        """
        import pulsectl

        logger.debug(f"Setting mute={mute} on stream {stream_id}")
        try:
            self._pulse.source_output_mute(stream_id, mute)
        except pulsectl.PulseOperationFailed as e:
            logger.warning(f"Could not {'mute' if mute else 'unmute'} stream {stream_id}: {e}")

    def close(self) -> None:
        # Detach first so a late wakeup() never reaches a closed client
        pulse, self._pulse = self._pulse, None
        if pulse is not None:
            pulse.close()

    def _on_event(self, event: Any) -> None:
        # Runs inside event_listen: no server requests allowed here
        self._pending.append((event.t, event.index))

    def _apply(self, event_type: str, index: int) -> None:
        if event_type == "remove":
            self._tracker.remove(index)
            return

        info = self._lookup(index)
        if info is None:
            # Gone again before we could look at it
            self._tracker.remove(index)
            return

        if event_type == "new":
            self._track(info)
        elif event_type == "change":
            mute = decode_mute(index, getattr(info, "mute", None))
            if mute is not None:
                self._tracker.update_mute(index, mute)

    def _lookup(self, index: int) -> Any:
        import pulsectl

        try:
            return self._pulse.source_output_info(index)
        except pulsectl.PulseIndexError:
            logger.debug(f"Stream {index} vanished before lookup")
            return None

    def _track(self, info: Any) -> None:
        properties = getattr(info, "proplist", None) or {}
        if not is_tracked_stream(properties, self._ignored_applications):
            return

        mute = decode_mute(info.index, getattr(info, "mute", None))
        self._tracker.add(
            info.index,
            initial_mute=bool(mute),
            application_name=properties.get("application.name", "UNKNOWN"),
        )
