"""Tracker for the live set of audio input streams and their mute flags."""

import logging
import queue
from threading import Lock
from typing import Optional

from mutepuck.models import Message, State, StreamEntry

from .voting import fold

logger = logging.getLogger(__name__)


class StreamTracker:
    """
    Owns the map of tracked input streams and publishes the mute vote.

    Every mutation recomputes the vote from scratch over all current
    entries and sends it to the dispatcher channel as a state message.
    The vote is never patched incrementally, so it cannot drift from the
    stream set.

    The map is only reachable through add/update_mute/remove. A lock covers
    one mutation plus the fold; the channel send happens after the lock is
    released so a full channel can never block other mutations.
    """

    def __init__(self, channel: "queue.Queue[Message]") -> None:
        """
        Initialize the tracker.

        Args:
            channel: Dispatcher channel that receives state messages
        """
        self._channel = channel
        self._lock = Lock()
        self._streams: dict[int, StreamEntry] = {}

    def add(self, stream_id: int, initial_mute: bool = False, application_name: str = "") -> None:
        """
        Start tracking a stream.

        Adding an id that is already tracked replaces its entry.

        Args:
            stream_id: Server-assigned stream id
            initial_mute: Mute flag known at creation time
            application_name: Application owning the stream
        """
        entry = StreamEntry(stream_id=stream_id, mute=initial_mute, application_name=application_name)
        with self._lock:
            self._streams[stream_id] = entry
            state = self._fold_locked()

        logger.info(f"Added stream {stream_id} ({application_name or 'unknown'}), vote is now {state.name}")
        self._publish(state)

    def update_mute(self, stream_id: int, mute: bool) -> None:
        """
        Record a new mute flag for a tracked stream.

        Unknown ids are ignored: a property notification may still be in
        flight for a stream that was just removed.

        Args:
            stream_id: Server-assigned stream id
            mute: New mute flag
        """
        with self._lock:
            entry = self._streams.get(stream_id)
            if entry is None:
                state = None
            else:
                self._streams[stream_id] = entry.with_mute(mute)
                state = self._fold_locked()

        if state is None:
            logger.debug(f"Ignoring mute change for untracked stream {stream_id}")
            return

        logger.info(f"Stream {stream_id} is {'muted' if mute else 'unmuted'}, vote is now {state.name}")
        self._publish(state)

    def remove(self, stream_id: int) -> None:
        """
        Stop tracking a stream. Unknown ids are ignored.

        Args:
            stream_id: Server-assigned stream id
        """
        with self._lock:
            removed = self._streams.pop(stream_id, None)
            state = self._fold_locked() if removed is not None else None

        if state is None:
            logger.debug(f"Ignoring removal of untracked stream {stream_id}")
            return

        logger.info(f"Removed stream {stream_id}, vote is now {state.name}")
        self._publish(state)

    def stream_ids(self) -> list[int]:
        """Snapshot of the tracked stream ids."""
        with self._lock:
            return list(self._streams)

    def get(self, stream_id: int) -> Optional[StreamEntry]:
        """Get the entry for a stream, or None if it is not tracked."""
        with self._lock:
            return self._streams.get(stream_id)

    @property
    def state(self) -> State:
        """Current vote over all tracked streams."""
        with self._lock:
            return self._fold_locked()

    def __len__(self) -> int:
        with self._lock:
            return len(self._streams)

    def __contains__(self, stream_id: object) -> bool:
        with self._lock:
            return stream_id in self._streams

    def _fold_locked(self) -> State:
        # Caller holds self._lock
        return fold(entry.mute for entry in self._streams.values())

    def _publish(self, state: State) -> None:
        self._channel.put(Message.of_state(state))
