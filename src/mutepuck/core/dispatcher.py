"""Single consumer of the message channel: mute toggling and LED rendering."""

import logging
import queue

from mutepuck.models import Event, Message, State
from mutepuck.protocols import LedOutput, MuteCommandSink

from .stream_tracker import StreamTracker

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Serializes button events and vote updates into actions.

    The dispatcher remembers the latest vote and the latest button event.
    A button release flips the vote into a target mute value and sends it
    to every tracked stream. After every message the LED is re-rendered
    from the remembered pair.

    Messages are processed strictly in channel order and never coalesced.
    Only one thread may consume the channel, and it must not be the thread
    that blocks on device reads.
    """

    def __init__(
        self,
        channel: "queue.Queue[Message]",
        tracker: StreamTracker,
        mute_sink: MuteCommandSink,
        led: LedOutput,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            channel: Channel shared by all producers
            tracker: Stream tracker, used to address mute commands
            mute_sink: Receiver of mute-set commands
            led: LED output of the puck
        """
        self._channel = channel
        self._tracker = tracker
        self._mute_sink = mute_sink
        self._led = led
        self.last_state = State.SILENT
        self.last_event = Event.RELEASE

    def process(self, message: Message) -> None:
        """
        Handle one message and re-render the LED.

        Args:
            message: Vote update or button/hotplug event
        """
        logger.debug(f"Processing {message!r}")

        if message.state is not None:
            self.last_state = message.state
        elif message.event is not None:
            self.last_event = message.event
            if message.event is Event.RELEASE:
                self._toggle_mute()

        self._led.render(self.last_state, self.last_event)

    def drain(self) -> int:
        """
        Process every message already queued, without blocking.

        Returns:
            Number of messages processed
        """
        count = 0
        while True:
            try:
                message = self._channel.get_nowait()
            except queue.Empty:
                return count
            self.process(message)
            count += 1

    def _toggle_mute(self) -> None:
        target = self.last_state.toggled()
        mute = target.is_muted

        if mute is None:
            logger.info("No mute change event (no streams)")
            return

        stream_ids = self._tracker.stream_ids()
        logger.info(f"Button released: {self.last_state.name} -> {target.name} on {len(stream_ids)} stream(s)")
        for stream_id in stream_ids:
            self._mute_sink.set_mute(stream_id, mute)
