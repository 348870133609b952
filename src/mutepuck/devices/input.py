"""Classification of puck input reports into button events."""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from mutepuck.models import Event
from mutepuck.protocols import HidHandle

logger = logging.getLogger(__name__)

# Byte of the input report carrying the button transition code
TRANSITION_OFFSET = 3


class ButtonEventSource:
    """
    Reads input reports from an open handle and emits button events.

    The release code differs across firmware revisions, so both code sets
    come from configuration. Codes in neither set (the "still pressed"
    repeat, duplicate releases, ...) are ignored.
    """

    def __init__(
        self,
        emit: Callable[[Event], None],
        press_codes: Iterable[int] = (4,),
        release_codes: Iterable[int] = (0,),
        report_length: int = 8,
        read_timeout_ms: int = 500,
    ) -> None:
        """
        Initialize the event source.

        Args:
            emit: Called with every classified event (from the reader thread)
            press_codes: Transition codes meaning "pressed"
            release_codes: Transition codes meaning "released"
            report_length: Input report size in bytes
            read_timeout_ms: Read timeout, so the loop can notice shutdown
        """
        self._emit = emit
        self._press_codes = frozenset(press_codes)
        self._release_codes = frozenset(release_codes)
        self._report_length = report_length
        self._read_timeout_ms = read_timeout_ms

    def classify(self, report: Sequence[int]) -> Optional[Event]:
        """
        Map one input report to a button event.

        Args:
            report: Raw input report bytes

        Returns:
            PRESS, RELEASE, or None for reports that carry no transition
        """
        if len(report) <= TRANSITION_OFFSET:
            logger.debug(f"Ignoring short input report: {list(report)}")
            return None

        code = report[TRANSITION_OFFSET]
        if code in self._press_codes:
            return Event.PRESS
        if code in self._release_codes:
            return Event.RELEASE

        logger.debug(f"Ignoring input report code {code}")
        return None

    def pump(self, handle: HidHandle, should_run: Callable[[], bool]) -> None:
        """
        Read reports until the device fails or ``should_run`` turns false.

        A read error (including the device being unplugged) ends the loop
        normally; the caller decides what to do next.

        Args:
            handle: Open device handle
            should_run: Checked before every read
        """
        while should_run():
            try:
                report = handle.read(self._report_length, self._read_timeout_ms)
            except OSError as e:
                logger.info(f"Mute device read failed: {e}")
                return

            if not report:
                continue

            event = self.classify(report)
            if event is not None:
                logger.debug(f"Button {event.value}")
                self._emit(event)
