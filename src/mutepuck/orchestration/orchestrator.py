"""
Daemon orchestrator: wiring, thread supervision and shutdown.

Threads:
    main thread      audio registry loop, stream tracker, dispatcher, LED writes
    mutepuck-hardware  hotplug supervisor and button reads (blocking I/O)

The hardware thread only ever puts event messages on the channel and wakes
the audio loop. Everything that touches the stream map, the audio server or
the LED happens on the main thread, in channel order.
"""

import logging
import queue
import signal
import threading
from collections.abc import Callable
from typing import Optional

from mutepuck.audio import PulseRegistry
from mutepuck.core import Dispatcher, StreamTracker
from mutepuck.devices import (
    ButtonEventSource,
    HidapiTransport,
    HotplugSupervisor,
    LedActuator,
    UdevHotplugMonitor,
)
from mutepuck.exceptions import ErrorContext, MutePuckError, WorkerFailedError
from mutepuck.models import Event, Message, PuckConfig
from mutepuck.protocols import AudioRegistry, HidTransport, HotplugSource

logger = logging.getLogger(__name__)

HARDWARE_THREAD_NAME = "mutepuck-hardware"


class Orchestrator:
    """
    Top-level coordinator of the mute puck daemon.

    Coordinates:
    - The message channel shared by all producers
    - StreamTracker + audio registry (main thread)
    - HotplugSupervisor + ButtonEventSource (hardware thread)
    - Dispatcher + LedActuator (main thread)
    - Lifecycle (initialize, run, shutdown) and worker failure handling

    Any exception escaping the hardware thread stops the main loop, which
    then raises WorkerFailedError: a half-working daemon would show an LED
    that no longer matches the real mute state.
    """

    def __init__(
        self,
        config: PuckConfig,
        registry_factory: Optional[Callable[[StreamTracker], AudioRegistry]] = None,
        transport: Optional[HidTransport] = None,
        hotplug_factory: Optional[Callable[[], HotplugSource]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Daemon configuration
            registry_factory: Builds the audio registry around the tracker
                              (defaults to PulseRegistry)
            transport: Puck transport (defaults to HidapiTransport)
            hotplug_factory: Builds the hotplug source (defaults to UdevHotplugMonitor)
        """
        self.config = config
        self.channel: "queue.Queue[Message]" = queue.Queue()
        self.tracker = StreamTracker(self.channel)

        if registry_factory is None:
            registry_factory = self._default_registry
        self.registry = registry_factory(self.tracker)

        self.transport = transport or HidapiTransport(config.vendor_id, config.product_id)
        self.led = LedActuator(self.transport)
        self.dispatcher = Dispatcher(self.channel, self.tracker, self.registry, self.led)

        self._hotplug_factory = hotplug_factory or (lambda: UdevHotplugMonitor(config.hotplug_subsystem))
        self._hotplug: Optional[HotplugSource] = None
        self.supervisor: Optional[HotplugSupervisor] = None

        self._stop = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._worker_error: Optional[BaseException] = None
        self._previous_handlers: dict[int, object] = {}

    def _default_registry(self, tracker: StreamTracker) -> AudioRegistry:
        return PulseRegistry(
            tracker,
            client_name=self.config.client_name,
            ignored_applications=self.config.ignored_applications,
            poll_interval=self.config.audio_poll_interval,
        )

    def initialize(self) -> None:
        """
        Connect to the audio server and start the hardware thread.

        Raises:
            AudioServerConnectionError: The audio server cannot be reached
            DeviceAccessError: udev or HID access is unavailable
        """
        logger.info("Initializing mute puck daemon")

        with ErrorContext("connect to audio server", logger_instance=logger):
            self.registry.connect()

        with ErrorContext("start hotplug monitoring", logger_instance=logger):
            self._hotplug = self._hotplug_factory()

        source = ButtonEventSource(
            self.post_event,
            press_codes=self.config.press_codes,
            release_codes=self.config.release_codes,
            report_length=self.config.report_length,
            read_timeout_ms=self.config.read_timeout_ms,
        )
        self.supervisor = HotplugSupervisor(
            self.transport,
            self._hotplug,
            source,
            self.post_event,
            hotplug_timeout=self.config.hotplug_timeout,
        )

        # Show the initial vote even before the puck reports anything
        self.dispatcher.drain()
        self.led.render(self.dispatcher.last_state, self.dispatcher.last_event)

        self._worker = threading.Thread(target=self._run_worker, name=HARDWARE_THREAD_NAME, daemon=True)
        self._worker.start()

        logger.info("Mute puck daemon initialized")

    def run(self) -> None:
        """
        Run the audio loop on the calling thread until ``request_stop``.

        Raises:
            WorkerFailedError: The hardware thread died
            MalformedPayloadError: The audio server violated its protocol
        """
        if self._worker is None:
            self.initialize()

        while not self._stop.is_set():
            self.registry.pump()
            self.dispatcher.drain()

        if self._worker_error is not None:
            raise WorkerFailedError(HARDWARE_THREAD_NAME, self._worker_error) from self._worker_error

    def post_event(self, event: Event) -> None:
        """
        Queue a hardware event for the dispatcher. Safe to call from any thread.

        Args:
            event: Button or hotplug event
        """
        self.channel.put(Message.of_event(event))
        self.registry.wakeup()

    def request_stop(self) -> None:
        """Make ``run`` return. Safe to call from any thread and from signal handlers."""
        self._stop.set()
        self.registry.wakeup()

    def install_signal_handlers(self) -> None:
        """Stop cleanly on SIGINT/SIGTERM. Must be called from the main thread."""
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def shutdown(self) -> None:
        """Stop the hardware thread, blank the LED and disconnect from the audio server."""
        logger.info("Shutting down mute puck daemon")
        self.request_stop()

        if self.supervisor:
            self.supervisor.stop()
        if self._worker and self._worker.is_alive():
            self._worker.join(timeout=2.0)
            if self._worker.is_alive():
                logger.debug("Hardware thread still blocked, leaving it to exit with the process")

        # Best effort, the puck may be gone
        try:
            if self.led.clear():
                logger.debug("LED cleared")
        except MutePuckError as e:
            logger.debug(f"Could not clear LED: {e.technical_message}")

        try:
            self.registry.close()
        except Exception as e:
            logger.error(f"Error disconnecting from audio server: {e}")

        if self._hotplug is not None:
            self._hotplug.close()
            self._hotplug = None

        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _handle_signal(self, signum, frame) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, stopping")
        self.request_stop()

    def _run_worker(self) -> None:
        try:
            self.supervisor.run()
        except BaseException as e:
            logger.exception(f"{HARDWARE_THREAD_NAME} thread failed")
            self._worker_error = e
            self.request_stop()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()
