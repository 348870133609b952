"""HID transport for the puck (hidapi)."""

import logging
from typing import Any

from mutepuck.exceptions import DeviceAccessError, DeviceNotFoundError

logger = logging.getLogger(__name__)

VENDOR_ID = 0x20A0
PRODUCT_ID = 0x42DA


class HidapiHandle:
    """Thin wrapper around an open ``hid.device``."""

    def __init__(self, device: Any) -> None:
        self._device = device

    def read(self, max_length: int, timeout_ms: int = 0) -> list[int]:
        """
        Read one input report.

        Args:
            max_length: Maximum report size in bytes
            timeout_ms: Read timeout, 0 blocks until a report arrives

        Returns:
            Report bytes, empty if the timeout expired

        Raises:
            OSError: The read failed (for example the device was unplugged)
        """
        return self._device.read(max_length, timeout_ms)

    def write(self, data: bytes) -> int:
        """
        Write one output report.

        Raises:
            OSError: The write failed
        """
        return self._device.write(data)

    def close(self) -> None:
        self._device.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class HidapiTransport:
    """
    Opens the puck by vendor/product id.

    Each call to ``open`` returns an independent handle. The reader thread
    keeps one handle for as long as the device stays attached, LED writes
    open their own short-lived handle so the two never share state.
    """

    def __init__(self, vendor_id: int = VENDOR_ID, product_id: int = PRODUCT_ID) -> None:
        """
        Initialize the transport.

        Args:
            vendor_id: USB vendor id of the puck
            product_id: USB product id of the puck
        """
        self.vendor_id = vendor_id
        self.product_id = product_id

    def open(self) -> HidapiHandle:
        """
        Open a new handle to the puck.

        Raises:
            DeviceNotFoundError: The puck is not attached or cannot be opened
            DeviceAccessError: The hidapi library cannot be loaded
        """
        try:
            import hid
        except ImportError as e:
            raise DeviceAccessError(str(e)) from e

        device = hid.device()
        try:
            device.open(self.vendor_id, self.product_id)
        except OSError as e:
            raise DeviceNotFoundError(self.vendor_id, self.product_id, str(e)) from e

        logger.debug(f"Opened HID device {self.vendor_id:04x}:{self.product_id:04x}")
        return HidapiHandle(device)
