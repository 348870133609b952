"""Device-related exceptions.

This module defines exceptions for puck hardware errors:
- DeviceError: Base class for device errors
- DeviceNotFoundError: The puck is not attached (transient)
- DeviceAccessError: HID access is unavailable altogether (fatal)
"""

from .base import MutePuckError


def _format_ids(vendor_id: int, product_id: int) -> str:
    return f"{vendor_id:04x}:{product_id:04x}"


class DeviceError(MutePuckError):
    """Puck device operation failed."""

    def __init__(self, user_message: str, vendor_id: int | None = None, product_id: int | None = None, **kwargs):
        """
        Initialize device error.

        Args:
            user_message: User-friendly error message
            vendor_id: USB vendor id of the device (if applicable)
            product_id: USB product id of the device (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.vendor_id = vendor_id
        self.product_id = product_id


class DeviceNotFoundError(DeviceError):
    """The puck could not be opened, usually because it is unplugged."""

    def __init__(self, vendor_id: int, product_id: int, original_error: str | None = None):
        """
        Initialize device-not-found error.

        Args:
            vendor_id: USB vendor id that was requested
            product_id: USB product id that was requested
            original_error: The original error message from the HID library
        """
        ids = _format_ids(vendor_id, product_id)
        user_msg = f"Mute puck {ids} not found."
        tech_msg = user_msg
        if original_error:
            tech_msg += f" Original error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            vendor_id=vendor_id,
            product_id=product_id,
            recoverable=True,
            recovery_hint="Plug the puck in; it will be picked up automatically.",
        )


class DeviceAccessError(DeviceError):
    """The HID layer itself cannot be used, so no device can ever be opened."""

    def __init__(self, original_error: str):
        """
        Initialize device access error.

        Args:
            original_error: The original error message from the HID library
        """
        super().__init__(
            user_message="Cannot access HID devices.",
            technical_message=f"HID initialisation failed: {original_error}",
            recoverable=False,
            recovery_hint=(
                "Check that hidapi is installed and that your user may open "
                "/dev/hidraw* (a udev rule granting access to the puck is usually needed)."
            ),
        )
        self.original_error = original_error
