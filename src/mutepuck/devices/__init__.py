"""Puck hardware: HID transport, button input, LED output and hot-plug."""

from .hotplug import HotplugSupervisor, UdevHotplugMonitor
from .input import ButtonEventSource
from .led import LedActuator, build_report, encode_led
from .transport import PRODUCT_ID, VENDOR_ID, HidapiHandle, HidapiTransport

__all__ = [
    "ButtonEventSource",
    "HidapiHandle",
    "HidapiTransport",
    "HotplugSupervisor",
    "LedActuator",
    "PRODUCT_ID",
    "UdevHotplugMonitor",
    "VENDOR_ID",
    "build_report",
    "encode_led",
]
