"""Hue bridge driver core: capability commands and state refresh."""

from __future__ import annotations

from .const import DOMAIN, MAX_TEMP_KELVIN, MIN_TEMP_KELVIN
from .driver import DeviceRegistry, HueBridgeDriver
from .models import BridgeDevice, CapabilityCommand, DeviceType, LightDevice

__all__ = [
    "DOMAIN",
    "MAX_TEMP_KELVIN",
    "MIN_TEMP_KELVIN",
    "BridgeDevice",
    "CapabilityCommand",
    "DeviceRegistry",
    "DeviceType",
    "HueBridgeDriver",
    "LightDevice",
]
