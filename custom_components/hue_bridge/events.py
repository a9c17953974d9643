"""Translate bridge light records into capability status events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .const import MAX_BRIGHTNESS
from .conversions import clamp, mirek_to_bridge_kelvin, xy_to_hsv_chromaticity
from .models import LightDevice, LightRecord

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CapabilityEvent:
    """A single attribute update for the device-state framework."""

    device_id: str
    capability: str
    attribute: str
    value: Any
    unit: str | None = None


def build_light_status_events(
    device: LightDevice, record: LightRecord
) -> list[CapabilityEvent]:
    """Return the capability events describing ``record``.

    Blocks missing from the record produce no events, so a light without
    color support only reports switch and level.
    """

    events: list[CapabilityEvent] = []
    if record.on is not None:
        events.append(
            CapabilityEvent(
                device.device_id, "switch", "switch", "on" if record.on.on else "off"
            )
        )

    if record.dimming is not None and record.dimming.brightness is not None:
        level = round(clamp(record.dimming.brightness, 0, MAX_BRIGHTNESS))
        events.append(
            CapabilityEvent(device.device_id, "switchLevel", "level", level, "%")
        )

    temperature = record.color_temperature
    if (
        temperature is not None
        and temperature.mirek_valid
        and temperature.mirek is not None
        and temperature.mirek > 0
    ):
        events.append(
            CapabilityEvent(
                device.device_id,
                "colorTemperature",
                "colorTemperature",
                mirek_to_bridge_kelvin(temperature.mirek),
                "K",
            )
        )

    if record.color is not None and record.color.xy is not None:
        hue, saturation = xy_to_hsv_chromaticity(record.color.xy.x, record.color.xy.y)
        events.append(CapabilityEvent(device.device_id, "colorControl", "hue", hue))
        events.append(
            CapabilityEvent(device.device_id, "colorControl", "saturation", saturation)
        )
    return events


class CapabilityEventEmitter:
    """Emit capability events for refreshed lights through a callback."""

    def __init__(self, callback: Callable[[CapabilityEvent], None]) -> None:
        """Store the callback receiving each event."""

        self._callback = callback

    def emit_light_status_events(
        self, device: LightDevice, record: LightRecord
    ) -> None:
        """Push every event derived from ``record`` to the callback."""

        for event in build_light_status_events(device, record):
            _LOGGER.debug(
                "Emitting %s.%s=%s for %s",
                event.capability,
                event.attribute,
                event.value,
                device.label,
            )
            self._callback(event)
