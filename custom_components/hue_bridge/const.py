"""Constants for the Hue bridge integration."""

from __future__ import annotations

from typing import Final

DOMAIN: Final = "hue_bridge"

# Color temperature range accepted by the bridge for white ambiance lights.
MIN_TEMP_KELVIN: Final = 2000
MAX_TEMP_KELVIN: Final = 6500

MIREK_SCALE: Final = 1_000_000

# Capability hue/saturation values and the intermediate xy values use a
# 16-bit unsigned domain.
COLOR_CHANNEL_MAX: Final = 0xFFFF
COLOR_CHANNEL_SCALE: Final = 0x10000

DEFAULT_MIN_DIMMING: Final = 2.0
MAX_BRIGHTNESS: Final = 100.0

DEFAULT_REFRESH_ATTEMPTS: Final = 3
DEFAULT_REQUEST_TIMEOUT: Final = 10.0

APPLICATION_KEY_HEADER: Final = "hue-application-key"
LIGHT_RESOURCE_PATH: Final = "/clip/v2/resource/light"
