"""Device and payload models used by the Hue bridge driver core."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidLightRecord


class DeviceType(str, Enum):
    """Kinds of devices the driver tracks."""

    BRIDGE = "bridge"
    LIGHT = "light"


@dataclass
class HueDevice:
    """Common attributes shared by every device handle."""

    device_id: str
    label: str
    network_id: str = ""
    device_type: str = "unknown"


@dataclass
class BridgeDevice(HueDevice):
    """A bridge owning an API client and the devices it proxies."""

    device_type: str = DeviceType.BRIDGE
    api: BridgeApi | None = None
    initialized: bool = False
    children: list[HueDevice] = field(default_factory=list)


@dataclass
class LightDevice(HueDevice):
    """A light addressed through its parent bridge."""

    device_type: str = DeviceType.LIGHT
    parent_id: str | None = None
    resource_id: str | None = None
    min_dimming: float | None = None


@dataclass(frozen=True, slots=True)
class CapabilityCommand:
    """A capability command as delivered by the device framework."""

    command: str
    args: Mapping[str, Any] = field(default_factory=dict)


class XYPoint(BaseModel):
    """CIE xy chromaticity coordinates."""

    x: float
    y: float


class OnState(BaseModel):
    """Power block of a light resource."""

    model_config = ConfigDict(extra="allow")

    on: bool


class DimmingState(BaseModel):
    """Dimming block of a light resource."""

    model_config = ConfigDict(extra="allow")

    brightness: float | None = None


class ColorState(BaseModel):
    """Color block of a light resource."""

    model_config = ConfigDict(extra="allow")

    xy: XYPoint | None = None


class ColorTemperatureState(BaseModel):
    """Color temperature block of a light resource."""

    model_config = ConfigDict(extra="allow")

    mirek: int | None = None
    mirek_valid: bool = True


class LightRecord(BaseModel):
    """State of a single light as reported by the bridge."""

    model_config = ConfigDict(extra="allow")

    id: str
    type: str | None = None
    on: OnState | None = None
    dimming: DimmingState | None = None
    color: ColorState | None = None
    color_temperature: ColorTemperatureState | None = None


class BridgeErrorEntry(BaseModel):
    """A structured error entry returned by the bridge."""

    model_config = ConfigDict(extra="allow")

    description: str


class BridgeResponse(BaseModel):
    """Decoded CLIP v2 response envelope."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[BridgeErrorEntry] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when the bridge reported no errors."""

        return not self.errors

    @property
    def error_descriptions(self) -> list[str]:
        """Return the description of every reported error."""

        return [error.description for error in self.errors]

    def find_light(self, resource_id: str) -> LightRecord | None:
        """Return the light record matching ``resource_id`` if present.

        Raises :class:`InvalidLightRecord` when entries carry the id but
        none of them validates.
        """

        invalid: ValidationError | None = None
        for entry in self.data:
            if entry.get("id") != resource_id:
                continue
            try:
                return LightRecord.model_validate(entry)
            except ValidationError as err:
                invalid = err
        if invalid is not None:
            raise InvalidLightRecord(resource_id, str(invalid)) from invalid
        return None


class BridgeApi(Protocol):
    """Calls the driver core issues against a bridge.

    Every method returns the decoded response or raises
    :class:`~custom_components.hue_bridge.errors.TransportFailure`.
    The Kelvin bounds are the color temperature range the bridge accepts.
    """

    MIN_TEMP_KELVIN: int
    MAX_TEMP_KELVIN: int

    async def async_set_light_on_state(
        self, resource_id: str, on: bool
    ) -> BridgeResponse: ...

    async def async_set_light_level(
        self, resource_id: str, level: float, min_dim: float
    ) -> BridgeResponse: ...

    async def async_set_light_color_xy(
        self, resource_id: str, xy: Mapping[str, float]
    ) -> BridgeResponse: ...

    async def async_set_light_color_temp(
        self, resource_id: str, mirek: int
    ) -> BridgeResponse: ...

    async def async_get_light_by_id(self, resource_id: str) -> BridgeResponse: ...


class DeviceDirectory(Protocol):
    """Lookup of device handles by local identifier."""

    def get_device_info(self, device_id: str) -> HueDevice | None: ...


class LightStatusEmitter(Protocol):
    """Sink for light state pushed back into the device model."""

    def emit_light_status_events(
        self, device: LightDevice, record: LightRecord
    ) -> None: ...
