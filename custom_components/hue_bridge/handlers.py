"""Translate capability commands into bridge API calls."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import voluptuous as vol

from .const import DEFAULT_MIN_DIMMING
from .conversions import hsv_to_xy_chromaticity, kelvin_to_bridge_mirek
from .errors import ResolutionFailure, TransportFailure
from .models import BridgeResponse, CapabilityCommand, LightDevice
from .resolver import DeviceResolver, ResolvedLight

_LOGGER = logging.getLogger(__name__)

_BridgeCall = Callable[[ResolvedLight], Awaitable[BridgeResponse]]

_LEVEL_SCHEMA = vol.Schema(
    {vol.Required("level"): vol.Coerce(float)}, extra=vol.ALLOW_EXTRA
)
_COLOR_SCHEMA = vol.Schema(
    {
        vol.Required("color"): vol.Schema(
            {
                vol.Required("hue"): vol.Coerce(float),
                vol.Required("saturation"): vol.Coerce(float),
            },
            extra=vol.ALLOW_EXTRA,
        )
    },
    extra=vol.ALLOW_EXTRA,
)
_TEMPERATURE_SCHEMA = vol.Schema(
    {vol.Required("temperature"): vol.Coerce(float)}, extra=vol.ALLOW_EXTRA
)


class CommandTranslator:
    """Issue exactly one bridge call per capability command.

    Handlers never return a value or raise: resolution failures are
    logged as warnings, transport and bridge errors as errors.
    """

    def __init__(
        self,
        resolver: DeviceResolver,
        *,
        default_min_dimming: float = DEFAULT_MIN_DIMMING,
    ) -> None:
        """Store the resolver and the dimming floor used for new lights."""

        self._resolver = resolver
        self._default_min_dimming = default_min_dimming

    async def async_switch(
        self, device: LightDevice, command: CapabilityCommand
    ) -> None:
        """Turn a light on or off depending on the command name."""

        on = command.command == "on"
        await self._async_invoke(
            device,
            "on/off",
            lambda target: target.api.async_set_light_on_state(
                target.resource_id, on
            ),
        )

    async def async_set_level(
        self, device: LightDevice, command: CapabilityCommand
    ) -> None:
        """Set the dimming level of a light."""

        args = self._validate(_LEVEL_SCHEMA, device, command)
        if args is None:
            return
        level = args["level"]
        min_dim = (
            device.min_dimming
            if device.min_dimming is not None
            else self._default_min_dimming
        )
        await self._async_invoke(
            device,
            "switch level",
            lambda target: target.api.async_set_light_level(
                target.resource_id, level, min_dim
            ),
        )

    async def async_set_color(
        self, device: LightDevice, command: CapabilityCommand
    ) -> None:
        """Set the color of a light from 16-bit hue and saturation."""

        args = self._validate(_COLOR_SCHEMA, device, command)
        if args is None:
            return
        x_val, y_val = hsv_to_xy_chromaticity(
            args["color"]["hue"], args["color"]["saturation"]
        )
        await self._async_invoke(
            device,
            "color",
            lambda target: target.api.async_set_light_color_xy(
                target.resource_id, {"x": x_val, "y": y_val}
            ),
        )

    async def async_set_color_temperature(
        self, device: LightDevice, command: CapabilityCommand
    ) -> None:
        """Set the white color temperature of a light from Kelvin."""

        args = self._validate(_TEMPERATURE_SCHEMA, device, command)
        if args is None:
            return
        kelvin = args["temperature"]
        await self._async_invoke(
            device,
            "color temp",
            lambda target: target.api.async_set_light_color_temp(
                target.resource_id,
                kelvin_to_bridge_mirek(
                    kelvin, target.api.MIN_TEMP_KELVIN, target.api.MAX_TEMP_KELVIN
                ),
            ),
        )

    def _validate(
        self,
        schema: vol.Schema,
        device: LightDevice,
        command: CapabilityCommand,
    ) -> Mapping[str, Any] | None:
        try:
            return schema(dict(command.args))
        except vol.Invalid as err:
            _LOGGER.warning(
                "Ignoring %s command for %s with invalid arguments: %s",
                command.command,
                device.label,
                err,
            )
            return None

    async def _async_invoke(
        self, device: LightDevice, action: str, call: _BridgeCall
    ) -> None:
        """Resolve the device, perform ``call`` and log the outcome."""

        try:
            target = self._resolver.resolve(device)
        except ResolutionFailure as err:
            _LOGGER.warning("%s", err)
            return

        try:
            response = await call(target)
        except TransportFailure as err:
            _LOGGER.error("Error performing %s action: %s", action, err)
            return

        if not response.ok:
            for description in response.error_descriptions:
                _LOGGER.error("Error returned in Hue response: %s", description)
            return
        _LOGGER.debug("Performed %s action for %s", action, device.label)
