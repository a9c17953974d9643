"""Driver facade wiring the device directory to commands and refresh."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator

import httpx

from .api import HueBridgeApi
from .config import DriverConfig
from .handlers import CommandTranslator
from .models import (
    BridgeDevice,
    CapabilityCommand,
    HueDevice,
    LightDevice,
    LightStatusEmitter,
)
from .refresh import PendingRefreshSet, RefreshEngine, RefreshOutcome
from .resolver import DeviceResolver

_LOGGER = logging.getLogger(__name__)

CommandHandler = Callable[[HueDevice, CapabilityCommand], Awaitable[None]]
_LightHandler = Callable[[LightDevice, CapabilityCommand], Awaitable[None]]

COMMAND_ON = "on"
COMMAND_OFF = "off"
COMMAND_SET_LEVEL = "setLevel"
COMMAND_SET_COLOR = "setColor"
COMMAND_SET_COLOR_TEMPERATURE = "setColorTemperature"
COMMAND_REFRESH = "refresh"


class DeviceRegistry:
    """In-memory device directory keyed by local device identifier."""

    def __init__(self) -> None:
        """Start with an empty directory."""

        self._devices: dict[str, HueDevice] = {}

    def add(self, device: HueDevice) -> None:
        """Register or replace ``device``."""

        self._devices[device.device_id] = device

    def remove(self, device_id: str) -> HueDevice | None:
        """Forget a device, returning it when it was known."""

        return self._devices.pop(device_id, None)

    def get_device_info(self, device_id: str) -> HueDevice | None:
        """Return the device registered under ``device_id``."""

        return self._devices.get(device_id)

    def bridges(self) -> list[BridgeDevice]:
        """Return every registered bridge."""

        return [
            device
            for device in self._devices.values()
            if isinstance(device, BridgeDevice)
        ]

    def __iter__(self) -> Iterator[HueDevice]:
        """Iterate over a snapshot of the registered devices."""

        return iter(list(self._devices.values()))

    def __len__(self) -> int:
        """Return the number of registered devices."""

        return len(self._devices)


class HueBridgeDriver:
    """Own the device directory and route capability commands."""

    def __init__(
        self,
        *,
        emitter: LightStatusEmitter,
        config: DriverConfig | None = None,
        registry: DeviceRegistry | None = None,
    ) -> None:
        """Build the resolver, translator and refresh engine."""

        self._config = config if config is not None else DriverConfig()
        self.registry = registry if registry is not None else DeviceRegistry()
        self.pending_refresh = PendingRefreshSet()
        self.resolver = DeviceResolver(self.registry)
        self.translator = CommandTranslator(
            self.resolver, default_min_dimming=self._config.default_min_dimming
        )
        self.refresh_engine = RefreshEngine(
            self.resolver,
            emitter,
            self.pending_refresh,
            attempts=self._config.refresh_attempts,
        )
        self._handlers: dict[str, CommandHandler] = {
            COMMAND_ON: self._for_lights(self.translator.async_switch),
            COMMAND_OFF: self._for_lights(self.translator.async_switch),
            COMMAND_SET_LEVEL: self._for_lights(self.translator.async_set_level),
            COMMAND_SET_COLOR: self._for_lights(self.translator.async_set_color),
            COMMAND_SET_COLOR_TEMPERATURE: self._for_lights(
                self.translator.async_set_color_temperature
            ),
            COMMAND_REFRESH: self._async_refresh_command,
        }

    @classmethod
    def from_config(
        cls,
        config: DriverConfig,
        *,
        emitter: LightStatusEmitter,
        client: httpx.AsyncClient | None = None,
    ) -> HueBridgeDriver:
        """Create a driver with one bridge device per configured bridge."""

        driver = cls(emitter=emitter, config=config)
        for bridge_config in config.bridges:
            api = HueBridgeApi(
                bridge_config.host,
                bridge_config.application_key,
                client=client,
                verify_ssl=bridge_config.verify_ssl,
                timeout=config.request_timeout,
            )
            driver.add_bridge(
                BridgeDevice(
                    device_id=bridge_config.bridge_id,
                    label=bridge_config.label,
                    network_id=bridge_config.host,
                    api=api,
                )
            )
        return driver

    @property
    def supported_commands(self) -> tuple[str, ...]:
        """Return the capability command names this driver handles."""

        return tuple(self._handlers)

    def add_bridge(self, bridge: BridgeDevice) -> None:
        """Register a bridge device."""

        self.registry.add(bridge)

    def add_light(self, light: LightDevice) -> None:
        """Register a light and attach it to its parent bridge's children."""

        self.registry.add(light)
        if light.parent_id is None:
            return
        bridge = self.registry.get_device_info(light.parent_id)
        if not isinstance(bridge, BridgeDevice):
            _LOGGER.debug(
                "Parent bridge %s of %s is not registered yet",
                light.parent_id,
                light.label,
            )
            return
        if all(child.device_id != light.device_id for child in bridge.children):
            bridge.children.append(light)

    async def async_handle_command(
        self, device_id: str, command: CapabilityCommand
    ) -> None:
        """Dispatch ``command`` for ``device_id`` to its handler."""

        device = self.registry.get_device_info(device_id)
        if device is None:
            _LOGGER.warning(
                "Ignoring %s command for unknown device %s", command.command, device_id
            )
            return
        handler = self._handlers.get(command.command)
        if handler is None:
            _LOGGER.warning(
                "Unsupported command %s for %s", command.command, device.label
            )
            return
        await handler(device, command)

    async def async_refresh(self, device_id: str) -> None:
        """Refresh a bridge's lights or a single light."""

        device = self.registry.get_device_info(device_id)
        if device is None:
            _LOGGER.warning("Cannot refresh unknown device %s", device_id)
            return
        await self.refresh_engine.async_refresh(device)

    async def async_mark_bridge_ready(self, bridge_id: str) -> list[RefreshOutcome]:
        """Flag a bridge as initialised and replay its deferred refreshes."""

        bridge = self.registry.get_device_info(bridge_id)
        if not isinstance(bridge, BridgeDevice):
            _LOGGER.warning("Cannot mark unknown bridge %s as ready", bridge_id)
            return []
        bridge.initialized = True

        outcomes: list[RefreshOutcome] = []
        for light in self.pending_refresh.for_bridge(bridge_id):
            # Lights not replayed yet stay queued if this loop is interrupted.
            self.pending_refresh.discard(light.device_id)
            _LOGGER.debug("Replaying deferred refresh for %s", light.label)
            try:
                outcome = await self.refresh_engine.async_refresh_light(light)
            except Exception:
                _LOGGER.exception("Deferred refresh for %s failed", light.label)
                outcome = RefreshOutcome.ABORTED
            outcomes.append(outcome)
        return outcomes

    async def async_close(self) -> None:
        """Close HTTP clients owned by registered bridges."""

        for bridge in self.registry.bridges():
            if isinstance(bridge.api, HueBridgeApi):
                await bridge.api.async_close()

    async def _async_refresh_command(
        self, device: HueDevice, _command: CapabilityCommand
    ) -> None:
        await self.refresh_engine.async_refresh(device)

    @staticmethod
    def _for_lights(handler: _LightHandler) -> CommandHandler:
        """Wrap a light handler so other device kinds are ignored."""

        async def _handler(device: HueDevice, command: CapabilityCommand) -> None:
            if not isinstance(device, LightDevice):
                _LOGGER.warning(
                    "Ignoring %s command for non-light device %s",
                    command.command,
                    device.label,
                )
                return
            await handler(device, command)

        return _handler
