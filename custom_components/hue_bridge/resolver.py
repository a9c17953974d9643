"""Resolve a light device to the bridge call target that serves it."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BridgeNotReady, MissingBridge, MissingResourceOrApi
from .models import BridgeApi, BridgeDevice, DeviceDirectory, LightDevice


@dataclass(frozen=True, slots=True)
class ResolvedLight:
    """Everything required to address a light through its bridge."""

    bridge: BridgeDevice
    resource_id: str
    api: BridgeApi


class DeviceResolver:
    """Look up the owning bridge, resource id and API handle of a light."""

    def __init__(self, directory: DeviceDirectory) -> None:
        """Bind the resolver to a device directory."""

        self._directory = directory

    def resolve_bridge(self, device: LightDevice) -> BridgeDevice:
        """Return the bridge referenced by ``device.parent_id``."""

        bridge = None
        if device.parent_id is not None:
            bridge = self._directory.get_device_info(device.parent_id)
        if not isinstance(bridge, BridgeDevice):
            raise MissingBridge(
                device.label,
                f"Couldn't get a bridge for light with DNI {device.network_id}",
            )
        return bridge

    def resolve(
        self, device: LightDevice, *, require_ready: bool = False
    ) -> ResolvedLight:
        """Resolve ``device`` or raise a :class:`ResolutionFailure` subclass.

        With ``require_ready`` an uninitialised bridge raises
        :class:`BridgeNotReady` before the resource id and API are checked.
        """

        bridge = self.resolve_bridge(device)
        if require_ready and not bridge.initialized:
            raise BridgeNotReady(
                device.label, "Bridge for light not yet initialized"
            )
        if not device.resource_id or bridge.api is None:
            raise MissingResourceOrApi(
                device.label,
                f"Could not get a proper light resource ID or API instance for "
                f"{device.label}",
            )
        return ResolvedLight(
            bridge=bridge, resource_id=device.resource_id, api=bridge.api
        )
