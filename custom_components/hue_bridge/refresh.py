"""Bounded-retry state refresh for lights and bridges."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum

from .const import DEFAULT_REFRESH_ATTEMPTS
from .errors import (
    ApiError,
    BridgeNotReady,
    InvalidLightRecord,
    NotFoundInBatch,
    ResolutionFailure,
    TransportFailure,
)
from .models import (
    BridgeDevice,
    DeviceType,
    HueDevice,
    LightDevice,
    LightRecord,
    LightStatusEmitter,
)
from .resolver import DeviceResolver, ResolvedLight

_LOGGER = logging.getLogger(__name__)


class RefreshOutcome(str, Enum):
    """Terminal state of a single light refresh."""

    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    DEFERRED = "deferred"
    ABORTED = "aborted"


class PendingRefreshSet:
    """Lights whose refresh waits for their bridge to become ready.

    The refresh engine only inserts; draining belongs to whoever observes
    the bridge reaching its ready state.
    """

    def __init__(self) -> None:
        """Start with no pending lights."""

        self._pending: dict[str, LightDevice] = {}

    def insert(self, device: LightDevice) -> None:
        """Queue ``device`` for a later refresh, replacing any older entry."""

        self._pending[device.device_id] = device

    def discard(self, device_id: str) -> None:
        """Drop ``device_id`` from the set if it is queued."""

        self._pending.pop(device_id, None)

    def for_bridge(self, bridge_id: str) -> list[LightDevice]:
        """Return the pending lights parented by ``bridge_id`` in queue order."""

        return [
            device
            for device in self._pending.values()
            if device.parent_id == bridge_id
        ]

    def pop_for_bridge(self, bridge_id: str) -> list[LightDevice]:
        """Remove and return the pending lights parented by ``bridge_id``."""

        matched = self.for_bridge(bridge_id)
        for device in matched:
            self.discard(device.device_id)
        return matched

    def __contains__(self, device_id: object) -> bool:
        """Return True when ``device_id`` is waiting for a refresh."""

        return device_id in self._pending

    def __iter__(self) -> Iterator[str]:
        """Iterate over the queued device ids in insertion order."""

        return iter(list(self._pending))

    def __len__(self) -> int:
        """Return the number of queued lights."""

        return len(self._pending)


class RefreshEngine:
    """Query bridge state for lights and push it back to the device model."""

    def __init__(
        self,
        resolver: DeviceResolver,
        emitter: LightStatusEmitter,
        pending: PendingRefreshSet,
        *,
        attempts: int = DEFAULT_REFRESH_ATTEMPTS,
    ) -> None:
        """Wire the engine to its collaborators."""

        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._resolver = resolver
        self._emitter = emitter
        self._pending = pending
        self._attempts = attempts

    @property
    def attempts(self) -> int:
        """Return the maximum number of state queries per light."""

        return self._attempts

    async def async_refresh(self, device: HueDevice) -> None:
        """Refresh a bridge's lights, a single light, or nothing."""

        if device.device_type == DeviceType.BRIDGE and isinstance(
            device, BridgeDevice
        ):
            await self.async_refresh_bridge(device)
        elif device.device_type == DeviceType.LIGHT and isinstance(
            device, LightDevice
        ):
            await self.async_refresh_light(device)

    async def async_refresh_bridge(
        self, bridge: BridgeDevice
    ) -> list[RefreshOutcome]:
        """Refresh every light child of ``bridge`` one after another."""

        outcomes: list[RefreshOutcome] = []
        for child in list(bridge.children):
            if child.device_type != DeviceType.LIGHT or not isinstance(
                child, LightDevice
            ):
                continue
            outcomes.append(await self.async_refresh_light(child))
        return outcomes

    async def async_refresh_light(self, device: LightDevice) -> RefreshOutcome:
        """Run the resolve and bounded query cycle for one light."""

        try:
            target = self._resolver.resolve(device, require_ready=True)
        except BridgeNotReady:
            _LOGGER.warning(
                "Bridge for light %s not yet initialized, can't refresh yet.",
                device.label,
            )
            self._pending.insert(device)
            return RefreshOutcome.DEFERRED
        except ResolutionFailure as err:
            _LOGGER.warning("%s", err)
            return RefreshOutcome.ABORTED

        for attempt in range(1, self._attempts + 1):
            try:
                record = await self._async_query(target)
            except TransportFailure as err:
                _LOGGER.error(
                    "Refresh attempt %d of %d for %s failed: %s",
                    attempt,
                    self._attempts,
                    device.label,
                    err,
                )
            except ApiError as err:
                for description in err.descriptions:
                    _LOGGER.error("Error in Hue API response: %s", description)
            except InvalidLightRecord as err:
                _LOGGER.error("Invalid light record in Hue API response: %s", err)
            except NotFoundInBatch:
                continue
            else:
                return self._emit(device, record)
        return RefreshOutcome.EXHAUSTED

    def _emit(self, device: LightDevice, record: LightRecord) -> RefreshOutcome:
        try:
            self._emitter.emit_light_status_events(device, record)
        except Exception:
            _LOGGER.exception("Error emitting status events for %s", device.label)
            return RefreshOutcome.ABORTED
        return RefreshOutcome.SUCCESS

    async def _async_query(self, target: ResolvedLight) -> LightRecord:
        response = await target.api.async_get_light_by_id(target.resource_id)
        if not response.ok:
            raise ApiError(response.error_descriptions)
        record = response.find_light(target.resource_id)
        if record is None:
            raise NotFoundInBatch(target.resource_id)
        return record
