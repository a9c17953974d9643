"""Pytest configuration and shared fakes for the Hue bridge driver tests."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

root_path = Path(__file__).resolve().parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))

from custom_components.hue_bridge.driver import DeviceRegistry  # noqa: E402
from custom_components.hue_bridge.models import (  # noqa: E402
    BridgeDevice,
    BridgeResponse,
    LightDevice,
    LightRecord,
)


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used throughout the test suite."""

    config.addinivalue_line(
        "markers", "asyncio: mark coroutine tests to execute via asyncio loop"
    )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute coroutine tests within a dedicated event loop."""

    test_function = pyfuncitem.obj
    if not asyncio.iscoroutinefunction(test_function):
        return None

    arguments = {
        name: pyfuncitem.funcargs[name]
        for name in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_function(**arguments))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


class FakeBridgeApi:
    """Record bridge calls and replay scripted responses or failures."""

    MIN_TEMP_KELVIN = 2000
    MAX_TEMP_KELVIN = 6500

    def __init__(self, results: list[BridgeResponse | Exception] | None = None):
        """Queue the results returned by successive calls."""

        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.results: list[BridgeResponse | Exception] = list(results or [])

    def _next(self) -> BridgeResponse:
        if not self.results:
            return BridgeResponse()
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    async def async_set_light_on_state(
        self, resource_id: str, on: bool
    ) -> BridgeResponse:
        """Capture on/off calls."""
        self.calls.append(("set_light_on_state", (resource_id, on)))
        return self._next()

    async def async_set_light_level(
        self, resource_id: str, level: float, min_dim: float
    ) -> BridgeResponse:
        """Capture level calls."""
        self.calls.append(("set_light_level", (resource_id, level, min_dim)))
        return self._next()

    async def async_set_light_color_xy(
        self, resource_id: str, xy: Mapping[str, float]
    ) -> BridgeResponse:
        """Capture color calls."""
        self.calls.append(("set_light_color_xy", (resource_id, dict(xy))))
        return self._next()

    async def async_set_light_color_temp(
        self, resource_id: str, mirek: int
    ) -> BridgeResponse:
        """Capture color temperature calls."""
        self.calls.append(("set_light_color_temp", (resource_id, mirek)))
        return self._next()

    async def async_get_light_by_id(self, resource_id: str) -> BridgeResponse:
        """Capture state queries."""
        self.calls.append(("get_light_by_id", (resource_id,)))
        return self._next()


class RecordingEmitter:
    """Collect status emissions for assertions."""

    def __init__(self) -> None:
        """Initialise storage for emitted records."""
        self.emitted: list[tuple[LightDevice, LightRecord]] = []

    def emit_light_status_events(
        self, device: LightDevice, record: LightRecord
    ) -> None:
        """Store the emitted device and record."""
        self.emitted.append((device, record))


def light_response(resource_id: str, **state: Any) -> BridgeResponse:
    """Build a state response carrying a single light record."""

    return BridgeResponse(data=[{"id": resource_id, "type": "light", **state}])


@pytest.fixture
def make_light_response() -> Any:
    """Expose :func:`light_response` to test modules."""

    return light_response


@pytest.fixture
def fake_api() -> FakeBridgeApi:
    """Provide a bridge API double with no scripted results."""

    return FakeBridgeApi()


@pytest.fixture
def emitter() -> RecordingEmitter:
    """Provide an emitter recording every status emission."""

    return RecordingEmitter()


@pytest.fixture
def registry() -> DeviceRegistry:
    """Provide an empty device directory."""

    return DeviceRegistry()


@pytest.fixture
def bridge(registry: DeviceRegistry, fake_api: FakeBridgeApi) -> BridgeDevice:
    """Register an initialised bridge backed by ``fake_api``."""

    device = BridgeDevice(
        device_id="bridge-1",
        label="Hue Bridge",
        network_id="192.168.1.2",
        api=fake_api,
        initialized=True,
    )
    registry.add(device)
    return device


@pytest.fixture
def light(registry: DeviceRegistry, bridge: BridgeDevice) -> LightDevice:
    """Register a light parented by ``bridge``."""

    device = LightDevice(
        device_id="light-1",
        label="Desk Lamp",
        network_id="00:17:88:01:00:aa:bb:cc-0b",
        parent_id=bridge.device_id,
        resource_id="rid-1",
    )
    registry.add(device)
    bridge.children.append(device)
    return device
