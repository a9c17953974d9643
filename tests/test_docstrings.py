"""Docstring coverage tests for key constructors."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from custom_components.hue_bridge.api import HueBridgeApi
from custom_components.hue_bridge.driver import DeviceRegistry, HueBridgeDriver
from custom_components.hue_bridge.events import CapabilityEventEmitter
from custom_components.hue_bridge.handlers import CommandTranslator
from custom_components.hue_bridge.refresh import PendingRefreshSet, RefreshEngine
from custom_components.hue_bridge.resolver import DeviceResolver


@pytest.mark.parametrize(
    "constructor",
    (
        HueBridgeApi.__init__,
        DeviceRegistry.__init__,
        HueBridgeDriver.__init__,
        CapabilityEventEmitter.__init__,
        CommandTranslator.__init__,
        PendingRefreshSet.__init__,
        RefreshEngine.__init__,
        DeviceResolver.__init__,
    ),
)
def test_constructor_docstrings(constructor: Callable[..., None]) -> None:
    """All targeted constructors should expose explanatory docstrings."""

    assert constructor.__doc__, f"{constructor.__qualname__} missing docstring"


@pytest.mark.parametrize(
    "method",
    (
        PendingRefreshSet.__contains__,
        PendingRefreshSet.__iter__,
        PendingRefreshSet.__len__,
        DeviceRegistry.__iter__,
        DeviceRegistry.__len__,
    ),
)
def test_container_protocol_docstrings(method: Callable[..., object]) -> None:
    """Container methods on the device collections are documented."""

    assert method.__doc__, f"{method.__qualname__} missing docstring"
