"""Tests for translating capability commands into bridge calls."""

from __future__ import annotations

import logging

import pytest

from custom_components.hue_bridge.conversions import hsv_to_xy_chromaticity
from custom_components.hue_bridge.errors import TransportFailure
from custom_components.hue_bridge.handlers import CommandTranslator
from custom_components.hue_bridge.models import (
    BridgeErrorEntry,
    BridgeResponse,
    CapabilityCommand,
    LightDevice,
)
from custom_components.hue_bridge.resolver import DeviceResolver


@pytest.fixture
def translator(registry) -> CommandTranslator:
    """Provide a translator bound to the shared registry."""

    return CommandTranslator(DeviceResolver(registry))


@pytest.mark.asyncio
@pytest.mark.parametrize(("name", "expected"), (("on", True), ("off", False)))
async def test_switch_derives_intent_from_command(
    translator, light, fake_api, name, expected
) -> None:
    """The on/off intent comes from the command name."""

    await translator.async_switch(light, CapabilityCommand(name))

    assert fake_api.calls == [("set_light_on_state", ("rid-1", expected))]


@pytest.mark.asyncio
async def test_set_level_uses_default_min_dimming(translator, light, fake_api) -> None:
    """Lights without a dimming floor use 2.0."""

    await translator.async_set_level(
        light, CapabilityCommand("setLevel", {"level": 40})
    )

    assert fake_api.calls == [("set_light_level", ("rid-1", 40.0, 2.0))]


@pytest.mark.asyncio
async def test_set_level_uses_device_min_dimming(translator, light, fake_api) -> None:
    """A per-light dimming floor is passed to the bridge call."""

    light.min_dimming = 5.0

    await translator.async_set_level(light, CapabilityCommand("setLevel", {"level": 1}))

    assert fake_api.calls == [("set_light_level", ("rid-1", 1.0, 5.0))]


@pytest.mark.asyncio
async def test_set_level_honours_configured_default(registry, light, fake_api) -> None:
    """The translator default applies when the light has no floor."""

    translator = CommandTranslator(DeviceResolver(registry), default_min_dimming=8.0)

    await translator.async_set_level(
        light, CapabilityCommand("setLevel", {"level": 50})
    )

    assert fake_api.calls == [("set_light_level", ("rid-1", 50.0, 8.0))]


@pytest.mark.asyncio
async def test_set_color_sends_normalized_xy(translator, light, fake_api) -> None:
    """Hue and saturation are converted to normalized chromaticity."""

    command = CapabilityCommand(
        "setColor", {"color": {"hue": 0x5555, "saturation": 0xFFFF}}
    )

    await translator.async_set_color(light, command)

    x_val, y_val = hsv_to_xy_chromaticity(0x5555, 0xFFFF)
    assert fake_api.calls == [
        ("set_light_color_xy", ("rid-1", {"x": x_val, "y": y_val}))
    ]
    assert 0 <= x_val < 1 and 0 <= y_val < 1


@pytest.mark.asyncio
async def test_set_color_temperature_clamps_and_floors(
    translator, light, fake_api
) -> None:
    """A far out-of-range Kelvin is clamped to 6500 and sent as 153 Mirek."""

    command = CapabilityCommand("setColorTemperature", {"temperature": 10_000_000})

    await translator.async_set_color_temperature(light, command)

    assert fake_api.calls == [("set_light_color_temp", ("rid-1", 153))]


@pytest.mark.asyncio
async def test_missing_bridge_makes_no_calls(registry, fake_api, caplog) -> None:
    """Unresolvable lights abort every command without raising."""

    translator = CommandTranslator(DeviceResolver(registry))
    orphan = LightDevice(
        device_id="light-7", label="Orphan", network_id="dni-7", parent_id="gone"
    )

    with caplog.at_level(logging.WARNING):
        await translator.async_switch(orphan, CapabilityCommand("on"))
        await translator.async_set_level(
            orphan, CapabilityCommand("setLevel", {"level": 10})
        )
        await translator.async_set_color(
            orphan,
            CapabilityCommand("setColor", {"color": {"hue": 1, "saturation": 1}}),
        )
        await translator.async_set_color_temperature(
            orphan, CapabilityCommand("setColorTemperature", {"temperature": 3000})
        )

    assert fake_api.calls == []
    assert "Couldn't get a bridge for light with DNI dni-7" in caplog.text


@pytest.mark.asyncio
async def test_missing_resource_id_makes_no_calls(translator, light, fake_api) -> None:
    """A light without a resource id never reaches the bridge."""

    light.resource_id = None

    await translator.async_switch(light, CapabilityCommand("off"))

    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_transport_failure_is_logged_not_raised(
    translator, light, fake_api, caplog
) -> None:
    """Transport errors are terminal for the command and only logged."""

    fake_api.results = [TransportFailure("connection refused")]

    with caplog.at_level(logging.ERROR):
        await translator.async_switch(light, CapabilityCommand("on"))

    assert len(fake_api.calls) == 1
    assert "Error performing on/off action: connection refused" in caplog.text


@pytest.mark.asyncio
async def test_each_api_error_is_logged(translator, light, fake_api, caplog) -> None:
    """Every error description returned by the bridge gets its own log line."""

    fake_api.results = [
        BridgeResponse(
            errors=[
                BridgeErrorEntry(description="device (light) is unreachable"),
                BridgeErrorEntry(description="invalid value"),
            ]
        )
    ]

    with caplog.at_level(logging.ERROR):
        await translator.async_set_level(
            light, CapabilityCommand("setLevel", {"level": 30})
        )

    messages = [record.getMessage() for record in caplog.records]
    assert "Error returned in Hue response: device (light) is unreachable" in messages
    assert "Error returned in Hue response: invalid value" in messages


@pytest.mark.asyncio
async def test_empty_error_list_is_success(translator, light, fake_api, caplog) -> None:
    """A present response with no errors logs nothing at error level."""

    fake_api.results = [BridgeResponse(data=[{"rid": "rid-1", "rtype": "light"}])]

    with caplog.at_level(logging.ERROR):
        await translator.async_switch(light, CapabilityCommand("on"))

    assert caplog.records == []


@pytest.mark.asyncio
async def test_commands_are_not_retried(translator, light, fake_api) -> None:
    """A failed command issues exactly one bridge call."""

    fake_api.results = [TransportFailure("timeout"), BridgeResponse()]

    await translator.async_set_color_temperature(
        light, CapabilityCommand("setColorTemperature", {"temperature": 2700})
    )

    assert fake_api.calls == [("set_light_color_temp", ("rid-1", 370))]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "command",
    (
        CapabilityCommand("setLevel", {}),
        CapabilityCommand("setLevel", {"level": "bright"}),
        CapabilityCommand("setColor", {"color": {"hue": 10}}),
        CapabilityCommand("setColorTemperature", {"temperature": None}),
    ),
)
async def test_invalid_arguments_are_dropped(
    translator, light, fake_api, caplog, command
) -> None:
    """Malformed payloads are logged and never reach the bridge."""

    handlers = {
        "setLevel": translator.async_set_level,
        "setColor": translator.async_set_color,
        "setColorTemperature": translator.async_set_color_temperature,
    }

    with caplog.at_level(logging.WARNING):
        await handlers[command.command](light, command)

    assert fake_api.calls == []
    assert "invalid arguments" in caplog.text


@pytest.mark.asyncio
async def test_color_temperature_uses_bridge_kelvin_bounds(
    translator, light, fake_api
) -> None:
    """The Kelvin range advertised by the bridge API bounds the request."""

    fake_api.MIN_TEMP_KELVIN = 2500
    fake_api.MAX_TEMP_KELVIN = 5000

    await translator.async_set_color_temperature(
        light, CapabilityCommand("setColorTemperature", {"temperature": 9000})
    )
    await translator.async_set_color_temperature(
        light, CapabilityCommand("setColorTemperature", {"temperature": 1000})
    )

    assert fake_api.calls == [
        ("set_light_color_temp", ("rid-1", 200)),
        ("set_light_color_temp", ("rid-1", 400)),
    ]
