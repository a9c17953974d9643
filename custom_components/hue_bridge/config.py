"""Driver configuration schema and YAML loading."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml

from .const import (
    DEFAULT_MIN_DIMMING,
    DEFAULT_REFRESH_ATTEMPTS,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_BRIGHTNESS,
)
from .errors import ConfigError

_NON_EMPTY_STRING = vol.All(str, vol.Length(min=1))

BRIDGE_SCHEMA = vol.Schema(
    {
        vol.Required("id"): _NON_EMPTY_STRING,
        vol.Required("host"): _NON_EMPTY_STRING,
        vol.Required("application_key"): _NON_EMPTY_STRING,
        vol.Optional("label"): str,
        vol.Optional("verify_ssl", default=False): bool,  # type: ignore
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional("refresh_attempts", default=DEFAULT_REFRESH_ATTEMPTS): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional("default_min_dimming", default=DEFAULT_MIN_DIMMING): vol.All(
            vol.Coerce(float), vol.Range(min=0, max=MAX_BRIGHTNESS)
        ),
        vol.Optional("request_timeout", default=DEFAULT_REQUEST_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional("bridges", default=list): [BRIDGE_SCHEMA],  # type: ignore
    }
)


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Connection settings for one bridge."""

    bridge_id: str
    host: str
    application_key: str
    label: str
    verify_ssl: bool = False


@dataclass(frozen=True, slots=True)
class DriverConfig:
    """Validated driver settings."""

    refresh_attempts: int = DEFAULT_REFRESH_ATTEMPTS
    default_min_dimming: float = DEFAULT_MIN_DIMMING
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    bridges: tuple[BridgeConfig, ...] = field(default_factory=tuple)


def parse_config(data: Mapping[str, Any] | None) -> DriverConfig:
    """Validate ``data`` against :data:`CONFIG_SCHEMA`."""

    try:
        validated = CONFIG_SCHEMA(dict(data or {}))
    except vol.Invalid as err:
        raise ConfigError(f"Invalid driver configuration: {err}") from err

    bridges = tuple(
        BridgeConfig(
            bridge_id=bridge["id"],
            host=bridge["host"],
            application_key=bridge["application_key"],
            label=bridge.get("label") or f"Hue Bridge {bridge['id']}",
            verify_ssl=bridge["verify_ssl"],
        )
        for bridge in validated["bridges"]
    )
    return DriverConfig(
        refresh_attempts=validated["refresh_attempts"],
        default_min_dimming=validated["default_min_dimming"],
        request_timeout=validated["request_timeout"],
        bridges=bridges,
    )


def load_config(path: Path) -> DriverConfig:
    """Read and validate a YAML configuration file."""

    try:
        with path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp)
    except yaml.YAMLError as err:
        raise ConfigError(f"Unable to parse {path}: {err}") from err

    if payload is not None and not isinstance(payload, Mapping):
        raise ConfigError(f"{path} must contain a mapping")
    return parse_config(payload)
