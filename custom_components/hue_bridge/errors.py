"""Exception types raised inside the Hue bridge driver core.

None of these escape a capability command or a refresh request; they
classify failures so the handlers can log them consistently.
"""

from __future__ import annotations

from collections.abc import Sequence


class HueBridgeError(Exception):
    """Base error for the Hue bridge integration."""


class ConfigError(HueBridgeError):
    """Raised when the driver configuration fails validation."""


class ResolutionFailure(HueBridgeError):
    """A device could not be mapped to a usable bridge call target."""

    def __init__(self, device_label: str, message: str) -> None:
        """Store the device label alongside the failure message."""

        super().__init__(message)
        self.device_label = device_label


class MissingBridge(ResolutionFailure):
    """The parent bridge of a light is not known to the device directory."""


class MissingResourceOrApi(ResolutionFailure):
    """The light lacks a resource id or its bridge lacks an API handle."""


class BridgeNotReady(ResolutionFailure):
    """The parent bridge exists but has not finished initialising."""


class TransportFailure(HueBridgeError):
    """The request to the bridge failed before a response was decoded."""


class ApiError(HueBridgeError):
    """The bridge answered with one or more structured error entries."""

    def __init__(self, descriptions: Sequence[str]) -> None:
        """Keep every error description reported by the bridge."""

        super().__init__("; ".join(descriptions))
        self.descriptions = list(descriptions)


class InvalidLightRecord(HueBridgeError):
    """The record for the queried resource id failed validation."""

    def __init__(self, resource_id: str, detail: str) -> None:
        """Remember the resource id and the validation detail."""

        super().__init__(f"{resource_id}: {detail}")
        self.resource_id = resource_id


class NotFoundInBatch(HueBridgeError):
    """The queried resource id was missing from the returned records."""

    def __init__(self, resource_id: str) -> None:
        """Remember which resource id was absent."""

        super().__init__(resource_id)
        self.resource_id = resource_id
