"""CLIP v2 HTTP client for a single Hue bridge."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from .const import (
    APPLICATION_KEY_HEADER,
    DEFAULT_REQUEST_TIMEOUT,
    LIGHT_RESOURCE_PATH,
    MAX_BRIGHTNESS,
    MAX_TEMP_KELVIN,
    MIN_TEMP_KELVIN,
)
from .conversions import clamp
from .errors import TransportFailure
from .models import BridgeResponse

_LOGGER = logging.getLogger(__name__)


class HueBridgeApi:
    """Issue light commands and state queries against a bridge."""

    MIN_TEMP_KELVIN = MIN_TEMP_KELVIN
    MAX_TEMP_KELVIN = MAX_TEMP_KELVIN

    def __init__(
        self,
        host: str,
        application_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        verify_ssl: bool = False,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Create the client, owning an httpx client unless one is supplied."""

        self._base_url = f"https://{host}"
        self._headers = {
            APPLICATION_KEY_HEADER: application_key,
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(verify=verify_ssl, timeout=timeout)

    @property
    def base_url(self) -> str:
        """Return the bridge base URL."""

        return self._base_url

    async def async_set_light_on_state(
        self, resource_id: str, on: bool
    ) -> BridgeResponse:
        """Switch a light on or off."""

        return await self._async_put_light(resource_id, {"on": {"on": on}})

    async def async_set_light_level(
        self, resource_id: str, level: float, min_dim: float
    ) -> BridgeResponse:
        """Set the brightness percentage, never going below ``min_dim``."""

        brightness = clamp(level, min_dim, MAX_BRIGHTNESS)
        return await self._async_put_light(
            resource_id, {"dimming": {"brightness": brightness}}
        )

    async def async_set_light_color_xy(
        self, resource_id: str, xy: Mapping[str, float]
    ) -> BridgeResponse:
        """Set the light color from normalized xy chromaticity."""

        payload = {"color": {"xy": {"x": xy["x"], "y": xy["y"]}}}
        return await self._async_put_light(resource_id, payload)

    async def async_set_light_color_temp(
        self, resource_id: str, mirek: int
    ) -> BridgeResponse:
        """Set the white color temperature in Mirek."""

        return await self._async_put_light(
            resource_id, {"color_temperature": {"mirek": int(mirek)}}
        )

    async def async_get_light_by_id(self, resource_id: str) -> BridgeResponse:
        """Fetch the current state of a light."""

        return await self._async_request("GET", self._light_url(resource_id))

    async def async_close(self) -> None:
        """Close the HTTP client when this instance created it."""

        if self._owns_client:
            await self._client.aclose()

    def _light_url(self, resource_id: str) -> str:
        return f"{self._base_url}{LIGHT_RESOURCE_PATH}/{resource_id}"

    async def _async_put_light(
        self, resource_id: str, payload: dict[str, Any]
    ) -> BridgeResponse:
        return await self._async_request(
            "PUT", self._light_url(resource_id), json=payload
        )

    async def _async_request(
        self, method: str, url: str, *, json: dict[str, Any] | None = None
    ) -> BridgeResponse:
        """Perform a request and decode the CLIP v2 envelope.

        Error statuses whose body still carries an ``errors`` list are
        returned as responses so callers can report the bridge's own
        descriptions; anything else becomes a :class:`TransportFailure`.
        """

        try:
            response = await self._client.request(
                method, url, json=json, headers=self._headers
            )
        except httpx.HTTPError as err:
            raise TransportFailure(f"{method} {url} failed: {err}") from err

        try:
            payload = response.json()
        except ValueError as err:
            raise TransportFailure(
                f"{method} {url} returned invalid JSON "
                f"(HTTP {response.status_code})"
            ) from err

        if response.is_error and not (
            isinstance(payload, Mapping) and payload.get("errors")
        ):
            raise TransportFailure(
                f"{method} {url} returned HTTP {response.status_code}"
            )

        try:
            decoded = BridgeResponse.model_validate(payload)
        except ValidationError as err:
            raise TransportFailure(
                f"{method} {url} returned an unexpected payload: {err}"
            ) from err
        _LOGGER.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return decoded
