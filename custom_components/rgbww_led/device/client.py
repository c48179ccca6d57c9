"""HTTP client for the RGBWW controller color API."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import httpx
import voluptuous as vol

from .state import LightState

_LOGGER = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5.0
COLOR_PATH = "/color"
FADE_COMMAND = "fade"

_HTTP_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def _number(value: Any) -> float:
    """Coerce a JSON number, rejecting booleans and non-finite values."""

    if isinstance(value, bool):
        raise vol.Invalid("expected a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise vol.Invalid(f"expected a number, got {value!r}") from err
    if not math.isfinite(number):
        raise vol.Invalid(f"expected a finite number, got {value!r}")
    return number


_HSV_SCHEMA = vol.Schema(
    {
        vol.Required("h"): _number,
        vol.Required("s"): _number,
        vol.Required("v"): _number,
        vol.Required("ct"): _number,
    },
    extra=vol.ALLOW_EXTRA,
)

_RAW_SCHEMA = vol.Schema(
    {vol.Optional(channel): _number for channel in ("r", "g", "b", "ww", "cw")},
    extra=vol.ALLOW_EXTRA,
)

_COLOR_SCHEMA = vol.Schema(
    {
        vol.Required("hsv"): _HSV_SCHEMA,
        vol.Optional("raw"): _RAW_SCHEMA,
    },
    extra=vol.ALLOW_EXTRA,
)


class RgbwwError(Exception):
    """Base class for controller communication failures."""


class RgbwwConnectionError(RgbwwError):
    """Raised when the controller cannot be reached or rejects a request."""


class RgbwwResponseError(RgbwwError):
    """Raised when the controller returns a payload that cannot be parsed."""


@dataclass(frozen=True, slots=True)
class ColorReport:
    """Parsed ``GET /color`` response."""

    state: LightState
    raw: dict[str, float] | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> ColorReport:
        """Validate a decoded response body."""

        try:
            data = _COLOR_SCHEMA(payload)
        except vol.Invalid as err:
            raise RgbwwResponseError(f"Invalid color payload: {err}") from err
        raw = data.get("raw")
        return cls(state=LightState.from_hsv(data["hsv"]), raw=dict(raw) if raw else None)


def build_fade_command(state: LightState, fade_ms: int) -> dict[str, Any]:
    """Return the request body fading the controller to ``state``."""

    return {"hsv": state.as_hsv(), "cmd": FADE_COMMAND, "t": fade_ms}


class RgbwwClient:
    """Async wrapper around the controller's ``/color`` endpoint."""

    def __init__(
        self,
        host: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Create a client for ``host``.

        When ``http_client`` is supplied it is borrowed and never closed here.
        """

        self.host = host
        base = host if host.startswith(("http://", "https://")) else f"http://{host}"
        self._url = base.rstrip("/") + COLOR_PATH
        self._timeout = httpx.Timeout(timeout)
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=self._timeout)

    @property
    def url(self) -> str:
        """Return the color endpoint URL."""

        return self._url

    async def async_get_color(self) -> ColorReport:
        """Fetch and parse the controller's current color state."""

        try:
            response = await self._http_client.get(self._url, timeout=self._timeout)
            response.raise_for_status()
        except _HTTP_ERRORS as err:
            raise RgbwwConnectionError(
                f"GET {self._url} failed: {err!r}"
            ) from err

        _LOGGER.debug("Status poll from %s: %s", self.host, response.text)
        try:
            payload = response.json()
        except ValueError as err:
            raise RgbwwResponseError(
                f"GET {self._url} returned a non-JSON body"
            ) from err
        return ColorReport.from_payload(payload)

    async def async_set_color(self, state: LightState, *, fade_ms: int) -> str:
        """Send a fade command towards ``state`` and return the response text."""

        body = build_fade_command(state, fade_ms)
        _LOGGER.debug("Sending request to %s: %s", self.host, body)
        try:
            response = await self._http_client.post(
                self._url, json=body, timeout=self._timeout
            )
            response.raise_for_status()
        except _HTTP_ERRORS as err:
            raise RgbwwConnectionError(
                f"POST {self._url} failed: {err!r}"
            ) from err
        return response.text

    async def async_close(self) -> None:
        """Close the underlying HTTP client when this instance owns it."""

        if self._owns_client:
            await self._http_client.aclose()
