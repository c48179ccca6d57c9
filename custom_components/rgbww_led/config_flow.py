"""Configuration flow for the RGBWW LED controller integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.httpx_client import get_async_client

from .const import (
    CONF_DEBOUNCE,
    CONF_FADE_DURATION,
    CONF_HOST,
    CONF_NAME,
    CONF_SCAN_INTERVAL,
    DEFAULT_DEBOUNCE,
    DEFAULT_FADE_DURATION,
    DEFAULT_NAME,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    MAX_DEBOUNCE,
    MAX_FADE_DURATION,
    MAX_SCAN_INTERVAL,
    MIN_SCAN_INTERVAL,
)
from .device import RgbwwClient, RgbwwError

_LOGGER = logging.getLogger(__name__)

_USER_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): str,
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): str,
    }
)

_OPTION_DEFAULTS: dict[str, int] = {
    CONF_SCAN_INTERVAL: DEFAULT_SCAN_INTERVAL,
    CONF_FADE_DURATION: DEFAULT_FADE_DURATION,
    CONF_DEBOUNCE: DEFAULT_DEBOUNCE,
}

_OPTION_RANGES: dict[str, vol.Range] = {
    CONF_SCAN_INTERVAL: vol.Range(min=MIN_SCAN_INTERVAL, max=MAX_SCAN_INTERVAL),
    CONF_FADE_DURATION: vol.Range(min=0, max=MAX_FADE_DURATION),
    CONF_DEBOUNCE: vol.Range(min=0, max=MAX_DEBOUNCE),
}


def build_options_schema(options: dict[str, Any]) -> vol.Schema:
    """Return the options schema pre-filled from ``options``."""

    schema: dict[Any, Any] = {}
    for key, default in _OPTION_DEFAULTS.items():
        schema[vol.Optional(key, default=options.get(key, default))] = vol.All(
            vol.Coerce(int), _OPTION_RANGES[key]
        )
    return vol.Schema(schema)


async def _async_validate_host(hass: HomeAssistant, host: str) -> None:
    """Raise :class:`RgbwwError` unless ``host`` answers a color poll."""

    client = RgbwwClient(host, http_client=get_async_client(hass))
    report = await client.async_get_color()
    _LOGGER.debug("Validated %s with state %s", host, report.state)


class RgbwwConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle the user step for adding a controller."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the controller address and verify it responds."""

        errors: dict[str, str] = {}
        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            self._async_abort_entries_match({CONF_HOST: host})
            try:
                await _async_validate_host(self.hass, host)
            except RgbwwError as err:
                _LOGGER.warning("Unable to reach %s: %s", host, err)
                errors["base"] = "cannot_connect"
            else:
                name = user_input.get(CONF_NAME) or DEFAULT_NAME
                return self.async_create_entry(
                    title=name, data={CONF_HOST: host, CONF_NAME: name}
                )

        return self.async_show_form(
            step_id="user", data_schema=_USER_SCHEMA, errors=errors
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> OptionsFlow:
        """Return the options flow handler."""

        return RgbwwOptionsFlow()


class RgbwwOptionsFlow(OptionsFlow):
    """Edit polling, fade and debounce settings."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Show or store the options."""

        if user_input is not None:
            return self.async_create_entry(data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=build_options_schema(dict(self.config_entry.options)),
        )
