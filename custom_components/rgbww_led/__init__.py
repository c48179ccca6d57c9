"""Integration entry point for the RGBWW LED controller custom component."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from .const import (
    CONF_DEBOUNCE,
    CONF_FADE_DURATION,
    CONF_HOST,
    CONF_SCAN_INTERVAL,
    DEFAULT_DEBOUNCE,
    DEFAULT_FADE_DURATION,
    DEFAULT_SCAN_INTERVAL,
    DOMAIN,
    PLATFORMS,
)
from .device import RgbwwClient, RgbwwLightController

__all__ = [
    "DOMAIN",
    "PLATFORMS",
    "async_setup_entry",
    "async_unload_entry",
    "build_controller",
]

_LOGGER = logging.getLogger(__name__)


def build_controller(
    host: str, options: dict[str, Any], http_client: Any | None = None
) -> RgbwwLightController:
    """Create a controller for ``host`` using config entry options."""

    client = RgbwwClient(host, http_client=http_client)
    return RgbwwLightController(
        client,
        scan_interval=timedelta(
            seconds=options.get(CONF_SCAN_INTERVAL, DEFAULT_SCAN_INTERVAL)
        ),
        fade_duration=int(options.get(CONF_FADE_DURATION, DEFAULT_FADE_DURATION)),
        debounce=options.get(CONF_DEBOUNCE, DEFAULT_DEBOUNCE) / 1000,
        logger=_LOGGER.getChild("controller"),
    )


async def async_setup_entry(hass: Any, entry: Any) -> bool:
    """Set up a config entry for one controller."""

    from homeassistant.const import EVENT_HOMEASSISTANT_STOP
    from homeassistant.helpers.httpx_client import get_async_client

    controller = build_controller(
        entry.data[CONF_HOST], dict(entry.options), get_async_client(hass)
    )
    await controller.async_start()

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = controller

    async def _async_shutdown(_event: Any) -> None:
        await controller.async_stop()

    entry.async_on_unload(
        hass.bus.async_listen_once(EVENT_HOMEASSISTANT_STOP, _async_shutdown)
    )
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info("Finished initializing %s", entry.data[CONF_HOST])
    return True


async def async_unload_entry(hass: Any, entry: Any) -> bool:
    """Unload a config entry and stop its controller."""

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        controller: RgbwwLightController = hass.data[DOMAIN].pop(entry.entry_id)
        await controller.async_stop()
    return unload_ok


async def _async_update_listener(hass: Any, entry: Any) -> None:
    """Reload the entry so changed options reach a new controller."""

    await hass.config_entries.async_reload(entry.entry_id)
