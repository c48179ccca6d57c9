"""Light platform for the RGBWW LED controller integration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_COLOR_TEMP_KELVIN,
    ATTR_HS_COLOR,
    ColorMode,
    LightEntity,
)
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceInfo

from .const import (
    CONF_NAME,
    DEFAULT_NAME,
    DOMAIN,
    MANUFACTURER,
    MAX_COLOR_TEMP_KELVIN,
    MIN_COLOR_TEMP_KELVIN,
    MODEL,
)
from .device import (
    BRIGHTNESS,
    COLOR_TEMPERATURE,
    HUE,
    ON,
    SATURATION,
    RgbwwError,
    RgbwwLightController,
    characteristic_to_ct,
    ct_to_characteristic,
)


class RgbwwLight(LightEntity):
    """Home Assistant view of one RGBWW controller."""

    _attr_should_poll = False
    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_color_modes = {ColorMode.HS, ColorMode.COLOR_TEMP}
    _attr_min_color_temp_kelvin = MIN_COLOR_TEMP_KELVIN
    _attr_max_color_temp_kelvin = MAX_COLOR_TEMP_KELVIN

    def __init__(
        self, controller: RgbwwLightController, entry_id: str, name: str
    ) -> None:
        """Bind the entity to ``controller``."""

        self._controller = controller
        self._remove_callbacks: list[Callable[[], None]] = []
        self._attr_unique_id = entry_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=name,
            manufacturer=MANUFACTURER,
            model=MODEL,
            configuration_url=f"http://{controller.host}",
        )

    @staticmethod
    def _percent_to_brightness(percent: float) -> int:
        """Convert a device brightness percentage to Home Assistant scale."""

        return round(percent * 255 / 100)

    @staticmethod
    def _brightness_to_percent(value: float) -> int:
        """Convert Home Assistant brightness to a device percentage."""

        return max(0, min(100, round(value * 100 / 255)))

    async def async_added_to_hass(self) -> None:
        """Subscribe to controller updates and faults."""

        self._remove_callbacks = [
            self._controller.register_update_callback(self._handle_update),
            self._controller.register_fault_callback(self._handle_fault),
        ]

    async def async_will_remove_from_hass(self) -> None:
        """Detach controller listeners."""

        for remove in self._remove_callbacks:
            remove()
        self._remove_callbacks = []

    @callback
    def _handle_update(self, values: Mapping[str, Any]) -> None:
        self.async_write_ha_state()

    @callback
    def _handle_fault(self, err: RgbwwError) -> None:
        self.async_write_ha_state()

    @property
    def available(self) -> bool:
        """Return False while the controller is unreachable."""

        return self._controller.available

    @property
    def is_on(self) -> bool:
        """Return True when brightness is above zero."""

        return self._controller.get_characteristic(ON)

    @property
    def brightness(self) -> int:
        """Return brightness on the 0..255 scale."""

        return self._percent_to_brightness(
            self._controller.get_characteristic(BRIGHTNESS)
        )

    @property
    def hs_color(self) -> tuple[float, float]:
        """Return hue and saturation."""

        return (
            self._controller.get_characteristic(HUE),
            self._controller.get_characteristic(SATURATION),
        )

    @property
    def color_temp_kelvin(self) -> int:
        """Return the white color temperature."""

        value = self._controller.get_characteristic(COLOR_TEMPERATURE)
        return round(characteristic_to_ct(value))

    @property
    def color_mode(self) -> ColorMode:
        """Report HS while a color is saturated, color temperature otherwise."""

        if self._controller.get_characteristic(SATURATION) > 0:
            return ColorMode.HS
        return ColorMode.COLOR_TEMP

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the light on, optionally changing brightness or color."""

        changes: dict[str, Any] = {ON: True}
        if ATTR_BRIGHTNESS in kwargs:
            changes[BRIGHTNESS] = max(
                1, self._brightness_to_percent(kwargs[ATTR_BRIGHTNESS])
            )
        if ATTR_HS_COLOR in kwargs:
            hue, saturation = kwargs[ATTR_HS_COLOR]
            changes[HUE] = hue
            changes[SATURATION] = saturation
        if ATTR_COLOR_TEMP_KELVIN in kwargs:
            changes[COLOR_TEMPERATURE] = ct_to_characteristic(
                kwargs[ATTR_COLOR_TEMP_KELVIN]
            )
            changes[SATURATION] = 0
        await self._controller.async_set_characteristics(changes)
        self._write_optimistic_state()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the light off."""

        await self._controller.async_set_characteristic(ON, False)
        self._write_optimistic_state()

    def _write_optimistic_state(self) -> None:
        # Entities built outside Home Assistant have no hass to write to.
        if self.hass is not None:
            self.async_write_ha_state()


async def async_setup_entry(hass: Any, entry: Any, async_add_entities: Any) -> None:
    """Set up the light for a config entry."""

    controller: RgbwwLightController = hass.data[DOMAIN][entry.entry_id]
    name = entry.data.get(CONF_NAME, DEFAULT_NAME)
    async_add_entities([RgbwwLight(controller, entry.entry_id, name)])
