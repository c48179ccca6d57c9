"""Device-side synchronisation core for RGBWW LED controllers."""

from __future__ import annotations

from .client import (
    ColorReport,
    RgbwwClient,
    RgbwwConnectionError,
    RgbwwError,
    RgbwwResponseError,
)
from .controller import (
    BRIGHTNESS,
    CHARACTERISTICS,
    COLOR_TEMPERATURE,
    HUE,
    ON,
    SATURATION,
    RgbwwLightController,
    characteristic_values,
)
from .state import (
    DEFAULT_COLOR_TEMP,
    LightState,
    LightStateStore,
    characteristic_to_ct,
    ct_to_characteristic,
)

__all__ = [
    "BRIGHTNESS",
    "CHARACTERISTICS",
    "COLOR_TEMPERATURE",
    "ColorReport",
    "DEFAULT_COLOR_TEMP",
    "HUE",
    "LightState",
    "LightStateStore",
    "ON",
    "RgbwwClient",
    "RgbwwConnectionError",
    "RgbwwError",
    "RgbwwLightController",
    "RgbwwResponseError",
    "SATURATION",
    "characteristic_values",
    "characteristic_to_ct",
    "ct_to_characteristic",
]
