"""Constants for the RGBWW LED controller integration."""

from __future__ import annotations

DOMAIN = "rgbww_led"
PLATFORMS: tuple[str, ...] = ("light",)

MANUFACTURER = "DIY"
MODEL = "RGBWW WiFi LED Controller"

CONF_HOST = "host"
CONF_NAME = "name"
CONF_SCAN_INTERVAL = "scan_interval"
CONF_FADE_DURATION = "fade_duration"
CONF_DEBOUNCE = "debounce"

# Options are stored in seconds / milliseconds as entered in the UI.
DEFAULT_NAME = "RGBWW LED"
DEFAULT_SCAN_INTERVAL = 60
DEFAULT_FADE_DURATION = 600
DEFAULT_DEBOUNCE = 0

MIN_SCAN_INTERVAL = 5
MAX_SCAN_INTERVAL = 3600
MAX_FADE_DURATION = 60_000
MAX_DEBOUNCE = 1_000

# Mired range accepted by the characteristic layer, 140..500.
MIN_COLOR_TEMP_KELVIN = 2000
MAX_COLOR_TEMP_KELVIN = 7142
