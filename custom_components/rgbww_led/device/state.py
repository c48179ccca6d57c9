"""Authoritative in-memory light state for a single controller."""

from __future__ import annotations

import math
import threading
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

MIRED_FACTOR = 1_000_000
DEFAULT_COLOR_TEMP = 2700


def _is_valid(value: float) -> bool:
    return math.isfinite(value) and value > 0


def ct_to_characteristic(ct: float) -> float:
    """Convert a wire ``ct`` value to the host-facing ``1_000_000 / ct``.

    Unusable input yields the characteristic of :data:`DEFAULT_COLOR_TEMP`.
    """

    if not _is_valid(ct):
        ct = DEFAULT_COLOR_TEMP
    return MIRED_FACTOR / ct


def characteristic_to_ct(value: float) -> float:
    """Convert a host-facing color temperature back to a wire ``ct`` value.

    Unusable input yields :data:`DEFAULT_COLOR_TEMP`.
    """

    if not _is_valid(value):
        return DEFAULT_COLOR_TEMP
    return MIRED_FACTOR / value


@dataclass(frozen=True, slots=True)
class LightState:
    """Snapshot of the controller's HSV and color temperature state."""

    hue: float = 0
    saturation: float = 0
    value: float = 0
    color_temp: float = DEFAULT_COLOR_TEMP

    @property
    def is_on(self) -> bool:
        """Return True when brightness is above zero."""

        return self.value > 0

    @property
    def inverse_color_temp(self) -> float:
        """Return the color temperature as ``1_000_000 / ct``."""

        return ct_to_characteristic(self.color_temp)

    @classmethod
    def from_hsv(cls, payload: Mapping[str, Any]) -> LightState:
        """Build a state from the wire ``hsv`` object."""

        return cls(
            hue=payload["h"],
            saturation=payload["s"],
            value=payload["v"],
            color_temp=payload["ct"],
        )

    def as_hsv(self) -> dict[str, float]:
        """Serialise to the wire ``hsv`` object."""

        return {
            "h": self.hue,
            "s": self.saturation,
            "v": self.value,
            "ct": self.color_temp,
        }


_FIELD_NAMES = frozenset(field.name for field in fields(LightState))


def _guard_color_temp(state: LightState) -> LightState:
    if not _is_valid(state.color_temp):
        return replace(state, color_temp=DEFAULT_COLOR_TEMP)
    return state


class LightStateStore:
    """Hold the current :class:`LightState` for one device.

    Every mutation builds a complete new snapshot and swaps it in under a
    lock, so readers never observe a partially applied update.
    """

    def __init__(self, initial: LightState | None = None) -> None:
        """Initialise the store with ``initial`` or the power-on default."""

        self._lock = threading.Lock()
        self._state = _guard_color_temp(initial or LightState())

    def get(self) -> LightState:
        """Return the current snapshot."""

        return self._state

    def apply_local(self, **changes: float) -> LightState:
        """Overwrite selected fields ahead of device confirmation."""

        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise TypeError(f"Unknown light state fields: {sorted(unknown)}")
        with self._lock:
            self._state = _guard_color_temp(replace(self._state, **changes))
            return self._state

    def apply_remote(self, state: LightState) -> LightState:
        """Replace the snapshot with state reported by the device."""

        with self._lock:
            self._state = _guard_color_temp(state)
            return self._state
