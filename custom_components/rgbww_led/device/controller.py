"""State synchronisation between Home Assistant and an RGBWW controller.

The controller owns the single :class:`~.state.LightStateStore` for one
device and drives it from two directions:

Pushing
    Characteristic changes are merged into the store immediately (an
    optimistic update) and then sent to the device as a fade command.  A
    failed push is not retried and not rolled back; the next poll corrects
    any mismatch.  Every push schedules one supplementary poll shortly
    afterwards so the state the device settles on is picked up.

Polling
    The device is polled once on start and then every ``scan_interval``.
    Successful polls overwrite the store and notify update listeners with all
    characteristic values.  Failed polls leave the store untouched and notify
    fault listeners.

Everything runs on one asyncio loop; responses are applied in the order
they arrive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from datetime import timedelta
from typing import Any

from .client import RgbwwClient, RgbwwError
from .state import LightState, LightStateStore, characteristic_to_ct

HUE = "hue"
SATURATION = "saturation"
BRIGHTNESS = "brightness"
COLOR_TEMPERATURE = "color_temperature"
ON = "on"

CHARACTERISTICS: tuple[str, ...] = (HUE, SATURATION, BRIGHTNESS, COLOR_TEMPERATURE, ON)

FULL_BRIGHTNESS = 100

_DEFAULT_SCAN_INTERVAL = timedelta(seconds=60)
_DEFAULT_FADE_DURATION = 600
_DEFAULT_REFRESH_DELAY = 1.0

_GETTERS: dict[str, Callable[[LightState], Any]] = {
    HUE: lambda state: state.hue,
    SATURATION: lambda state: state.saturation,
    BRIGHTNESS: lambda state: state.value,
    COLOR_TEMPERATURE: lambda state: state.inverse_color_temp,
    ON: lambda state: state.is_on,
}

UpdateCallback = Callable[[Mapping[str, Any]], None]
FaultCallback = Callable[[RgbwwError], None]


def characteristic_values(state: LightState) -> dict[str, Any]:
    """Return every host-facing characteristic for ``state``."""

    return {name: getter(state) for name, getter in _GETTERS.items()}


class RgbwwLightController:
    """Push and poll state for a single RGBWW controller."""

    def __init__(
        self,
        client: RgbwwClient,
        *,
        scan_interval: timedelta = _DEFAULT_SCAN_INTERVAL,
        fade_duration: int = _DEFAULT_FADE_DURATION,
        refresh_delay: float = _DEFAULT_REFRESH_DELAY,
        debounce: float = 0.0,
        loop: asyncio.AbstractEventLoop | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialise the controller.

        Args:
            client:        Transport for the device's ``/color`` endpoint.
            scan_interval: Cadence of the periodic poll.
            fade_duration: Fade length sent with every command, in ms.
            refresh_delay: Seconds between a push and its follow-up poll.
            debounce:      Trailing-edge debounce for pushes in seconds;
                           ``0`` sends every change immediately.
        """

        self._client = client
        self._scan_interval = scan_interval
        self._fade_duration = fade_duration
        self._refresh_delay = refresh_delay
        self._debounce = debounce
        self._loop = loop
        self._logger = logger or logging.getLogger(__name__)

        self.store = LightStateStore()
        self.available = False
        self.last_error: RgbwwError | None = None

        self._update_listeners: list[UpdateCallback] = []
        self._fault_listeners: list[FaultCallback] = []

        self._refresh_handle: asyncio.TimerHandle | None = None
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._post_push_handles: set[asyncio.TimerHandle] = set()
        self._pending_tasks: set[asyncio.Task[Any]] = set()
        self._stopped = False

    @property
    def host(self) -> str:
        """Return the device address."""

        return self._client.host

    @property
    def state(self) -> LightState:
        """Return the current store snapshot."""

        return self.store.get()

    def register_update_callback(self, cb: UpdateCallback) -> Callable[[], None]:
        """Call ``cb`` with all characteristic values after every poll."""

        self._update_listeners.append(cb)

        def _remove() -> None:
            try:
                self._update_listeners.remove(cb)
            except ValueError:
                pass

        return _remove

    def register_fault_callback(self, cb: FaultCallback) -> Callable[[], None]:
        """Call ``cb`` with the error on every communication failure."""

        self._fault_listeners.append(cb)

        def _remove() -> None:
            try:
                self._fault_listeners.remove(cb)
            except ValueError:
                pass

        return _remove

    async def async_start(self) -> None:
        """Poll once and arm the periodic poll."""

        self._stopped = False
        await self.async_refresh()
        self._schedule_refresh()

    async def async_stop(self) -> None:
        """Stop all timers; in-flight requests are left to finish."""

        self._stopped = True
        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None
        for handle in self._post_push_handles:
            handle.cancel()
        self._post_push_handles.clear()
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
            await self._async_push()
        self._logger.info("[%s] Controller stopped", self.host)

    def get_characteristic(self, name: str) -> Any:
        """Return the current value of characteristic ``name``."""

        return _GETTERS[name](self.store.get())

    async def async_set_characteristic(self, name: str, value: Any) -> None:
        """Apply a single characteristic change and push it."""

        await self.async_set_characteristics({name: value})

    async def async_set_characteristics(self, changes: Mapping[str, Any]) -> None:
        """Apply several characteristic changes as one push."""

        fields = self._resolve_fields(changes)
        current = self.store.get()
        if all(getattr(current, key) == value for key, value in fields.items()):
            self._logger.debug("[%s] No state change for %s", self.host, dict(changes))
            return

        self.store.apply_local(**fields)
        if self._debounce > 0:
            self._schedule_debounced_push()
            return
        await self._async_push()

    def _resolve_fields(self, changes: Mapping[str, Any]) -> dict[str, float]:
        """Translate characteristic changes into store fields."""

        fields: dict[str, float] = {}
        for name, value in changes.items():
            if name == HUE:
                fields["hue"] = value
            elif name == SATURATION:
                fields["saturation"] = value
            elif name == BRIGHTNESS:
                fields["value"] = value
            elif name == COLOR_TEMPERATURE:
                fields["color_temp"] = characteristic_to_ct(value)
            elif name != ON:
                raise KeyError(name)

        # Power is resolved last so an explicit brightness wins over "on".
        if ON in changes:
            if not changes[ON]:
                fields["value"] = 0
            elif "value" not in fields and not self.store.get().is_on:
                fields["value"] = FULL_BRIGHTNESS
        return fields

    async def _async_push(self) -> None:
        """Send the current snapshot to the device as a fade command."""

        state = self.store.get()
        self._schedule_post_push_refresh()
        try:
            result = await self._client.async_set_color(
                state, fade_ms=self._fade_duration
            )
        except RgbwwError as err:
            self._logger.error("[%s] Set error: %s", self.host, err)
            self._handle_fault(err)
            return
        self._logger.debug("[%s] Set result: %s", self.host, result)
        self.available = True

    def _schedule_debounced_push(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()

        def _fire() -> None:
            self._debounce_handle = None
            self._track_task(self._async_push())

        self._debounce_handle = self._get_loop().call_later(self._debounce, _fire)

    def _schedule_post_push_refresh(self) -> None:
        if self._stopped:
            return
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._post_push_handles.discard(handle)
            self._track_task(self.async_refresh())

        handle = self._get_loop().call_later(self._refresh_delay, _fire)
        self._post_push_handles.add(handle)

    async def async_refresh(self) -> bool:
        """Poll the device and reconcile the store.

        Returns ``True`` when the store was updated.
        """

        try:
            report = await self._client.async_get_color()
        except RgbwwError as err:
            self._logger.warning("[%s] Status poll failed: %s", self.host, err)
            self._handle_fault(err)
            return False

        state = self.store.apply_remote(report.state)
        self.available = True
        self.last_error = None
        values = characteristic_values(state)
        for listener in list(self._update_listeners):
            try:
                listener(values)
            except Exception:
                self._logger.exception("[%s] Update listener failed", self.host)
        return True

    def _schedule_refresh(self) -> None:
        """Arm the recurring poll timer."""

        loop = self._get_loop()
        interval = self._scan_interval.total_seconds()

        def _wrapper() -> None:
            self._track_task(self.async_refresh())
            self._refresh_handle = loop.call_later(interval, _wrapper)

        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
        self._refresh_handle = loop.call_later(interval, _wrapper)

    def _handle_fault(self, err: RgbwwError) -> None:
        self.available = False
        self.last_error = err
        for listener in list(self._fault_listeners):
            try:
                listener(err)
            except Exception:
                self._logger.exception("[%s] Fault listener failed", self.host)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _track_task(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = self._get_loop().create_task(coro)
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)
        return task
