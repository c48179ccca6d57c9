"""Poll or drive an RGBWW controller from the command line."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from custom_components.rgbww_led.device import (
    BRIGHTNESS,
    COLOR_TEMPERATURE,
    HUE,
    SATURATION,
    RgbwwClient,
    RgbwwLightController,
    ct_to_characteristic,
)


def _print_values(values: Mapping[str, Any]) -> None:
    for name, value in values.items():
        print(f"{name:>17}: {value}")


async def main(argv: list[str] | None = None) -> int:
    """Run a single get or set against the controller at ``--host``."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", required=True, help="Controller host name or IP")
    parser.add_argument("--debug", action="store_true", help="Log HTTP payloads")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("get", help="Print the current device state")
    set_parser = sub.add_parser("set", help="Fade to a new state")
    set_parser.add_argument("--hue", type=float)
    set_parser.add_argument("--saturation", type=float)
    set_parser.add_argument("--brightness", type=float)
    set_parser.add_argument("--ct", type=float, help="Device ct value (kelvin)")
    set_parser.add_argument("--fade", type=int, default=600, help="Fade time in ms")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    client = RgbwwClient(args.host)
    controller = RgbwwLightController(client, fade_duration=args.fade)
    faults: list[Exception] = []
    controller.register_update_callback(_print_values)
    controller.register_fault_callback(faults.append)
    try:
        if not await controller.async_refresh():
            return 1
        if args.command == "set":
            changes: dict[str, Any] = {}
            if args.hue is not None:
                changes[HUE] = args.hue
            if args.saturation is not None:
                changes[SATURATION] = args.saturation
            if args.brightness is not None:
                changes[BRIGHTNESS] = args.brightness
            if args.ct is not None:
                changes[COLOR_TEMPERATURE] = ct_to_characteristic(args.ct)
            await controller.async_set_characteristics(changes)
            # Give the follow-up poll time to report the settled state.
            await asyncio.sleep(1.5)
    finally:
        await controller.async_stop()
        await client.async_close()
    return 1 if faults else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
