"""Pytest configuration for the RGBWW LED integration tests."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest

root_path = Path(__file__).resolve().parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))

from custom_components.rgbww_led.device import RgbwwClient, RgbwwLightController  # noqa: E402

DEVICE_HOST = "192.0.2.10"


class FakeDevice:
    """In-memory stand-in for the controller's ``/color`` endpoint.

    POSTed fade targets become the reported state, like a finished fade.
    """

    def __init__(self) -> None:
        """Start in the controller's power-on state."""

        self.hsv: dict[str, float] = {"h": 0, "s": 0, "v": 0, "ct": 2700}
        self.raw: dict[str, float] | None = None
        self.requests: list[httpx.Request] = []
        self.fail_with: Exception | None = None
        self.get_body: str | None = None
        self.status_code = 200
        self.apply_posts = True
        self.on_post: Callable[[dict[str, Any]], None] | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        """Answer a single request."""

        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="error")
        if request.method == "POST":
            payload = json.loads(request.content)
            if self.on_post is not None:
                self.on_post(payload)
            if self.apply_posts:
                self.hsv = dict(payload["hsv"])
            return httpx.Response(200, json={"success": True})
        if self.get_body is not None:
            return httpx.Response(200, text=self.get_body)
        body: dict[str, Any] = {"hsv": dict(self.hsv)}
        if self.raw is not None:
            body["raw"] = dict(self.raw)
        return httpx.Response(200, json=body)

    @property
    def posts(self) -> list[dict[str, Any]]:
        """Return decoded POST bodies in order."""

        return [json.loads(r.content) for r in self.requests if r.method == "POST"]

    @property
    def get_count(self) -> int:
        """Return the number of GET requests seen."""

        return sum(1 for r in self.requests if r.method == "GET")


@pytest.fixture
def fake_device() -> FakeDevice:
    """Return a fresh fake controller."""

    return FakeDevice()


@pytest.fixture
def rgbww_client(fake_device: FakeDevice) -> RgbwwClient:
    """Return a client wired to ``fake_device``."""

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_device.handler))
    return RgbwwClient(DEVICE_HOST, http_client=http_client)


@pytest.fixture
def make_controller(
    rgbww_client: RgbwwClient,
) -> Callable[..., RgbwwLightController]:
    """Return a factory for controllers with short timers."""

    def _factory(**kwargs: Any) -> RgbwwLightController:
        kwargs.setdefault("scan_interval", timedelta(hours=1))
        kwargs.setdefault("refresh_delay", 0.01)
        return RgbwwLightController(rgbww_client, **kwargs)

    return _factory
