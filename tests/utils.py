"""
Shared test utilities
"""
import asyncio
from pathlib import Path
from typing import Optional

from core.errors import GatewayError
from core.panels import GenerationResult, ImageResource

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
JPEG_HEADER = b"\xff\xd8\xff\xe0"


def make_image(name: str = "panel.png", payload: bytes = b"pixels") -> ImageResource:
    """Build a small fake image resource.

    The bytes only need a believable header; nothing decodes them.
    """
    header = JPEG_HEADER if name.endswith((".jpg", ".jpeg")) else PNG_HEADER
    mime_type = "image/jpeg" if header == JPEG_HEADER else "image/png"
    return ImageResource(data=header + payload + name.encode(), mime_type=mime_type, name=name)


def write_images(directory: Path, names: list[str]) -> list[Path]:
    """Write fake image files and return their paths in order"""
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(make_image(name).data)
        paths.append(path)
    return paths


class FakeTimer:
    """Stand-in for IntervalTimer that only fires when told to"""

    def __init__(self, interval: float, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    @property
    def live(self) -> bool:
        return self.started and not self.cancelled

    @property
    def running(self) -> bool:
        return self.live

    def fire(self):
        assert self.live, "fired a timer that is not running"
        self.callback()


class FakeTimerFactory:
    """Records every timer a controller creates"""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, callback) -> FakeTimer:
        timer = FakeTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.live]


class FakeGateway:
    """Records calls; can fail, or hold each call until released"""

    def __init__(self, error: Optional[GatewayError] = None, hold: bool = False):
        self.error = error
        self.calls: list[tuple[bytes, str]] = []
        self.mime_types: list[Optional[str]] = []
        self.release = asyncio.Event() if hold else None

    async def generate(self, image: bytes, scene: str, mime_type: Optional[str] = None) -> GenerationResult:
        self.calls.append((image, scene))
        self.mime_types.append(mime_type)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return GenerationResult(
            manga_panel_url=f"https://images.example/{len(self.calls)}.png",
            description=f"Manga page: {scene}"
        )
