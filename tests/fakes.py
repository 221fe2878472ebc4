from datetime import datetime, timedelta, timezone
import numpy as np

from alphaomega.vision.capture import CaptureSource
from alphaomega.errors import CaptureUnavailable

BLUE = (50, 220, 240)
PURPLE = (180, 40, 200)


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


class FrameSource(CaptureSource):
    """In-memory source; ``frames`` may hold arrays or exceptions to raise."""

    def __init__(self, frames, fail_open=False):
        self.frames = list(frames)
        self.fail_open = fail_open
        self.opened = 0
        self.released = 0

    def open(self):
        if self.fail_open:
            raise CaptureUnavailable("no stream")
        self.opened += 1

    def grab(self):
        item = self.frames[0] if len(self.frames) == 1 else self.frames.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def release(self):
        self.released += 1


def make_frame(left=BLUE, right=(0, 0, 0), w=100, h=60):
    img = np.zeros((h, w, 3), np.uint8)
    img[:, : w // 2] = left
    img[:, w // 2:] = right
    return img


