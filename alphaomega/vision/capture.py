"""
Capture sources feeding the sampling loop.

A source is acquired once with open(), read by every tick with read_region()
and released exactly once with release(). Frames are returned as RGB arrays.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
import logging
import numpy as np
import cv2

from alphaomega.errors import CaptureUnavailable, FrameReadError
from alphaomega.vision.region import CaptureRegion

logger = logging.getLogger(__name__)


class CaptureSource(ABC):
    @abstractmethod
    def open(self):
        """Acquire the underlying stream. Raises CaptureUnavailable."""
        ...

    @abstractmethod
    def grab(self) -> np.ndarray:
        """Return the current full frame as RGB. Raises FrameReadError."""
        ...

    @abstractmethod
    def release(self):
        ...

    def read_region(self, region: CaptureRegion) -> np.ndarray:
        frame = self.grab()
        crop = region.crop(frame)
        if crop.size == 0:
            raise FrameReadError(f"region {region.bounds()} lies outside frame {frame.shape[1]}x{frame.shape[0]}")
        return crop


class CameraSource(CaptureSource):
    """OpenCV VideoCapture on a device index ("0") or a stream URL/path."""

    def __init__(self, device: str | int = 0):
        self._device = int(device) if str(device).isdigit() else device
        self._cap = None

    def open(self):
        cap = cv2.VideoCapture(self._device)
        if not cap.isOpened():
            cap.release()
            raise CaptureUnavailable(f"cannot open capture device {self._device!r}")
        self._cap = cap
        logger.info("camera: opened %r", self._device)

    def grab(self) -> np.ndarray:
        if self._cap is None:
            raise FrameReadError("camera not opened")
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise FrameReadError("camera frame capture failed")
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def release(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("camera: released %r", self._device)


class ScreenSource(CaptureSource):
    """Whole-display screenshots through pyautogui."""

    def __init__(self):
        self._gui = None

    def open(self):
        try:
            # needs a display at import time
            import pyautogui
            pyautogui.size()
        except Exception as e:
            raise CaptureUnavailable(f"screen capture unavailable: {e}") from e
        self._gui = pyautogui
        logger.info("screen: capture ready")

    def grab(self) -> np.ndarray:
        if self._gui is None:
            raise FrameReadError("screen capture not opened")
        try:
            shot = self._gui.screenshot()
        except Exception as e:
            raise FrameReadError(f"screenshot failed: {e}") from e
        return np.array(shot.convert("RGB"))

    def release(self):
        self._gui = None


class ImageFileSource(CaptureSource):
    """A still image served as every frame; handy for calibration and demos."""

    def __init__(self, path: str):
        self.path = path
        self._frame = None

    def open(self):
        img = cv2.imread(str(self.path), cv2.IMREAD_COLOR)
        if img is None:
            raise CaptureUnavailable(f"cannot read image {self.path!r}")
        self._frame = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        logger.info("image: loaded %s (%dx%d)", self.path, img.shape[1], img.shape[0])

    def grab(self) -> np.ndarray:
        if self._frame is None:
            raise FrameReadError("image source not opened")
        return self._frame

    def release(self):
        self._frame = None


def build_source(cfg) -> CaptureSource:
    backend = (cfg.capture_backend or "camera").lower()
    if backend == "screen":
        return ScreenSource()
    if backend == "image":
        if not cfg.capture_image:
            raise CaptureUnavailable("CAPTURE_IMAGE is not set")
        return ImageFileSource(cfg.capture_image)
    if backend == "camera":
        return CameraSource(cfg.capture_device)
    raise CaptureUnavailable(f"unknown capture backend {backend!r}")
