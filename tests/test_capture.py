import cv2
import numpy as np
import pytest
from pydantic import ValidationError

from alphaomega.config import Settings
from alphaomega.errors import CaptureUnavailable, FrameReadError
from alphaomega.vision.capture import CameraSource, ImageFileSource, ScreenSource, build_source
from alphaomega.vision.region import CaptureRegion, classify
from tests.fakes import BLUE, PURPLE, make_frame


def test_image_source_reads_rgb_region(tmp_path):
    rgb = make_frame(left=BLUE, right=PURPLE, w=200, h=120)
    path = tmp_path / "board.png"
    cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    src = ImageFileSource(str(path))
    src.open()
    crop = src.read_region(CaptureRegion(50, 10, 100, 100))
    assert crop.shape == (100, 100, 3)
    assert np.array_equal(crop[0, 0], np.array(BLUE, np.uint8))
    s = classify(crop)
    assert s.left_dominance == 1.0 and s.right_dominance == 1.0
    src.release()
    with pytest.raises(FrameReadError):
        src.grab()


def test_image_source_missing_file(tmp_path):
    with pytest.raises(CaptureUnavailable):
        ImageFileSource(str(tmp_path / "nope.png")).open()


def test_build_source():
    assert isinstance(build_source(Settings(capture_backend="camera", capture_device="2")), CameraSource)
    assert isinstance(build_source(Settings(capture_backend="screen")), ScreenSource)
    assert isinstance(build_source(Settings(capture_backend="image", capture_image="x.png")), ImageFileSource)
    with pytest.raises(CaptureUnavailable):
        build_source(Settings(capture_backend="image", capture_image=None))
    with pytest.raises(CaptureUnavailable):
        build_source(Settings(capture_backend="vnc"))


def test_settings_reject_bad_sensitivity(monkeypatch):
    assert Settings(sensitivity=35).sensitivity == 35
    for bad in (12, 5, 55):
        with pytest.raises(ValidationError):
            Settings(sensitivity=bad)
    monkeypatch.setenv("SENSITIVITY", "45")
    assert Settings().sensitivity == 45
    monkeypatch.setenv("SENSITIVITY", "33")
    with pytest.raises(ValidationError):
        Settings()
