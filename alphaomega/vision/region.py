# region.py: split the capture region in two halves and score colour dominance
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np

from alphaomega.config import MIN_REGION_SIDE
from alphaomega.core.history import Outcome
from alphaomega.errors import InvalidRegion


@dataclass(frozen=True)
class CaptureRegion:
    """Rectangle in source-image pixels. Both sides must exceed MIN_REGION_SIDE."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise InvalidRegion("region origin must not be negative")
        # checked on the pixel extents actually cropped
        x0, y0, x1, y1 = self.bounds()
        w, h = x1 - x0, y1 - y0
        if w <= MIN_REGION_SIDE or h <= MIN_REGION_SIDE:
            raise InvalidRegion(f"region {w}x{h}px too small, both sides must exceed {MIN_REGION_SIDE}px")

    def bounds(self) -> Tuple[int, int, int, int]:
        x0, y0 = int(round(self.x)), int(round(self.y))
        return x0, y0, x0 + int(round(self.width)), y0 + int(round(self.height))

    def crop(self, frame: np.ndarray) -> np.ndarray:
        """Clip the region to ``frame``; may be empty when the region lies outside it."""
        x0, y0, x1, y1 = self.bounds()
        return frame[y0:y1, x0:x1]


@dataclass(frozen=True)
class ClassificationSample:
    left_dominance: float
    right_dominance: float


# === colour predicates on an RGB raster ===
def _channels(rgb: np.ndarray):
    # widen so that g - r and friends cannot wrap around uint8
    px = rgb[..., :3].astype(np.int16)
    return px[..., 0], px[..., 1], px[..., 2]

def blue_mask(rgb: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (b > 180) & (g > 200) & (r < 150) & ((g - r) > 50) & ((b - r) > 30)

def purple_mask(rgb: np.ndarray) -> np.ndarray:
    r, g, b = _channels(rgb)
    return (r > 120) & (b > 120) & (g < 100) & (np.abs(r - b) < 60) & (r > g) & (b > g)

def _dominance(mask: np.ndarray) -> float:
    total = mask.size
    if total == 0:
        return 0.0
    return float(np.count_nonzero(mask)) / total

def split_halves(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Equal-width left/right halves; the middle column of an odd width belongs to neither."""
    w = rgb.shape[1]
    half = w // 2
    return rgb[:, :half], rgb[:, w - half:]

def classify(rgb: np.ndarray) -> ClassificationSample:
    left, right = split_halves(rgb)
    return ClassificationSample(
        left_dominance=_dominance(blue_mask(left)),
        right_dominance=_dominance(purple_mask(right)),
    )

def decide(sample: ClassificationSample, threshold: float) -> Optional[Outcome]:
    l, r = sample.left_dominance, sample.right_dominance
    if l > r and l > threshold:
        return Outcome.ALPHA
    if r > l and r > threshold:
        return Outcome.OMEGA
    return None
