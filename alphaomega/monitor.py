"""
Periodic sampling of the capture region.

Every SAMPLING_INTERVAL_MS the monitor reads the region from the capture
source, scores both halves and hands a detected outcome to the dispatch
callable (normally Forecaster.add_outcome). Everything runs on the asyncio
loop that called start(); tick() itself never yields.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional
import asyncio
import logging

from alphaomega.config import (
    DEFAULT_SENSITIVITY, SAMPLING_INTERVAL_MS,
    SENSITIVITY_MAX, SENSITIVITY_MIN, SENSITIVITY_STEP,
)
from alphaomega.core.history import Outcome, OutcomeEntry
from alphaomega.errors import FrameReadError, InvalidSensitivity
from alphaomega.services import utcnow
from alphaomega.vision.capture import CaptureSource
from alphaomega.vision.region import CaptureRegion, classify, decide

logger = logging.getLogger(__name__)


def validate_sensitivity(value: int) -> int:
    if (isinstance(value, bool) or not isinstance(value, int)
            or not SENSITIVITY_MIN <= value <= SENSITIVITY_MAX
            or (value - SENSITIVITY_MIN) % SENSITIVITY_STEP):
        raise InvalidSensitivity(
            f"sensitivity must be {SENSITIVITY_MIN}..{SENSITIVITY_MAX} in steps of {SENSITIVITY_STEP}, got {value!r}")
    return value


@dataclass
class Detection:
    result: Outcome
    at: datetime
    accepted: bool


@dataclass
class MonitoringSession:
    """One start/stop lifetime: region, acquired source and the timer task."""
    region: CaptureRegion
    source: CaptureSource
    started_at: datetime
    task: Optional[asyncio.Task] = None
    ticks: int = 0
    last_detected: Optional[Detection] = None
    released: bool = field(default=False, repr=False)

    def close(self):
        if self.task is not None:
            self.task.cancel()
            self.task = None
        if not self.released:
            self.released = True
            self.source.release()


class Monitor:
    def __init__(self,
                 dispatch: Callable[[Outcome, str], Optional[OutcomeEntry]],
                 source_factory: Callable[[], CaptureSource],
                 sensitivity: int = DEFAULT_SENSITIVITY,
                 interval_ms: int = SAMPLING_INTERVAL_MS,
                 clock: Callable[[], datetime] = utcnow):
        self.dispatch = dispatch
        self.source_factory = source_factory
        self.sensitivity = validate_sensitivity(sensitivity)
        self.interval_ms = interval_ms
        self.clock = clock
        self.session: Optional[MonitoringSession] = None

    # ---------------- lifecycle ----------------
    @property
    def active(self) -> bool:
        return self.session is not None

    @property
    def threshold(self) -> float:
        return self.sensitivity / 100

    def start(self, region: CaptureRegion, sensitivity: Optional[int] = None) -> MonitoringSession:
        """Acquire the source and begin sampling ``region``.

        The new source is acquired before a running session is replaced.
        Raises CaptureUnavailable when it cannot be acquired; the running
        session (if any) and the sensitivity are then left untouched.
        """
        if sensitivity is not None:
            sensitivity = validate_sensitivity(sensitivity)
        source = self.source_factory()
        source.open()
        self.stop()

        if sensitivity is not None:
            self.sensitivity = sensitivity
        session = MonitoringSession(region=region, source=source, started_at=self.clock())
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            session.task = loop.create_task(self._run(session))
        self.session = session
        x0, y0, x1, y1 = region.bounds()
        logger.info("monitor: started region=(%d,%d)-(%d,%d) sensitivity=%d%% every %dms",
                    x0, y0, x1, y1, self.sensitivity, self.interval_ms)
        return session

    def stop(self) -> bool:
        session, self.session = self.session, None
        if session is None:
            return False
        session.close()
        logger.info("monitor: stopped after %d ticks", session.ticks)
        return True

    def set_sensitivity(self, value: int) -> int:
        self.sensitivity = validate_sensitivity(value)
        logger.info("monitor: sensitivity=%d%%", self.sensitivity)
        return self.sensitivity

    # ---------------- sampling ----------------
    async def _run(self, session: MonitoringSession):
        while self.session is session:
            await asyncio.sleep(self.interval_ms / 1000)
            if self.session is not session:
                break
            try:
                self._tick(session)
            except Exception:
                # a failed tick never ends the loop
                logger.exception("monitor: tick %d failed", session.ticks)

    def tick(self) -> Optional[Outcome]:
        """Run one capture/classify/dispatch cycle now; None when idle or nothing detected."""
        if self.session is None:
            return None
        return self._tick(self.session)

    def _tick(self, session: MonitoringSession) -> Optional[Outcome]:
        session.ticks += 1
        try:
            raster = session.source.read_region(session.region)
        except FrameReadError as e:
            logger.warning("monitor: tick %d skipped: %s", session.ticks, e)
            return None
        except Exception:
            logger.exception("monitor: tick %d capture failed", session.ticks)
            return None
        try:
            sample = classify(raster)
        except Exception:
            logger.exception("monitor: tick %d classification failed", session.ticks)
            return None
        result = decide(sample, self.threshold)
        logger.debug("monitor: tick %d left=%.3f right=%.3f threshold=%.2f -> %s",
                     session.ticks, sample.left_dominance, sample.right_dominance, self.threshold,
                     result.value if result else "-")
        if result is None or self.session is not session:
            return None
        entry = self.dispatch(result, "monitor")
        session.last_detected = Detection(result=result, at=self.clock(), accepted=entry is not None)
        return result

    def status(self) -> Dict:
        s = self.session
        out = {
            "active": s is not None,
            "sensitivity": self.sensitivity,
            "interval_ms": self.interval_ms,
            "region": None,
            "started_at": None,
            "ticks": 0,
            "last_detected": None,
        }
        if s is not None:
            out.update({
                "region": {"x": s.region.x, "y": s.region.y, "width": s.region.width, "height": s.region.height},
                "started_at": s.started_at.isoformat(),
                "ticks": s.ticks,
            })
            if s.last_detected is not None:
                d = s.last_detected
                out["last_detected"] = {"result": d.result.value, "at": d.at.isoformat(), "accepted": d.accepted}
        return out
