from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
import logging

from alphaomega.config import DEBOUNCE_MS
from alphaomega.core.ensemble import MethodStats, PredictorEnsemble
from alphaomega.core.history import Outcome, OutcomeEntry, OutcomeHistory

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Forecaster:
    """History + ensemble behind the single dispatch point used by manual and detected outcomes."""

    def __init__(self, clock: Callable[[], datetime] = utcnow, debounce_ms: int = DEBOUNCE_MS):
        self.clock = clock
        self.debounce = timedelta(milliseconds=debounce_ms)
        self.history = OutcomeHistory()
        self.ensemble = PredictorEnsemble()

    def add_outcome(self, result: Outcome, source: str = "manual") -> Optional[OutcomeEntry]:
        """Record ``result``; returns None when it falls inside the debounce window."""
        result = Outcome(result)
        now = self.clock()
        last = self.history.last
        if last is not None and now - last.observed_at < self.debounce:
            logger.debug("debounce: dropped %s from %s (%.0f ms after #%d)",
                         result.value, source, (now - last.observed_at).total_seconds() * 1000, last.id)
            return None
        # score against the prefix before appending; nothing to score on the first outcome
        if len(self.history):
            self.ensemble.update(self.history.results, result)
        entry = self.history.append(result, now)
        logger.info("outcome #%d %s (%s)", entry.id, result.value, source)
        return entry

    def clear_all(self):
        self.history.clear()
        self.ensemble.reset()
        logger.info("history and method counters cleared")

    def get_history(self) -> List[OutcomeEntry]:
        return list(self.history.entries)

    def get_methods(self) -> List[MethodStats]:
        return self.ensemble.snapshots()

    def best_method_name(self) -> str:
        return self.ensemble.best().name

    def next_prediction(self) -> Optional[Outcome]:
        """Forecast of the best method for the next outcome; None before any history."""
        if not len(self.history):
            return None
        best = self.ensemble.best()
        return best.strategy.forecast(self.history.results)

    def stats(self) -> Dict:
        s = self.history.counts()
        methods = self.ensemble.methods
        s["total_predictions"] = sum(m.predictions for m in methods)
        s["mean_accuracy"] = sum(m.accuracy for m in methods) / len(methods)
        return s

    def state(self, limit: int | None = None) -> Dict:
        hist = self.get_history()
        if limit is not None:
            hist = hist[-limit:]
        nxt = self.next_prediction()
        return {
            "history": [entry_to_dict(e) for e in hist],
            "methods": [method_to_dict(m) for m in self.get_methods()],
            "best_method": self.best_method_name(),
            "prediction": nxt.value if nxt else None,
            "forecasts": {k: v.value for k, v in self.ensemble.forecasts(self.history.results).items()},
            "stats": self.stats(),
        }


def entry_to_dict(e: OutcomeEntry) -> Dict:
    return {"id": e.id, "result": e.result.value, "observed_at": e.observed_at.isoformat()}


def method_to_dict(m: MethodStats) -> Dict:
    return {
        "name": m.name,
        "strategy": m.strategy.value,
        "accuracy": m.accuracy,
        "predictions": m.predictions,
        "correct": m.correct,
    }
