# Four heuristic forecasters scored online against the observed history
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from alphaomega.core.history import Outcome

A = Outcome.ALPHA
O = Outcome.OMEGA

RECENT_WINDOW = 5


# ---------- strategies ----------
# Each one sees only the prefix that precedes the outcome being forecast.

def frequency_majority(H: Sequence[Outcome]) -> Outcome:
    a = sum(1 for r in H if r is A)
    o = len(H) - a
    return A if a > o else O


def recent_window(H: Sequence[Outcome], window: int = RECENT_WINDOW) -> Outcome:
    recent = list(H)[-window:]
    a = sum(1 for r in recent if r is A)
    return O if a > 2 else A


def short_pattern(H: Sequence[Outcome]) -> Outcome:
    if len(H) < 3:
        return A
    last3 = list(H)[-3:]
    if all(r is A for r in last3):
        return O
    if all(r is O for r in last3):
        return A
    return last3[-1].opposite


def transition_model(H: Sequence[Outcome]) -> Outcome:
    if len(H) < 2:
        return A
    C = {A: {A: 0, O: 0}, O: {A: 0, O: 0}}
    for prev, nxt in zip(H, H[1:]):
        C[prev][nxt] += 1
    last = H[-1]
    other = last.opposite
    # equal counts keep the last symbol
    return other if C[last][other] > C[last][last] else last


class Strategy(str, Enum):
    FREQUENCY = "frequency"
    RECENT = "recent"
    PATTERN = "pattern"
    TRANSITION = "transition"

    def forecast(self, H: Sequence[Outcome]) -> Outcome:
        return _STRATEGY_FNS[self](list(H))


_STRATEGY_FNS: Dict[Strategy, Callable[[Sequence[Outcome]], Outcome]] = {
    Strategy.FREQUENCY: frequency_majority,
    Strategy.RECENT: recent_window,
    Strategy.PATTERN: short_pattern,
    Strategy.TRANSITION: transition_model,
}

# declaration order doubles as the tie-break order of best_method()
DEFAULT_METHODS = (
    ("Frequency analysis", Strategy.FREQUENCY),
    ("Last 5 values", Strategy.RECENT),
    ("Pattern analysis", Strategy.PATTERN),
    ("Transition model", Strategy.TRANSITION),
)


# ---------- accounting ----------

@dataclass(frozen=True)
class MethodStats:
    name: str
    strategy: Strategy
    predictions: int
    correct: int
    accuracy: float


@dataclass
class PredictionMethod:
    name: str
    strategy: Strategy
    predictions: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        if self.predictions == 0:
            return 0.0
        return self.correct / self.predictions * 100

    def record(self, forecast: Outcome, actual: Outcome):
        self.predictions += 1
        if forecast is actual:
            self.correct += 1

    def reset(self):
        self.predictions = 0
        self.correct = 0

    def snapshot(self) -> MethodStats:
        return MethodStats(self.name, self.strategy, self.predictions, self.correct, self.accuracy)


class PredictorEnsemble:
    def __init__(self, methods=DEFAULT_METHODS):
        self.methods: List[PredictionMethod] = [PredictionMethod(name, Strategy(s)) for name, s in methods]

    def update(self, prefix: Sequence[Outcome], actual: Outcome):
        """Score every method's forecast from ``prefix`` against ``actual``.

        The caller skips this for the first outcome of an empty history, since
        nothing was forecast before it.
        """
        for m in self.methods:
            m.record(m.strategy.forecast(prefix), actual)

    def forecasts(self, prefix: Sequence[Outcome]) -> Dict[str, Outcome]:
        return {m.name: m.strategy.forecast(prefix) for m in self.methods}

    def reset(self):
        for m in self.methods:
            m.reset()

    def snapshots(self) -> List[MethodStats]:
        return [m.snapshot() for m in self.methods]

    def best(self) -> Optional[PredictionMethod]:
        return best_method(self.methods)


def best_method(methods: Sequence[PredictionMethod]) -> Optional[PredictionMethod]:
    """Highest accuracy wins; on a tie the earlier-declared method is kept."""
    best = None
    for m in methods:
        if best is None or m.accuracy > best.accuracy:
            best = m
    return best
