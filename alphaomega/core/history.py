from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from itertools import count
from typing import Dict, Iterator, List, Optional, Tuple


class Outcome(str, Enum):
    ALPHA = "alpha"
    OMEGA = "omega"

    @property
    def opposite(self) -> "Outcome":
        return Outcome.OMEGA if self is Outcome.ALPHA else Outcome.ALPHA

    @classmethod
    def parse(cls, token: str) -> Optional["Outcome"]:
        t = (token or "").strip().lower()
        if t in ("alpha", "a", "α"):
            return cls.ALPHA
        if t in ("omega", "o", "ω"):
            return cls.OMEGA
        return None


@dataclass(frozen=True)
class OutcomeEntry:
    id: int
    result: Outcome
    observed_at: datetime


class OutcomeHistory:
    """Append-only log of observed outcomes; insertion order is the only order."""

    def __init__(self):
        self._entries: List[OutcomeEntry] = []
        # ids stay unique across clear()
        self._ids = count(1)

    def append(self, result: Outcome, observed_at: datetime) -> OutcomeEntry:
        entry = OutcomeEntry(id=next(self._ids), result=Outcome(result), observed_at=observed_at)
        self._entries.append(entry)
        return entry

    def clear(self):
        self._entries.clear()

    @property
    def entries(self) -> Tuple[OutcomeEntry, ...]:
        return tuple(self._entries)

    @property
    def results(self) -> List[Outcome]:
        return [e.result for e in self._entries]

    @property
    def last(self) -> Optional[OutcomeEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[OutcomeEntry]:
        return iter(tuple(self._entries))

    def counts(self) -> Dict:
        N = len(self._entries)
        a = sum(1 for e in self._entries if e.result is Outcome.ALPHA)
        o = N - a
        return {
            "total": N,
            "alpha": a,
            "omega": o,
            "p_alpha": (a / N * 100) if N else 0.0,
            "p_omega": (o / N * 100) if N else 0.0,
        }
