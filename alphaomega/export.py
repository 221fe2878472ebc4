# Export helpers: JSON report, two CSV tables and a plain-text summary
from __future__ import annotations
from datetime import datetime
from typing import Dict
import csv
import io

from alphaomega.core.history import Outcome
from alphaomega.services import Forecaster, utcnow

LABELS = {Outcome.ALPHA: "Alpha", Outcome.OMEGA: "Omega"}


def to_json(fc: Forecaster, now: datetime | None = None) -> Dict:
    hist = fc.get_history()
    counts = fc.history.counts()
    return {
        "exportDate": (now or utcnow()).isoformat(),
        "totalResults": counts["total"],
        "alphaCount": counts["alpha"],
        "omegaCount": counts["omega"],
        "bestMethod": fc.best_method_name(),
        "methods": [
            {"name": m.name, "accuracy": m.accuracy, "predictions": m.predictions, "correct": m.correct}
            for m in fc.get_methods()
        ],
        "history": [{"result": e.result.value, "timestamp": e.observed_at.isoformat()} for e in hist],
    }


def methods_csv(fc: Forecaster) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["method", "accuracy", "predictions", "correct"])
    for m in fc.get_methods():
        w.writerow([m.name, f"{m.accuracy:.2f}", m.predictions, m.correct])
    return buf.getvalue()


def history_csv(fc: Forecaster) -> str:
    buf = io.StringIO()
    # BOM so spreadsheet apps pick UTF-8
    buf.write("\ufeff")
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(["index", "result", "timestamp"])
    for i, e in enumerate(fc.get_history(), start=1):
        w.writerow([i, LABELS[e.result], e.observed_at.isoformat()])
    return buf.getvalue()


def summary_text(fc: Forecaster) -> str:
    s = fc.stats()
    lines = [
        "PREDICTION STATISTICS",
        "",
        f"Total results: {s['total']}",
        f"- Alpha: {s['alpha']} ({s['p_alpha']:.1f}%)",
        f"- Omega: {s['omega']} ({s['p_omega']:.1f}%)",
        "",
        "METHODS",
    ]
    for m in fc.get_methods():
        lines += [
            "",
            f"{m.name}:",
            f"- Accuracy: {m.accuracy:.1f}%",
            f"- Predictions: {m.predictions}",
            f"- Correct: {m.correct}",
        ]
    lines += [
        "",
        f"Best method: {fc.best_method_name()}",
        f"Mean accuracy: {s['mean_accuracy']:.1f}%",
        f"Total predictions: {s['total_predictions']}",
    ]
    return "\n".join(lines)
