from alphaomega.core.ensemble import PredictionMethod, Strategy, best_method
from alphaomega.core.history import Outcome
from alphaomega.services import Forecaster

A, O = Outcome.ALPHA, Outcome.OMEGA


def _feed(fc, clock, seq):
    for r in seq:
        assert fc.add_outcome(r) is not None
        clock.advance(6)


def test_first_outcome_is_not_scored(clock):
    fc = Forecaster(clock=clock)
    fc.add_outcome(A)
    assert all(m.predictions == 0 and m.accuracy == 0.0 for m in fc.get_methods())


def test_prediction_count_is_n_minus_one(clock):
    fc = Forecaster(clock=clock)
    _feed(fc, clock, [O, A, A, O, O, O, A, O, A])
    for m in fc.get_methods():
        assert m.predictions == 8
        assert 0 <= m.correct <= m.predictions
        assert m.accuracy == m.correct / m.predictions * 100


def test_golden_sequence(clock):
    fc = Forecaster(clock=clock)
    _feed(fc, clock, [A, A, O, A, O])
    got = {m.strategy: (m.predictions, m.correct) for m in fc.get_methods()}
    assert got == {
        Strategy.FREQUENCY: (4, 2),
        Strategy.RECENT: (4, 3),
        Strategy.PATTERN: (4, 3),
        Strategy.TRANSITION: (4, 1),
    }
    assert fc.get_methods()[0].accuracy == 50.0
    # recent and pattern tie at 75%, recent is declared first
    assert fc.best_method_name() == "Last 5 values"
    assert fc.next_prediction() == O


def test_debounce_drops_quick_repeats(clock):
    fc = Forecaster(clock=clock)
    fc.add_outcome(A)
    clock.advance(4.999)
    assert fc.add_outcome(O) is None
    assert len(fc.get_history()) == 1
    assert all(m.predictions == 0 for m in fc.get_methods())
    clock.advance(0.001)
    assert fc.add_outcome(O) is not None
    assert len(fc.get_history()) == 2


def test_entries_are_ordered_with_increasing_ids(clock):
    fc = Forecaster(clock=clock)
    _feed(fc, clock, [A, O, O])
    hist = fc.get_history()
    assert [e.result for e in hist] == [A, O, O]
    assert hist[0].id < hist[1].id < hist[2].id
    assert hist[0].observed_at < hist[1].observed_at


def test_clear_all_resets_everything(clock):
    fc = Forecaster(clock=clock)
    _feed(fc, clock, [A, O, A, A])
    last_id = fc.get_history()[-1].id
    fc.clear_all()
    assert fc.get_history() == []
    assert all(m.predictions == 0 and m.correct == 0 for m in fc.get_methods())
    assert fc.best_method_name() == "Frequency analysis"
    assert fc.next_prediction() is None
    # the next outcome is again the unscored first one
    e = fc.add_outcome(O)
    assert e.id > last_id
    assert all(m.predictions == 0 for m in fc.get_methods())


def test_best_method_tie_goes_to_first_declared():
    a = PredictionMethod("first", Strategy.FREQUENCY, predictions=4, correct=2)
    b = PredictionMethod("second", Strategy.RECENT, predictions=2, correct=1)
    c = PredictionMethod("third", Strategy.PATTERN, predictions=4, correct=1)
    assert best_method([a, b, c]).name == "first"
    assert best_method([c, b, a]).name == "second"
    assert best_method([]) is None


def test_stats(clock):
    fc = Forecaster(clock=clock)
    _feed(fc, clock, [A, A, O, A])
    s = fc.stats()
    assert (s["total"], s["alpha"], s["omega"]) == (4, 3, 1)
    assert s["p_alpha"] == 75.0
    assert s["total_predictions"] == 12
