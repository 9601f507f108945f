import pytest

from wordle_score.services.scores.scoring import compute_score, record_array, to_render_data
from wordle_score.services.scores.types import FAILED, OUTCOMES, Attempts, PersonScore


def A(n):
    return Attempts(n)


def test_empty_record_scores_zero():
    assert compute_score({}) == PersonScore(total_score=0, days_played=0, uncounted_fails=0)


def test_contiguous_solved_days_sum():
    record = {5: A(3), 6: A(4), 7: A(1), 8: A(6)}
    assert compute_score(record).total_score == 14
    assert compute_score(record).days_played == 4


def test_gap_multiplies_running_total():
    # day 2 missing: (1) * 3 + 2
    score = compute_score({1: A(1), 3: A(2)})
    assert score == PersonScore(total_score=5, days_played=2, uncounted_fails=0)


def test_fail_penalty_is_paid_by_next_solved_day():
    score = compute_score({1: FAILED, 2: A(3)})
    assert score == PersonScore(total_score=9, days_played=2, uncounted_fails=0)


def test_trailing_fails_are_reported_not_scored():
    score = compute_score({1: A(2), 2: FAILED})
    assert score == PersonScore(total_score=2, days_played=2, uncounted_fails=1)


def test_gap_does_not_close_fail_streak():
    # day1=2, day2=X, day3 gap (total 6), day4=1 pays 3**1
    score = compute_score({1: A(2), 2: FAILED, 4: A(1)})
    assert score.total_score == 2 * 3 + 3 * 1
    assert score.uncounted_fails == 0


def test_consecutive_fails_compound():
    score = compute_score({1: FAILED, 2: FAILED, 3: A(2)})
    assert score.total_score == 9 * 2


def test_only_fails():
    score = compute_score({10: FAILED, 11: FAILED})
    assert score == PersonScore(total_score=0, days_played=2, uncounted_fails=2)


def test_compute_score_is_pure():
    record = {1: A(4), 2: FAILED, 4: A(2)}
    snapshot = dict(record)
    assert compute_score(record) == compute_score(record)
    assert record == snapshot


def test_large_spans_do_not_overflow():
    score = compute_score({1: A(1), 200: A(1)})
    assert score.total_score == 3 ** 198 + 1


def test_render_data_survives_totals_past_float_range():
    score = compute_score({1: A(1), 700: A(1)})
    data = to_render_data(score)
    assert isinstance(data.score_per_day, int)
    # (3 ** 698 + 1) / 2 rounded
    assert abs(data.score_per_day * 2 - score.total_score) <= 1


def test_render_data_rounds_to_cents():
    data = to_render_data(PersonScore(total_score=7, days_played=2, uncounted_fails=0))
    assert data.score_per_day == 3.5


def test_render_data_average_excludes_uncounted_fails():
    data = to_render_data(PersonScore(total_score=10, days_played=4, uncounted_fails=1))
    assert data.score_per_day == pytest.approx(3.33)


def test_render_data_guards_all_fail_records():
    data = to_render_data(PersonScore(total_score=0, days_played=2, uncounted_fails=2))
    assert data.score_per_day == 0


def test_record_array_sorted_by_day():
    record = {9: A(2), 3: FAILED, 5: A(6)}
    assert [day for day, _ in record_array(record)] == [3, 5, 9]


def test_outcome_rejects_out_of_range_and_bool():
    for bad in (0, 7, True, 2.0, '3'):
        with pytest.raises(ValueError):
            Attempts(bad)
    assert [str(o) for o in OUTCOMES] == ['1', '2', '3', '4', '5', '6', 'X']
